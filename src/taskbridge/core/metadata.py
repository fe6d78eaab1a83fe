"""Id to display-name lookup tables for projects and tags."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from taskbridge.core.errors import CacheRefreshError
from taskbridge.core.ports import TaskHostPort

logger = logging.getLogger(__name__)

UNASSIGNED_PROJECT = "Unassigned"


@dataclass(frozen=True)
class _Snapshot:
    projects: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)


def _build_table(items: Sequence[Mapping[str, Any]]) -> dict[str, str]:
    table: dict[str, str] = {}
    for item in items:
        if not isinstance(item, Mapping) or item.get("id") is None:
            continue
        title = item.get("title")
        if title:
            table[str(item["id"])] = str(title)
    return table


class MetadataCache:
    """Project and tag names, refreshed wholesale from the host.

    Both tables live in one immutable snapshot. A refresh builds a new
    snapshot and swaps it in, so readers never see projects from one
    refresh paired with tags from another.
    """

    def __init__(self, host: TaskHostPort) -> None:
        self._host = host
        self._snapshot = _Snapshot()

    @property
    def project_count(self) -> int:
        return len(self._snapshot.projects)

    @property
    def tag_count(self) -> int:
        return len(self._snapshot.tags)

    async def _fetch(self) -> _Snapshot:
        try:
            projects, tags = await asyncio.gather(
                self._host.fetch_projects(),
                self._host.fetch_tags(),
            )
            return _Snapshot(projects=_build_table(projects), tags=_build_table(tags))
        except Exception as exc:
            raise CacheRefreshError(f"Metadata fetch failed: {exc}") from exc

    async def refresh(self) -> bool:
        """Replace both lookup tables with the host's current lists.

        Returns:
            True if the tables were replaced. False if fetching failed, in
            which case the previous tables stay in effect.
        """
        try:
            snapshot = await self._fetch()
        except CacheRefreshError as exc:
            logger.warning("Metadata cache refresh abandoned: %s", exc)
            return False
        self._snapshot = snapshot
        logger.debug(
            "Metadata cache refreshed",
            extra={"projects": len(snapshot.projects), "tags": len(snapshot.tags)},
        )
        return True

    def lookup_project_name(self, project_id: object) -> str:
        """Return the project title, or "Unassigned" if unknown."""
        if project_id is None:
            return UNASSIGNED_PROJECT
        return self._snapshot.projects.get(str(project_id)) or UNASSIGNED_PROJECT

    def lookup_tag_name(self, tag_id: object) -> str:
        """Return the tag title, falling back to the raw id.

        A missing id yields an empty string.
        """
        if tag_id is None:
            return ""
        key = str(tag_id)
        return self._snapshot.tags.get(key) or key
