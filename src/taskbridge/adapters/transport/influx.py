"""HTTP delivery of data points to a line protocol write endpoint.

Works with any endpoint that accepts InfluxDB line protocol with token
authentication (InfluxDB 2.x /api/v2/write, Grafana Cloud, and similar).
"""

import logging
from collections.abc import Iterable
from types import TracebackType

import httpx

from taskbridge.core.config import BridgeConfig
from taskbridge.core.encoding.line_protocol import encode_lines
from taskbridge.core.errors import ConfigurationError, TransportError, UpstreamError
from taskbridge.core.models import DataPoint

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"
MAX_ERROR_BODY = 500


def _with_precision(url: str) -> str:
    """Ask the endpoint to read timestamps as milliseconds."""
    if "precision=" in url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}precision=ms"


def _truncate(text: str, limit: int = MAX_ERROR_BODY) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class InfluxLineClient:
    """Sends batches of data points as one line protocol write request.

    Example:
        ```python
        async with InfluxLineClient() as client:
            await client.send(points, config, explicit=True)
        ```

    Args:
        http_client: Client used for requests. If omitted, one is created
            and closed by aclose().
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient()

    async def __aenter__(self) -> "InfluxLineClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def send(
        self,
        points: DataPoint | Iterable[DataPoint],
        config: BridgeConfig,
        *,
        explicit: bool = False,
    ) -> int:
        """Encode points and write them in a single request.

        Args:
            points: One DataPoint or an iterable of them.
            config: Endpoint URL, token and measurement settings.
            explicit: True for user-triggered calls. A missing URL or token
                then raises instead of being skipped silently.

        Returns:
            Number of lines written. 0 if nothing was sent.

        Raises:
            ConfigurationError: URL or token missing and explicit is True, or
                not representable in a request.
            UpstreamError: The endpoint returned a non-success status.
            TransportError: The request failed before a response arrived.
        """
        if not config.is_complete:
            if explicit:
                raise ConfigurationError("Please enter complete URL and Token.")
            logger.info("Sync skipped: endpoint URL or auth token is not configured")
            return 0

        if isinstance(points, DataPoint):
            points = [points]
        lines = encode_lines(points)
        if not lines:
            logger.debug("Sync skipped: no encodable points")
            return 0

        body = "\n".join(lines)
        logger.debug("Payload preview:\n%s", body)

        try:
            response = await self._http.post(
                _with_precision(config.endpoint_url),
                content=body.encode("utf-8"),
                headers={
                    "Authorization": f"Token {config.auth_token}",
                    "Content-Type": CONTENT_TYPE,
                },
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Write request failed: %s", exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # Header values must be ASCII; httpx raises UnicodeEncodeError.
            logger.error("Write request could not be built: %s", exc)
            raise ConfigurationError(
                f"Endpoint URL or token contains invalid characters: {exc}"
            ) from exc

        if not response.is_success:
            error = UpstreamError(
                response.status_code, response.reason_phrase, _truncate(response.text)
            )
            logger.error("Upstream rejected write: %s", error)
            raise error

        logger.info("Data written to endpoint", extra={"lines": len(lines)})
        return len(lines)
