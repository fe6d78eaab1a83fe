"""Tests for BridgeConfig."""

import dataclasses
import json

import pytest

from taskbridge.core.config import BridgeConfig


class TestBridgeConfig:
    """Tests for construction and completeness."""

    @pytest.mark.core
    def test_defaults(self) -> None:
        config = BridgeConfig()

        assert config.endpoint_url == ""
        assert config.auth_token == ""
        assert config.measurement_name == "tasks"
        assert not config.is_complete

    @pytest.mark.core
    @pytest.mark.parametrize(
        ("url", "token", "complete"),
        [
            ("http://x", "t", True),
            ("http://x", "", False),
            ("", "t", False),
        ],
    )
    def test_is_complete(self, url: str, token: str, complete: bool) -> None:
        assert BridgeConfig(url, token).is_complete is complete

    @pytest.mark.core
    def test_is_immutable(self) -> None:
        config = BridgeConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.endpoint_url = "http://x"  # type: ignore[misc]

    @pytest.mark.core
    def test_repr_hides_token(self) -> None:
        assert "secret" not in repr(BridgeConfig("http://x", "secret"))


class TestBridgeConfigParsing:
    """Tests for building configs from mappings, JSON and the environment."""

    @pytest.mark.core
    def test_from_mapping_camel_case(self) -> None:
        config = BridgeConfig.from_mapping(
            {"endpointUrl": "http://x", "authToken": "t", "measurementName": "m"}
        )

        assert config == BridgeConfig("http://x", "t", "m")

    @pytest.mark.core
    def test_from_mapping_legacy_keys(self) -> None:
        config = BridgeConfig.from_mapping(
            {"url": "http://x", "token": "t", "measurement": "m"}
        )

        assert config == BridgeConfig("http://x", "t", "m")

    @pytest.mark.core
    def test_from_mapping_ignores_non_strings(self) -> None:
        config = BridgeConfig.from_mapping({"endpointUrl": 42, "authToken": None})

        assert config == BridgeConfig()

    @pytest.mark.core
    def test_json_round_trip(self) -> None:
        config = BridgeConfig("http://x", "t", "m")

        assert BridgeConfig.from_json(config.to_json()) == config

    @pytest.mark.core
    def test_to_dict_uses_camel_case(self) -> None:
        assert BridgeConfig("http://x", "t", "m").to_dict() == {
            "endpointUrl": "http://x",
            "authToken": "t",
            "measurementName": "m",
        }

    @pytest.mark.core
    def test_from_json_rejects_non_object(self) -> None:
        with pytest.raises(ValueError, match="not a JSON object"):
            BridgeConfig.from_json(json.dumps(["a"]))

    @pytest.mark.core
    def test_from_json_rejects_malformed(self) -> None:
        with pytest.raises(ValueError):
            BridgeConfig.from_json("{not json")

    @pytest.mark.core
    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TASKBRIDGE_URL", " http://x ")
        monkeypatch.setenv("TASKBRIDGE_TOKEN", "t")
        monkeypatch.delenv("TASKBRIDGE_MEASUREMENT", raising=False)

        config = BridgeConfig.from_env()

        assert config == BridgeConfig("http://x", "t", "tasks")

    @pytest.mark.core
    def test_from_env_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_URL", "http://y")
        monkeypatch.setenv("APP_TOKEN", "u")
        monkeypatch.setenv("APP_MEASUREMENT", "work")

        assert BridgeConfig.from_env("APP") == BridgeConfig("http://y", "u", "work")

