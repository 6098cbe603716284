"""Tests for switchyard.config — AppConfig defaults and immutability."""

import dataclasses

import pytest

from switchyard.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.workers == 1
        assert config.case_sensitive_routing is False
        assert config.strict_routing is False
        assert config.template_dir == "templates"

    def test_overrides(self) -> None:
        config = AppConfig(port=3000, strict_routing=True, template_dir=None)
        assert config.port == 3000
        assert config.strict_routing is True
        assert config.template_dir is None

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]
