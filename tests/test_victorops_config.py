"""Tests for :mod:`alertrelay.victorops.config`."""

import pytest
from pydantic import ValidationError

from alertrelay.victorops import DEFAULT_URL, VictorOpsConfig


class TestVictorOpsConfig:
    """Verify defaults, aliases, and validation."""

    def test_defaults(self):
        """A bare config is disabled and points at the public endpoint."""
        c = VictorOpsConfig()
        assert c.enabled is False
        assert c.url == DEFAULT_URL
        assert c.routing_key == ""
        assert c.global_ is False

    def test_global_alias(self):
        """``global`` is accepted as the input name for ``global_``."""
        c = VictorOpsConfig.model_validate({"global": True})
        assert c.global_ is True
        assert c.model_dump(by_alias=True)["global"] is True

    def test_effective_url(self):
        """The API key is wrapped in slashes after the base URL."""
        c = VictorOpsConfig(api_key="k", url="https://x.test/alert")
        assert c.effective_url() == "https://x.test/alert/k/"

    def test_frozen(self):
        """Configs are immutable once built."""
        c = VictorOpsConfig()
        with pytest.raises(ValidationError):
            c.enabled = True

    def test_valid_enabled(self):
        """An enabled config with an API key validates."""
        VictorOpsConfig(enabled=True, api_key="k").validate_config()

    def test_disabled_without_key_is_valid(self):
        """A disabled config does not need an API key."""
        VictorOpsConfig().validate_config()

    def test_enabled_requires_api_key(self):
        """Enabling without an API key is rejected."""
        with pytest.raises(ValueError, match="api_key"):
            VictorOpsConfig(enabled=True).validate_config()

    @pytest.mark.parametrize("url", ["", "alert.victorops.com/x", "ftp://h/x"])
    def test_bad_url(self, url):
        """Relative or non-http URLs are rejected."""
        with pytest.raises(ValueError, match="invalid url"):
            VictorOpsConfig(url=url).validate_config()
