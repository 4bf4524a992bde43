"""
Unit tests for rdapresolve.config
"""

from pathlib import Path

import pytest

from rdapresolve.config import Config, parse_tld_overrides


class TestConfigFromEnv:
    """Test suite for environment-driven defaults."""

    def test_defaults(self, monkeypatch):
        for name in ("RDAP_CACHE_DIR", "RDAP_CACHE_TTL", "RDAP_TLD_OVERRIDES", "RDAP_SERVE_STALE"):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_env()
        assert config.cache_dir is None
        assert config.cache_ttl == 86400
        assert config.serve_stale is True
        assert config.tld_overrides == {}

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RDAP_CACHE_DIR", str(tmp_path))
        monkeypatch.setenv("RDAP_CACHE_TTL", "60")
        monkeypatch.setenv("RDAP_SERVE_STALE", "no")
        monkeypatch.setenv("RDAP_BOOTSTRAP_DNS_URL", "https://mirror.local/dns.json")
        monkeypatch.setenv("RDAP_TLD_OVERRIDES", "test=https://rdap.local/")

        config = Config.from_env()
        assert config.cache_dir == Path(tmp_path)
        assert config.cache_ttl == 60
        assert config.serve_stale is False
        assert config.bootstrap_urls["dns"] == "https://mirror.local/dns.json"
        assert config.tld_overrides == {"test": ["https://rdap.local/"]}

    def test_to_dict(self, config):
        data = config.to_dict()
        assert data["cache_ttl"] == 3600
        assert data["cache_dir"] == str(config.cache_dir)


class TestParseTldOverrides:
    """Test suite for TLD override parsing."""

    def test_multiple_urls(self):
        assert parse_tld_overrides("Co.UK.=https://a/|https://b/, dev=https://c/") == {
            "co.uk": ["https://a/", "https://b/"],
            "dev": ["https://c/"],
        }

    def test_empty(self):
        assert parse_tld_overrides("") == {}

    @pytest.mark.parametrize("value", ["dev", "=https://a/", "dev="])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_tld_overrides(value)


class TestConfigValidate:
    """Test suite for Config.validate."""

    def test_valid(self, config):
        config.validate()

    @pytest.mark.parametrize(
        "field_name, value",
        [
            ("cache_ttl", 0),
            ("rdap_timeout", -1),
            ("max_concurrent_lookups", 0),
            ("bootstrap_urls", {"whois": "https://x/"}),
            ("tld_overrides", {"dev": []}),
            ("log_level", "LOUD"),
        ],
    )
    def test_invalid(self, config, field_name, value):
        setattr(config, field_name, value)
        with pytest.raises(ValueError):
            config.validate()
