"""
Configuration management for the RDAP bootstrap resolver.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

REGISTRY_ENV_NAMES = {
    "dns": "RDAP_BOOTSTRAP_DNS_URL",
    "ipv4": "RDAP_BOOTSTRAP_IPV4_URL",
    "ipv6": "RDAP_BOOTSTRAP_IPV6_URL",
    "asn": "RDAP_BOOTSTRAP_ASN_URL",
    "object-tags": "RDAP_BOOTSTRAP_OBJECT_TAGS_URL",
}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _bootstrap_urls_from_env() -> dict[str, str]:
    """Collect per-registry bootstrap document overrides."""
    urls = {}
    for registry_type, env_name in REGISTRY_ENV_NAMES.items():
        value = os.getenv(env_name)
        if value:
            urls[registry_type] = value
    return urls


def parse_tld_overrides(value: str) -> dict[str, list[str]]:
    """
    Parse ``label=url[|url...]`` pairs separated by commas.

    ``"dev=https://rdap.example/dev/,co.uk=https://a/|https://b/"`` maps each
    lowercased label suffix to its ordered list of base URLs.
    """
    overrides: dict[str, list[str]] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        label, sep, urls = item.partition("=")
        if not sep or not label.strip() or not urls.strip():
            raise ValueError(f"Invalid TLD override: {item!r}")
        overrides[label.strip().strip(".").lower()] = [
            url.strip() for url in urls.split("|") if url.strip()
        ]
    return overrides


@dataclass
class Config:
    """Configuration for the RDAP bootstrap resolver."""

    # Cache configuration
    cache_dir: Path | None = field(
        default_factory=lambda: Path(os.environ["RDAP_CACHE_DIR"])
        if os.getenv("RDAP_CACHE_DIR")
        else None
    )  # None resolves to ~/.cache/rdap
    cache_ttl: int = field(
        default_factory=lambda: int(os.getenv("RDAP_CACHE_TTL", "86400"))
    )  # 24 hours
    serve_stale: bool = field(
        default_factory=lambda: _env_bool("RDAP_SERVE_STALE", "true")
    )

    # Registry sources
    bootstrap_urls: dict[str, str] = field(default_factory=_bootstrap_urls_from_env)
    tld_overrides: dict[str, list[str]] = field(
        default_factory=lambda: parse_tld_overrides(os.getenv("RDAP_TLD_OVERRIDES", ""))
    )

    # Timeout configuration (seconds)
    rdap_timeout: int = field(
        default_factory=lambda: int(os.getenv("RDAP_TIMEOUT", "30"))
    )

    # Concurrent lookup configuration
    max_concurrent_lookups: int = field(
        default_factory=lambda: int(os.getenv("MAX_CONCURRENT_LOOKUPS", "10"))
    )

    # Logging configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "cache_dir": str(self.cache_dir) if self.cache_dir else None,
            "cache_ttl": self.cache_ttl,
            "serve_stale": self.serve_stale,
            "bootstrap_urls": dict(self.bootstrap_urls),
            "tld_overrides": {k: list(v) for k, v in self.tld_overrides.items()},
            "rdap_timeout": self.rdap_timeout,
            "max_concurrent_lookups": self.max_concurrent_lookups,
            "log_level": self.log_level,
        }

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> None:
        """Validate configuration values."""
        if self.cache_ttl <= 0:
            raise ValueError(f"Invalid cache TTL: {self.cache_ttl}")

        if self.rdap_timeout <= 0:
            raise ValueError(f"Invalid RDAP timeout: {self.rdap_timeout}")

        if self.max_concurrent_lookups <= 0:
            raise ValueError(
                f"Invalid max concurrent lookups: {self.max_concurrent_lookups}"
            )

        unknown = set(self.bootstrap_urls) - set(REGISTRY_ENV_NAMES)
        if unknown:
            raise ValueError(f"Unknown registry types: {sorted(unknown)}")

        for label, urls in self.tld_overrides.items():
            if not urls:
                raise ValueError(f"TLD override without URLs: {label}")

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid log level: {self.log_level}")
