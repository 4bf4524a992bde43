"""
IANA bootstrap registry model (RFC 9224, RFC 8521).

A registry document lists services as ``[keys, urls]`` pairs
(``[contacts, tags, urls]`` for object tags). Each key shape gets its own
match-key class; all of them expose ``matches`` and ``specificity`` so the
longest-match selection lives in one place, ``Registry.match``.
"""

import ipaddress
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import InvalidFormatError, MalformedRegistryError
from ..utils.ip import IPNetwork, normalize_address
from ..utils.validators import domain_labels

IANA_BOOTSTRAP_BASE = "https://data.iana.org/rdap/"

# Lifts tag prefix matches above every suffix-only match
PREFIX_MATCH_BONUS = 1 << 16


class RegistryType(str, Enum):
    """Bootstrap registries published by IANA."""

    DNS = "dns"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    ASN = "asn"
    OBJECT_TAGS = "object-tags"

    @property
    def cache_key(self) -> str:
        """Fixed cache file name for this registry."""
        return f"{self.value}.json"

    @property
    def default_url(self) -> str:
        return f"{IANA_BOOTSTRAP_BASE}{self.value}.json"


class MatchKey(ABC):
    """A registry key that can claim a normalized query value."""

    @abstractmethod
    def matches(self, value: Any) -> bool:
        """Return True if this key covers ``value``."""

    @property
    @abstractmethod
    def specificity(self) -> int:
        """Higher values win when several keys match."""

    def rank(self, value: Any) -> int:
        """Precedence of this key for a value it matches."""
        return self.specificity


@dataclass(frozen=True)
class CidrKey(MatchKey):
    """An IPv4 or IPv6 network block."""

    network: IPNetwork

    @classmethod
    def parse(cls, text: str) -> "CidrKey":
        return cls(normalize_address(text))

    def matches(self, value: Any) -> bool:
        if not isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            return False
        if value.version != self.network.version:
            return False
        return value.subnet_of(self.network)

    @property
    def specificity(self) -> int:
        return self.network.prefixlen

    def __str__(self) -> str:
        return str(self.network)


@dataclass(frozen=True)
class DomainSuffixKey(MatchKey):
    """A domain suffix compared on label boundaries."""

    labels: tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> "DomainSuffixKey":
        labels = domain_labels(text)
        if not labels or any(not label for label in labels):
            raise ValueError(f"Invalid domain key: {text!r}")
        return cls(labels)

    def matches(self, value: Any) -> bool:
        if not isinstance(value, tuple) or len(self.labels) > len(value):
            return False
        return value[len(value) - len(self.labels):] == self.labels

    @property
    def specificity(self) -> int:
        return len(self.labels)

    def __str__(self) -> str:
        return ".".join(self.labels)


@dataclass(frozen=True)
class AsnRangeKey(MatchKey):
    """An inclusive range of AS numbers."""

    lo: int
    hi: int

    @classmethod
    def parse(cls, text: str) -> "AsnRangeKey":
        lo_text, sep, hi_text = text.strip().partition("-")
        if not lo_text.isdigit() or (sep and not hi_text.isdigit()):
            raise ValueError(f"Invalid ASN range: {text!r}")
        lo = int(lo_text)
        hi = int(hi_text) if sep else lo
        if lo > hi:
            raise ValueError(f"Inverted ASN range: {text!r}")
        return cls(lo, hi)

    def matches(self, value: Any) -> bool:
        return isinstance(value, int) and self.lo <= value <= self.hi

    @property
    def specificity(self) -> int:
        # Narrowest range wins
        return -(self.hi - self.lo)

    def __str__(self) -> str:
        return str(self.lo) if self.lo == self.hi else f"{self.lo}-{self.hi}"


@dataclass(frozen=True)
class TagPrefixKey(MatchKey):
    """
    An object tag.

    Matches a handle that starts with the tag, or that ends with ``-TAG``
    as RFC 8521 handles do (``ABC123-ARIN``). Case-insensitive. Any prefix
    match outranks a suffix-only match.
    """

    tag: str

    @classmethod
    def parse(cls, text: str) -> "TagPrefixKey":
        tag = text.strip()
        if not tag:
            raise ValueError("Empty object tag")
        return cls(tag)

    def matches(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        handle = value.upper()
        tag = self.tag.upper()
        return handle.startswith(tag) or handle.endswith(f"-{tag}")

    @property
    def specificity(self) -> int:
        return len(self.tag)

    def rank(self, value: Any) -> int:
        if value.upper().startswith(self.tag.upper()):
            return self.specificity + PREFIX_MATCH_BONUS
        return self.specificity

    def __str__(self) -> str:
        return self.tag


def parse_key(registry_type: RegistryType, text: str) -> MatchKey:
    """Build the match key for one registry key string."""
    if registry_type in (RegistryType.IPV4, RegistryType.IPV6):
        key = CidrKey.parse(text)
        expected_version = 4 if registry_type is RegistryType.IPV4 else 6
        if key.network.version != expected_version:
            raise ValueError(f"{text!r} does not belong in the {registry_type.value} registry")
        return key
    if registry_type is RegistryType.DNS:
        return DomainSuffixKey.parse(text)
    if registry_type is RegistryType.ASN:
        return AsnRangeKey.parse(text)
    return TagPrefixKey.parse(text)


@dataclass(frozen=True)
class RegistryEntry:
    """One published service: its match keys and ordered base URLs."""

    keys: tuple[MatchKey, ...]
    urls: tuple[str, ...]


def _string_list(value: Any, what: str, index: int) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedRegistryError(f"Service {index}: {what} must be a list of strings")
    return value


@dataclass(frozen=True)
class Registry:
    """A parsed bootstrap registry of a single type."""

    registry_type: RegistryType
    entries: tuple[RegistryEntry, ...]
    version: str | None = None
    publication: str | None = None
    description: str | None = None

    @classmethod
    def from_bytes(cls, registry_type: RegistryType, data: bytes) -> "Registry":
        """
        Parse a bootstrap registry document.

        Raises:
            MalformedRegistryError: if the bytes are not a bootstrap document.
        """
        try:
            document = json.loads(data)
        except ValueError as e:
            raise MalformedRegistryError(
                f"Invalid JSON in {registry_type.value} registry: {e}"
            ) from e

        if not isinstance(document, dict):
            raise MalformedRegistryError("Registry document must be a JSON object")
        services = document.get("services")
        if not isinstance(services, list):
            raise MalformedRegistryError("Registry document has no services list")

        # Object tags carry a leading contacts element
        width = 3 if registry_type is RegistryType.OBJECT_TAGS else 2

        entries = []
        for index, service in enumerate(services):
            if not isinstance(service, list) or len(service) != width:
                raise MalformedRegistryError(
                    f"Service {index}: expected a list of {width} elements"
                )
            key_texts = _string_list(service[-2], "keys", index)
            urls = _string_list(service[-1], "urls", index)
            if not urls:
                raise MalformedRegistryError(f"Service {index}: no base URLs")
            try:
                keys = tuple(parse_key(registry_type, text) for text in key_texts)
            except (InvalidFormatError, ValueError) as e:
                raise MalformedRegistryError(f"Service {index}: {e}") from e
            entries.append(RegistryEntry(keys=keys, urls=tuple(urls)))

        return cls(
            registry_type=registry_type,
            entries=tuple(entries),
            version=document.get("version"),
            publication=document.get("publication"),
            description=document.get("description"),
        )

    def match(self, value: Any) -> tuple[RegistryEntry, MatchKey] | None:
        """
        Find the most specific entry covering a normalized query value.

        Ties go to the entry declared first in the document.
        """
        best: tuple[RegistryEntry, MatchKey] | None = None
        best_rank = 0
        for entry in self.entries:
            for key in entry.keys:
                if not key.matches(value):
                    continue
                rank = key.rank(value)
                if best is None or rank > best_rank:
                    best = (entry, key)
                    best_rank = rank
        return best
