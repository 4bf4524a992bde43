"""
Classified queries and resolution results.
"""

import ipaddress
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from .bootstrap import RegistryType


@dataclass(frozen=True)
class Query:
    """
    A classified, normalized identifier.

    ``value`` depends on the registry type: an ``IPv4Network`` or
    ``IPv6Network`` for addresses, a tuple of lowercase labels for domains,
    an int for ASNs and the handle string for entities.
    """

    identifier: str
    registry_type: RegistryType
    value: Any

    @property
    def normalized(self) -> str:
        if self.registry_type is RegistryType.DNS:
            return ".".join(self.value)
        if isinstance(self.value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            if self.value.prefixlen == self.value.max_prefixlen:
                return str(self.value.network_address)
            return str(self.value)
        return str(self.value)

    @property
    def rdap_path(self) -> str:
        """Path of the RDAP resource, relative to a base URL."""
        prefixes = {
            RegistryType.DNS: "domain",
            RegistryType.IPV4: "ip",
            RegistryType.IPV6: "ip",
            RegistryType.ASN: "autnum",
            RegistryType.OBJECT_TAGS: "entity",
        }
        return f"{prefixes[self.registry_type]}/{self.normalized}"


class ResolvedService(BaseModel):
    """The service responsible for an identifier."""

    identifier: str = Field(..., description="Identifier as given by the caller")
    normalized: str = Field(..., description="Canonical form used for matching")
    registry_type: RegistryType
    urls: list[str] = Field(..., description="Base URLs in declared preference order")
    specificity: int = Field(0, description="Specificity of the winning match key")
    matched_key: str | None = Field(None, description="Registry key that matched")
    source: str = Field("registry", description="'registry' or 'override'")
