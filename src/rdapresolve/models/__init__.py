"""Data models for bootstrap registries, queries and RDAP results."""

from .bootstrap import (
    AsnRangeKey,
    CidrKey,
    DomainSuffixKey,
    MatchKey,
    Registry,
    RegistryEntry,
    RegistryType,
    TagPrefixKey,
)
from .query import Query, ResolvedService
from .rdap_models import RDAPResult, VCard, VCardAddress, VCardProperty

__all__ = [
    "AsnRangeKey",
    "CidrKey",
    "DomainSuffixKey",
    "MatchKey",
    "Registry",
    "RegistryEntry",
    "RegistryType",
    "TagPrefixKey",
    "Query",
    "ResolvedService",
    "RDAPResult",
    "VCard",
    "VCardAddress",
    "VCardProperty",
]
