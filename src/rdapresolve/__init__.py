"""
rdapresolve - RDAP bootstrap service discovery.

Resolves domains, IP addresses, CIDR blocks, AS numbers and entity handles
to the RDAP servers responsible for them, using the IANA bootstrap
registries cached on disk.
"""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    CacheError,
    ClassificationAmbiguousError,
    InvalidFormatError,
    MalformedRegistryError,
    NoAuthorityFoundError,
    RdapError,
    RDAPQueryError,
    RegistryFetchError,
    RegistryUnavailableError,
)
from .models import RDAPResult, Registry, RegistryType, ResolvedService, VCard
from .services import BootstrapResolver, CacheService, RDAPService, RegistryFetcher

__all__ = [
    "Config",
    "BootstrapResolver",
    "CacheService",
    "RDAPService",
    "RegistryFetcher",
    "Registry",
    "RegistryType",
    "ResolvedService",
    "RDAPResult",
    "VCard",
    "RdapError",
    "InvalidFormatError",
    "ClassificationAmbiguousError",
    "RegistryUnavailableError",
    "RegistryFetchError",
    "MalformedRegistryError",
    "NoAuthorityFoundError",
    "CacheError",
    "RDAPQueryError",
]
