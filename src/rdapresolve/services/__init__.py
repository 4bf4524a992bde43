"""Resolution, caching and RDAP query services."""

from .bootstrap_service import BootstrapResolver, classify
from .cache_service import CacheService
from .concurrent_service import ConcurrentResolveService
from .rdap_service import RDAPService
from .registry_fetcher import RegistryFetcher

__all__ = [
    "BootstrapResolver",
    "CacheService",
    "ConcurrentResolveService",
    "RDAPService",
    "RegistryFetcher",
    "classify",
]
