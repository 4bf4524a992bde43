"""
Bootstrap service discovery.

Classifies an identifier, loads the matching IANA bootstrap registry
through the disk cache and picks the most specific service for it.
"""

import inspect
from collections.abc import Awaitable, Callable
from datetime import timedelta

import structlog

from ..config import Config
from ..errors import (
    ClassificationAmbiguousError,
    InvalidFormatError,
    MalformedRegistryError,
    NoAuthorityFoundError,
    RegistryUnavailableError,
)
from ..models.bootstrap import Registry, RegistryType
from ..models.query import Query, ResolvedService
from ..utils.ip import is_ip_like, normalize_address
from ..utils.validators import domain_labels, is_asn, is_entity_handle, parse_asn
from .cache_service import CacheService
from .registry_fetcher import RegistryFetcher

logger = structlog.get_logger(__name__)

Fetcher = Callable[[RegistryType], bytes | Awaitable[bytes]]


def classify(identifier: str, query_type: RegistryType | None = None) -> Query:
    """
    Decide which registry an identifier belongs to and normalize it.

    Without an explicit ``query_type`` the order is: IP-like input (IPv6 if
    it has a colon, IPv4 otherwise), ``AS`` numbers, entity handles, and
    finally domain names.
    """
    text = identifier.strip()
    if not text:
        raise ClassificationAmbiguousError("Cannot classify an empty identifier")

    if query_type is None:
        if is_ip_like(text):
            query_type = RegistryType.IPV6 if ":" in text else RegistryType.IPV4
        elif is_asn(text):
            query_type = RegistryType.ASN
        elif is_entity_handle(text):
            query_type = RegistryType.OBJECT_TAGS
        else:
            query_type = RegistryType.DNS

    if query_type in (RegistryType.IPV4, RegistryType.IPV6):
        network = normalize_address(text)
        if network.version != (4 if query_type is RegistryType.IPV4 else 6):
            raise InvalidFormatError(f"{identifier!r} is not an {query_type.value} address")
        return Query(identifier, query_type, network)

    if query_type is RegistryType.ASN:
        return Query(identifier, query_type, parse_asn(text))

    if query_type is RegistryType.OBJECT_TAGS:
        if "." in text or ":" in text:
            raise InvalidFormatError(f"{identifier!r} is not an entity handle")
        return Query(identifier, query_type, text)

    labels = domain_labels(text)
    if not labels or any(not label for label in labels):
        raise ClassificationAmbiguousError(f"{identifier!r} has no usable domain labels")
    return Query(identifier, query_type, labels)


class BootstrapResolver:
    """Resolves identifiers to the base URLs of their RDAP services."""

    def __init__(
        self,
        config: Config,
        cache: CacheService | None = None,
        fetcher: Fetcher | None = None,
    ):
        self.config = config
        self.cache = cache or CacheService(
            config.cache_dir, ttl=timedelta(seconds=config.cache_ttl)
        )
        self.fetcher = fetcher or RegistryFetcher(config)

    async def _fetch(self, registry_type: RegistryType) -> bytes:
        # Fetchers may be plain functions or coroutines
        data = self.fetcher(registry_type)
        if inspect.isawaitable(data):
            data = await data
        return data

    async def _fetch_or_stale(self, registry_type: RegistryType) -> tuple[bytes, bool]:
        """Download a registry, falling back to an expired cached copy."""
        key = registry_type.cache_key
        try:
            return await self._fetch(registry_type), True
        except Exception as e:
            stale = self.cache.get_stale(key) if self.config.serve_stale else None
            if stale is None:
                raise RegistryUnavailableError(
                    f"{registry_type.value} registry unavailable: {e}"
                ) from e
            logger.warning(
                "Registry fetch failed, serving stale cache",
                registry_type=registry_type.value,
                error=str(e),
            )
            return stale, False

    async def load_registry(self, registry_type: RegistryType) -> Registry:
        """
        Load and parse a registry through the cache.

        A download is only cached once it parses. A malformed cached copy
        is discarded so the next call fetches again.
        """
        key = registry_type.cache_key
        data = self.cache.get(key, evict=False)
        fresh = False
        if data is not None:
            logger.debug("Registry cache hit", registry_type=registry_type.value)
        else:
            data, fresh = await self._fetch_or_stale(registry_type)

        try:
            registry = Registry.from_bytes(registry_type, data)
        except MalformedRegistryError:
            if fresh:
                logger.error("Malformed registry download rejected", registry_type=registry_type.value)
            else:
                logger.error("Malformed registry discarded", registry_type=registry_type.value)
                self.cache.delete(key)
            raise

        if fresh:
            self.cache.set(key, data)
        return registry

    def _override(self, query: Query) -> ResolvedService | None:
        if query.registry_type is not RegistryType.DNS or not self.config.tld_overrides:
            return None
        labels = query.value
        # Longest configured suffix first
        for start in range(len(labels)):
            suffix = ".".join(labels[start:])
            urls = self.config.tld_overrides.get(suffix)
            if urls:
                return ResolvedService(
                    identifier=query.identifier,
                    normalized=query.normalized,
                    registry_type=query.registry_type,
                    urls=list(urls),
                    specificity=len(labels) - start,
                    matched_key=suffix,
                    source="override",
                )
        return None

    async def resolve_query(self, query: Query) -> ResolvedService:
        override = self._override(query)
        if override is not None:
            logger.debug("Using configured override", identifier=query.identifier)
            return override

        registry = await self.load_registry(query.registry_type)
        match = registry.match(query.value)
        if match is None:
            raise NoAuthorityFoundError(query.identifier, query.registry_type.value)

        entry, key = match
        logger.debug(
            "Bootstrap match",
            identifier=query.identifier,
            registry_type=query.registry_type.value,
            key=str(key),
        )
        return ResolvedService(
            identifier=query.identifier,
            normalized=query.normalized,
            registry_type=query.registry_type,
            urls=list(entry.urls),
            specificity=key.specificity,
            matched_key=str(key),
        )

    async def resolve_service(
        self, identifier: str, query_type: RegistryType | None = None
    ) -> ResolvedService:
        """Classify ``identifier`` and find its authoritative service."""
        return await self.resolve_query(classify(identifier, query_type))

    async def resolve(
        self, identifier: str, query_type: RegistryType | None = None
    ) -> list[str]:
        """Base URLs for ``identifier``, in the registry's declared order."""
        service = await self.resolve_service(identifier, query_type)
        return service.urls

    async def close(self) -> None:
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result
