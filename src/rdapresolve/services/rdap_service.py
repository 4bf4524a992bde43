"""
RDAP (Registration Data Access Protocol) service implementation.
Queries the servers chosen by bootstrap discovery for structured data.
"""

from typing import Any

import httpx
import structlog

from .. import __version__
from ..config import Config
from ..errors import RDAPQueryError
from ..models.bootstrap import RegistryType
from ..models.query import ResolvedService
from ..models.rdap_models import RDAPResult
from .bootstrap_service import BootstrapResolver, classify

logger = structlog.get_logger(__name__)


class ResourceNotFoundError(RDAPQueryError):
    """The RDAP server answered 404 for the resource."""


class RDAPService:
    """Asynchronous RDAP client that tries each resolved mirror in turn."""

    def __init__(
        self,
        config: Config,
        resolver: BootstrapResolver | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._owns_resolver = resolver is None
        self.resolver = resolver or BootstrapResolver(config)
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.rdap_timeout),
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                headers={
                    "User-Agent": f"rdapresolve/{__version__}",
                    "Accept": "application/rdap+json, application/json",
                },
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http_client

    async def lookup(
        self, identifier: str, query_type: RegistryType | None = None
    ) -> RDAPResult:
        """
        Perform an RDAP lookup for any identifier.

        Resolution errors (invalid input, registry problems, no authority)
        propagate. Server failures are reported in the returned result.
        """
        query = classify(identifier, query_type)
        service = await self.resolver.resolve_query(query)

        logger.info(
            "Starting RDAP lookup",
            target=query.normalized,
            registry_type=query.registry_type.value,
        )

        try:
            server, response = await self._query_servers(service, query.rdap_path)
        except RDAPQueryError as e:
            logger.error("RDAP lookup failed", target=query.normalized, error=str(e))
            return RDAPResult(
                target=query.normalized,
                target_type=query.registry_type.value,
                rdap_server="unknown",
                success=False,
                error=str(e),
            )

        logger.info("RDAP lookup completed successfully", target=query.normalized, server=server)
        return RDAPResult(
            target=query.normalized,
            target_type=query.registry_type.value,
            rdap_server=server,
            response_data=response,
            success=True,
        )

    async def _query_servers(
        self, service: ResolvedService, path: str
    ) -> tuple[str, dict[str, Any]]:
        """Try each base URL until one answers."""
        last_error: RDAPQueryError | None = None
        for server in service.urls:
            try:
                return server, await self._query_rdap_server(server, path)
            except RDAPQueryError as e:
                last_error = e
                logger.warning(
                    "RDAP server failed, trying next",
                    server=server,
                    path=path,
                    error=str(e),
                )

        # Preserve not-found when that is the last answer we got
        if isinstance(last_error, ResourceNotFoundError):
            raise ResourceNotFoundError(f"Resource not found: {path}") from last_error
        raise RDAPQueryError("All RDAP servers failed") from last_error

    async def _query_rdap_server(self, server: str, path: str) -> dict[str, Any]:
        """Query an RDAP server and return parsed response."""
        if not server.endswith("/"):
            server += "/"
        url = f"{server}{path}"

        client = await self._get_http_client()
        try:
            response = await client.get(url)

            if response.history:
                logger.debug(
                    "RDAP request redirected",
                    original_url=url,
                    final_url=str(response.url),
                    redirect_count=len(response.history),
                )

            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise RDAPQueryError(f"RDAP query timeout for {server}") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ResourceNotFoundError(f"Resource not found: {path}") from e
            raise RDAPQueryError(
                f"RDAP server error {e.response.status_code}: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise RDAPQueryError(f"RDAP query failed: {e}") from e
        except ValueError as e:
            raise RDAPQueryError(f"Invalid JSON response from RDAP server: {e}") from e

        if not isinstance(data, dict):
            raise RDAPQueryError("Invalid RDAP response format")

        logger.debug("RDAP query successful", server=server, path=path)
        return data

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
        # An injected resolver stays open for its owner
        if self._owns_resolver:
            await self.resolver.close()
