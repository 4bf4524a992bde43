"""
Downloads bootstrap registry documents over HTTPS.
"""

import httpx
import structlog

from .. import __version__
from ..config import Config
from ..errors import RegistryFetchError
from ..models.bootstrap import RegistryType

logger = structlog.get_logger(__name__)


class RegistryFetcher:
    """Async retrieval collaborator: ``await fetcher(registry_type) -> bytes``."""

    def __init__(self, config: Config, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def url_for(self, registry_type: RegistryType) -> str:
        return self.config.bootstrap_urls.get(registry_type.value, registry_type.default_url)

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.rdap_timeout),
                headers={
                    "User-Agent": f"rdapresolve/{__version__}",
                    "Accept": "application/json",
                },
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http_client

    async def __call__(self, registry_type: RegistryType) -> bytes:
        url = self.url_for(registry_type)
        logger.info("Fetching bootstrap registry", registry_type=registry_type.value, url=url)

        client = await self._get_http_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise RegistryFetchError(f"Timeout fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise RegistryFetchError(
                f"Registry server error {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise RegistryFetchError(f"Failed to fetch {url}: {e}") from e

        logger.debug(
            "Bootstrap registry fetched",
            registry_type=registry_type.value,
            size=len(response.content),
        )
        return response.content

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
