"""
Concurrent resolution using AnyIO's structured concurrency.
Resolves many identifiers at once without unbounded fan-out.
"""

from datetime import datetime, timezone
from typing import Any

import structlog
from anyio import Semaphore, create_task_group
from pydantic import BaseModel, Field

from ..config import Config
from ..errors import RdapError
from .bootstrap_service import BootstrapResolver

logger = structlog.get_logger(__name__)


class ResolveOutcome(BaseModel):
    """Result of resolving one identifier."""

    identifier: str
    status: str  # 'success' or 'error'
    urls: list[str] = Field(default_factory=list)
    registry_type: str | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConcurrentResolveService:
    """Bulk resolution bounded by a semaphore."""

    def __init__(self, config: Config, resolver: BootstrapResolver | None = None):
        self.config = config
        self.resolver = resolver or BootstrapResolver(config)

        self.total_lookups = 0
        self.failed_lookups = 0

    async def _resolve_one(self, identifier: str, semaphore: Semaphore) -> ResolveOutcome:
        async with semaphore:
            try:
                service = await self.resolver.resolve_service(identifier)
            except RdapError as e:
                self.failed_lookups += 1
                logger.warning("Resolution failed", identifier=identifier, error=str(e))
                return ResolveOutcome(identifier=identifier, status="error", error=str(e))
            except Exception as e:
                self.failed_lookups += 1
                logger.error("Unexpected resolution error", identifier=identifier, error=str(e))
                return ResolveOutcome(identifier=identifier, status="error", error=str(e))
            finally:
                self.total_lookups += 1

        return ResolveOutcome(
            identifier=identifier,
            status="success",
            urls=service.urls,
            registry_type=service.registry_type.value,
        )

    async def bulk_resolve(
        self, identifiers: list[str], max_concurrent: int | None = None
    ) -> list[ResolveOutcome]:
        """
        Resolve every identifier concurrently.

        Results come back in input order; failures are reported per
        identifier rather than aborting the batch.
        """
        semaphore = Semaphore(max_concurrent or self.config.max_concurrent_lookups)
        results: list[ResolveOutcome | None] = [None] * len(identifiers)

        async def run(index: int, identifier: str) -> None:
            results[index] = await self._resolve_one(identifier, semaphore)

        async with create_task_group() as tg:
            for index, identifier in enumerate(identifiers):
                tg.start_soon(run, index, identifier)

        logger.info(
            "Bulk resolution completed",
            total=len(identifiers),
            failed=sum(1 for r in results if r is not None and r.status == "error"),
        )
        return [r for r in results if r is not None]

    def get_statistics(self) -> dict[str, Any]:
        """Get service statistics."""
        return {
            "total_lookups": self.total_lookups,
            "failed_lookups": self.failed_lookups,
            "success_rate": (self.total_lookups - self.failed_lookups) / self.total_lookups
            if self.total_lookups > 0
            else 0,
        }
