"""Provider executor with status instrumentation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Tuple, TYPE_CHECKING

from catalog.models import ProviderStatusSnapshot
from observability.metrics import (
    catalog_provider_duration_seconds,
    catalog_provider_errors_total,
    catalog_provider_results,
)

if TYPE_CHECKING:
    from catalog.providers import CatalogProvider

logger = logging.getLogger(__name__)


async def run_provider_with_status(
    provider_id: str,
    provider: "CatalogProvider",
    term: str,
    *,
    timeout_seconds: float = 8.0,
) -> Tuple[List, ProviderStatusSnapshot]:
    """
    Run one provider search, never raising.

    Failures and timeouts come back as an empty result list plus a status
    snapshot, so one catalog going down does not take the other with it.
    """
    started = time.monotonic()
    try:
        results = await asyncio.wait_for(provider.search(term), timeout=timeout_seconds)
        elapsed = time.monotonic() - started
        catalog_provider_duration_seconds.labels(provider=provider_id).observe(elapsed)
        catalog_provider_results.labels(provider=provider_id).observe(len(results))
        status = ProviderStatusSnapshot(
            provider_id=provider_id,
            status="ok",
            result_count=len(results),
            latency_ms=int(elapsed * 1000),
        )
        return results, status
    except asyncio.TimeoutError:
        elapsed = time.monotonic() - started
        catalog_provider_errors_total.labels(provider=provider_id, error_type="timeout").inc()
        logger.warning("Provider %s timed out after %.2fs", provider_id, elapsed)
        status = ProviderStatusSnapshot(
            provider_id=provider_id,
            status="timeout",
            result_count=0,
            latency_ms=int(elapsed * 1000),
            message="Search timed out",
        )
        return [], status
    except Exception as e:
        elapsed = time.monotonic() - started
        catalog_provider_errors_total.labels(provider=provider_id, error_type=type(e).__name__).inc()
        logger.error("Provider %s search error: %s: %s", provider_id, type(e).__name__, e)
        status = ProviderStatusSnapshot(
            provider_id=provider_id,
            status="error",
            result_count=0,
            latency_ms=int(elapsed * 1000),
            message=f"Search failed: {str(e)[:100]}",
        )
        return [], status
