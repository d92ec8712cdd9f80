"""Readiness checks for the database and the catalog providers."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession

from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class HealthCheckResult:
    name: str
    status: str  # "ok", "degraded" or "error"
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status, "details": self.details}
        if self.error:
            body["error"] = self.error
        return body


async def check_database(session: AsyncSession, timeout: float = 5.0) -> HealthCheckResult:
    """Round-trip ``SELECT 1`` and report its latency."""
    started = time.perf_counter()
    try:
        await asyncio.wait_for(session.exec(text("SELECT 1")), timeout=timeout)
    except asyncio.TimeoutError:
        return HealthCheckResult("database", "error", error=f"no answer within {timeout}s")
    except Exception as e:
        logger.error("Database readiness check failed", exc_info=True)
        return HealthCheckResult("database", "error", error=str(e)[:200])

    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return HealthCheckResult("database", "ok", details={"latency_ms": latency_ms})


def check_catalog_providers(aggregator) -> HealthCheckResult:
    """
    Report which catalog categories have a provider. Makes no outbound call;
    a category without one only degrades search.
    """
    configured = {
        category: provider.provider_id if provider is not None else None
        for category, provider in aggregator.providers.items()
    }
    disabled = [category for category, provider_id in configured.items() if provider_id is None]
    return HealthCheckResult(
        "catalog_providers",
        "degraded" if disabled else "ok",
        details={"providers": configured, "disabled": disabled},
    )
