"""Optional Sentry error reporting."""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from .logging import get_logger, get_request_id

logger = get_logger(__name__)


def init_sentry() -> bool:
    """
    Turn on Sentry when SENTRY_DSN is set and SENTRY_ENABLE is not "false".

    SENTRY_ENVIRONMENT (falls back to ENVIRONMENT), SENTRY_RELEASE and
    SENTRY_TRACES_SAMPLE_RATE tune the client. Returns whether Sentry is on.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn or os.getenv("SENTRY_ENABLE", "true").lower() == "false":
        logger.info("Sentry disabled")
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT") or os.getenv("ENVIRONMENT", "development")
    release = os.getenv("SENTRY_RELEASE", "unknown")
    default_rate = "1.0" if environment == "production" else "0.1"

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=f"rewalist-backend@{release}",
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", default_rate)),
        send_default_pii=False,
        before_send=before_send_hook,
    )
    logger.info("Sentry enabled", extra={"environment": environment, "release": release})
    return True


def before_send_hook(event, hint):
    """Skip 4xx application errors; tag the rest with the request id."""
    from exceptions import ReWaListError

    exc_info = (hint or {}).get("exc_info")
    if exc_info and isinstance(exc_info[1], ReWaListError) and exc_info[1].status_code < 500:
        return None

    request_id = get_request_id()
    if request_id:
        event.setdefault("tags", {})["request_id"] = request_id
    return event
