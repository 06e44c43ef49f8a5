"""Optional Sentry reporting, switched on by a real ``SENTRY_DSN``."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from formaflow.core.logging import get_logger

logger = get_logger(__name__)

_enabled = False


def _configured_dsn() -> str | None:
    dsn = os.getenv("SENTRY_DSN", "").strip()
    if not dsn:
        logger.info("sentry.disabled", reason="SENTRY_DSN not set")
        return None
    # .env templates ship values like "your-dsn-here"
    if not dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", reason="SENTRY_DSN is not a URL")
        return None
    return dsn


def init_sentry() -> bool:
    """Initialize the SDK once; returns whether Sentry is active.

    Errors only: no tracing and no PII. structlog owns logging, so the
    logging integration neither adds breadcrumbs nor creates events.
    """
    global _enabled
    if _enabled:
        return True

    dsn = _configured_dsn()
    if dsn is None:
        return False

    environment = os.getenv("ENVIRONMENT", "development")
    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
        )
    except BadDsn as exc:
        logger.warning("sentry.init_failed", error=str(exc))
        return False

    _enabled = True
    logger.info("sentry.initialized", environment=environment)
    return True
