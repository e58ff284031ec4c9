"""Sentry SDK initialization with the structlog-sentry bridge.

``init_sentry(dsn)`` is a no-op when the DSN is empty, and
``get_sentry_processor()`` returns the structlog processor that forwards
ERROR-level events to Sentry.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor


def init_sentry(dsn: str, environment: str = "development") -> bool:
    """Initialize the Sentry SDK.

    Args:
        dsn: Sentry DSN string.  Empty string disables Sentry.
        environment: Environment tag attached to every event.

    Returns:
        ``True`` when the SDK was initialized.
    """
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=0.1,
        send_default_pii=False,
        integrations=[
            # structlog-sentry reports errors; the stdlib integration would double them
            LoggingIntegration(event_level=None, level=None),
        ],
    )
    return True


def get_sentry_processor() -> structlog.types.Processor:
    """Return a structlog processor that forwards ERROR events to Sentry.

    Place it after ``add_log_level`` and before the renderer.
    """
    return SentryProcessor(event_level=logging.ERROR)
