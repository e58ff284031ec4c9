"""Resilience infrastructure for API calls with retry and error notification."""

from influencer_crm.resilience.retry import (
    configure_error_notifier,
    is_transient,
    resilient_api_call,
)

__all__ = [
    "configure_error_notifier",
    "is_transient",
    "resilient_api_call",
]
