"""Prometheus metrics instrumentation for the influencer CRM.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus the business counters.
- ``SHOPIFY_WEBHOOKS``: Counter of verified Shopify webhooks by topic.
- ``ORDER_STATUS_UPDATES``: Counter of tracking rows written, by source.
- ``CONTENT_SAVED``: Counter of scraped content items stored.

Counters are incremented where the work happens, not by polling the database.
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

SHOPIFY_WEBHOOKS: Counter = Counter(
    "crm_shopify_webhooks_total",
    "Verified Shopify webhooks received",
    ["topic"],
)

ORDER_STATUS_UPDATES: Counter = Counter(
    "crm_order_status_updates_total",
    "Order-tracking rows updated",
    ["source"],
)

CONTENT_SAVED: Counter = Counter(
    "crm_content_saved_total",
    "Scraped Instagram content items stored",
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    Excludes health/ready/metrics endpoints from instrumentation to avoid
    noise in dashboards.

    Args:
        app: The FastAPI application to instrument.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
