"""Application entry point for the influencer CRM HTTP service.

Configures:
- **structlog** with JSON rendering (production) or colored console (development),
  forwarding ERROR events to Sentry when a DSN is set
- **Supabase** stores for every aggregate, shared through ``app.state.services``
- **Shopify** client with env-or-database token resolution
- **Instagram** lookups (RapidAPI, Apify) and the tagged-content scraper
- **Retry alerts** to Slack when a bot token is configured
- **Prometheus** metrics, request IDs and health/readiness checks
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from influencer_crm.api import ROUTERS, register_exception_handlers
from influencer_crm.config import Settings, get_settings, validate_credentials
from influencer_crm.health import register_health_routes
from influencer_crm.instagram.apify import ApifyInstagramClient
from influencer_crm.instagram.content import TaggedContentScraper
from influencer_crm.instagram.lookup import RapidApiInstagramClient
from influencer_crm.observability.metrics import setup_metrics
from influencer_crm.observability.middleware import SERVICE_NAME, RequestIdMiddleware
from influencer_crm.observability.sentry import get_sentry_processor, init_sentry
from influencer_crm.resilience.retry import configure_error_notifier
from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.shopify.sync import OrderStatusSyncer
from influencer_crm.shopify.token import ShopifyTokenProvider
from influencer_crm.shopify.webhook import router as shopify_webhook_router
from influencer_crm.store.app_settings import AppSettingsStore
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.client import create_supabase_client
from influencer_crm.store.content import ContentStore
from influencer_crm.store.contracts import ContractStore
from influencer_crm.store.deals import DealStore
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.media_kits import MediaKitStore
from influencer_crm.store.orders import OrderStore

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        sentry_enabled: Insert the Sentry processor before the renderer.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


def initialize_services(settings: Settings | None = None) -> dict[str, Any]:
    """Set up all shared services for the application.

    Creates the Supabase client and stores (if credentials are available),
    the Slack alerter for retry exhaustion, a shared ``httpx.AsyncClient``,
    the Shopify client and order poller, and the Instagram clients.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        A dict of initialized service instances keyed by name.  Entries whose
        credentials are missing are ``None``.
    """
    if settings is None:
        settings = get_settings()

    services: dict[str, Any] = {"_settings": settings}

    # a. Slack alerts for retry exhaustion
    slack_bot_token = settings.slack_bot_token.get_secret_value()
    slack_alerter = None
    if slack_bot_token and settings.slack_alerts_channel:
        from influencer_crm.slack.client import SlackAlerter

        slack_alerter = SlackAlerter(channel=settings.slack_alerts_channel, bot_token=slack_bot_token)
        configure_error_notifier(slack_alerter)
        logger.info("slack_alerter_initialized")
    else:
        logger.info("slack_alerter_disabled")
    services["slack_alerter"] = slack_alerter

    # b. Supabase stores
    supabase = None
    if settings.supabase_url and settings.supabase_service_role_key.get_secret_value():
        supabase = create_supabase_client(settings)
    else:
        logger.warning("supabase_not_configured")
    services["supabase"] = supabase

    stores: dict[str, Any] = {
        "influencer_store": InfluencerStore,
        "campaign_store": CampaignStore,
        "deal_store": DealStore,
        "contract_store": ContractStore,
        "order_store": OrderStore,
        "content_store": ContentStore,
        "media_kit_store": MediaKitStore,
        "app_settings_store": AppSettingsStore,
    }
    for name, store_cls in stores.items():
        services[name] = store_cls(supabase) if supabase is not None else None

    # c. Shared HTTP client for photo proxying and media downloads
    http_client = httpx.AsyncClient(timeout=30.0, follow_redirects=True)
    services["http_client"] = http_client

    # d. Shopify
    token_provider = ShopifyTokenProvider(settings, services["app_settings_store"])
    shopify_client = ShopifyClient(
        settings.shopify_store_url,
        token_provider,
        api_version=settings.shopify_api_version,
    )
    services["shopify_client"] = shopify_client
    services["order_syncer"] = (
        OrderStatusSyncer(services["order_store"], shopify_client) if supabase is not None else None
    )

    # e. Instagram
    services["rapidapi_client"] = RapidApiInstagramClient(
        settings.rapidapi_key.get_secret_value(), http=http_client
    )
    apify_client = ApifyInstagramClient(settings.apify_api_token.get_secret_value())
    services["apify_client"] = apify_client

    content_scraper = None
    if supabase is not None:
        content_scraper = TaggedContentScraper(
            apify=apify_client,
            influencers=services["influencer_store"],
            campaigns=services["campaign_store"],
            content=services["content_store"],
            http=http_client,
            brand_handle=settings.brand_instagram_handle,
        )
    services["content_scraper"] = content_scraper

    return services


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager for FastAPI startup and shutdown.

    On shutdown: closes the shared HTTP clients.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    services = app.state.services
    logger.info("fastapi_application_starting")
    yield
    shopify_client = services.get("shopify_client")
    if shopify_client is not None:
        await shopify_client.aclose()
    http_client = services.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    logger.info("http_clients_closed")


def create_app(services: dict[str, Any]) -> FastAPI:
    """Create the FastAPI app with routers, middleware, metrics and health checks.

    Args:
        services: The initialized services dict from ``initialize_services``.

    Returns:
        The configured FastAPI application.
    """
    fastapi_app = FastAPI(title="Influencer CRM", lifespan=lifespan)
    fastapi_app.state.services = services
    fastapi_app.state.settings = services.get("_settings") or get_settings()

    fastapi_app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(shopify_webhook_router)
    for router in ROUTERS:
        fastapi_app.include_router(router)
    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)

    return fastapi_app


def main() -> None:
    """Main entry point: configure logging, build services, serve with uvicorn."""
    settings = get_settings()
    environment = "production" if settings.production else "development"
    sentry_enabled = init_sentry(settings.sentry_dsn, environment=environment)
    configure_logging(production=settings.production, sentry_enabled=sentry_enabled)
    logger.info("application_starting", environment=environment)

    validate_credentials(settings)

    services = initialize_services(settings)
    fastapi_app = create_app(services)

    uvicorn.run(fastapi_app, host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
