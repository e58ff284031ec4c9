"""HTTP routers for the CRM REST surface."""

from influencer_crm.api.campaigns import router as campaigns_router
from influencer_crm.api.content import router as content_router
from influencer_crm.api.contracts import router as contracts_router
from influencer_crm.api.deals import router as deals_router
from influencer_crm.api.errors import register_exception_handlers
from influencer_crm.api.influencers import router as influencers_router
from influencer_crm.api.instagram import router as instagram_router
from influencer_crm.api.orders import router as orders_router

ROUTERS = [
    influencers_router,
    campaigns_router,
    deals_router,
    contracts_router,
    instagram_router,
    content_router,
    orders_router,
]

__all__ = [
    "ROUTERS",
    "campaigns_router",
    "content_router",
    "contracts_router",
    "deals_router",
    "influencers_router",
    "instagram_router",
    "orders_router",
    "register_exception_handlers",
]
