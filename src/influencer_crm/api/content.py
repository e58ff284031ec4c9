"""Tagged-content scrape triggers: manual, cron and Apify run webhook."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from influencer_crm.api.deps import get_service, require_cron_secret
from influencer_crm.instagram.content import TaggedContentScraper

logger = structlog.get_logger()

router = APIRouter(tags=["content"])


async def _run_scrape(request: Request, trigger: str) -> dict[str, Any]:
    scraper: TaggedContentScraper = get_service(request, "content_scraper")
    logger.info("tagged_content_scrape_started", trigger=trigger)
    report = await scraper.run()
    return report.as_response()


@router.post("/content/scrape-stories")
async def scrape_stories(request: Request) -> dict[str, Any]:
    return await _run_scrape(request, "manual")


@router.get("/content/scrape-stories", dependencies=[Depends(require_cron_secret)])
async def scrape_stories_cron(request: Request) -> dict[str, Any]:
    return await _run_scrape(request, "cron")


@router.post("/webhooks/apify-content", response_model=None)
async def apify_run_finished(request: Request) -> dict[str, Any] | JSONResponse:
    """Handle Apify's run-succeeded webhook by running a scrape."""
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("apify_webhook_invalid_json")
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})
    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    dataset_id = (payload.get("resource") or {}).get("defaultDatasetId")
    if not dataset_id:
        logger.warning("apify_webhook_missing_dataset")
        return JSONResponse(status_code=400, content={"error": "Missing dataset ID"})
    logger.info("apify_webhook_received", dataset_id=dataset_id)
    return await _run_scrape(request, "apify_webhook")
