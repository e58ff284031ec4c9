"""Tests for domain-error to HTTP-status mapping."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from influencer_crm.api.errors import register_exception_handlers, status_for
from influencer_crm.app import create_app
from influencer_crm.domain.errors import (
    ConfigurationError,
    CRMError,
    DuplicateError,
    ExternalServiceError,
    LookupRejectedError,
    NotFoundError,
)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (NotFoundError("deal", "d1"), 404),
        (DuplicateError("influencer", "jane"), 409),
        (LookupRejectedError("Invalid username"), 400),
        (ConfigurationError("SHOPIFY_STORE_URL not configured"), 500),
        (ExternalServiceError("Shopify", "boom", 503), 502),
        (CRMError("unexpected"), 500),
    ],
)
def test_status_for(error: CRMError, status_code: int) -> None:
    assert status_for(error) == status_code


def test_handler_answers_with_error_body() -> None:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise ExternalServiceError("Apify", "run failed", 500)

    response = TestClient(app).get("/boom")

    assert response.status_code == 502
    assert response.json() == {"error": "Apify: run failed"}


def test_services_missing_entirely_is_503(services) -> None:
    services["deal_store"] = None
    client = TestClient(create_app(services))

    response = client.get("/deals")

    assert response.status_code == 503
    assert response.json() == {"detail": "deal_store is not available"}
