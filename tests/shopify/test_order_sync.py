"""Tests for the order-status poller and webhook registration."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pydantic import SecretStr

from influencer_crm.domain.errors import ConfigurationError, ExternalServiceError
from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.shopify.sync import OrderStatusSyncer, register_order_webhooks
from influencer_crm.shopify.token import ShopifyTokenProvider
from influencer_crm.shopify.webhook import ORDER_WEBHOOK_TOPICS
from influencer_crm.store.orders import OrderStore

NOW = datetime(2025, 11, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def shopify() -> MagicMock:
    client = MagicMock()
    client.ensure_configured = AsyncMock()
    client.get_orders_by_ids = AsyncMock(return_value=[])
    client.get_draft_order = AsyncMock(return_value=None)
    client.get_order = AsyncMock(return_value=None)
    client.create_webhook = AsyncMock(return_value={"id": 1})
    return client


def _row(table_row: dict, fake_db, table: str = "campaign_influencers") -> None:
    fake_db.seed(table, table_row)


class TestOrderStatusSyncer:
    @pytest.mark.anyio()
    async def test_nothing_to_sync(self, fake_db, shopify) -> None:
        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)
        assert result.message == "No rows to sync"
        assert result.updated == 0
        shopify.get_orders_by_ids.assert_not_awaited()

    @pytest.mark.anyio()
    async def test_real_order_status_change_is_written(self, fake_db, shopify) -> None:
        _row(
            {
                "id": "m1",
                "shopify_order_id": "D1",
                "shopify_real_order_id": "R1",
                "shopify_order_status": "fulfilled",
            },
            fake_db,
        )
        shopify.get_orders_by_ids.return_value = [
            {"id": "R1", "fulfillments": [{"tracking_number": "1Z"}]}
        ]

        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        assert result.updated == 1
        row = fake_db.tables["campaign_influencers"][0]
        assert row["shopify_order_status"] == "shipped"
        assert row["tracking_number"] == "1Z"
        assert row["order_status_updated_at"]
        shopify.get_orders_by_ids.assert_awaited_once_with(["R1"])

    @pytest.mark.anyio()
    async def test_unchanged_status_only_touches_timestamp(self, fake_db, shopify) -> None:
        _row(
            {
                "id": "m1",
                "shopify_real_order_id": "R1",
                "shopify_order_status": "fulfilled",
                "tracking_number": "keep",
            },
            fake_db,
        )
        shopify.get_orders_by_ids.return_value = [{"id": "R1", "fulfillments": [{}]}]

        await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        row = fake_db.tables["campaign_influencers"][0]
        assert row["tracking_number"] == "keep"
        assert row["order_status_updated_at"]

    @pytest.mark.anyio()
    async def test_recently_synced_rows_skipped(self, fake_db, shopify) -> None:
        _row(
            {
                "id": "m1",
                "shopify_real_order_id": "R1",
                "shopify_order_status": "shipped",
                "order_status_updated_at": (NOW - timedelta(hours=1)).isoformat(),
            },
            fake_db,
        )
        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)
        assert result.updated == 0

    @pytest.mark.anyio()
    async def test_batch_failure_is_logged_and_skipped(self, fake_db, shopify) -> None:
        _row({"id": "m1", "shopify_real_order_id": "R1", "shopify_order_status": "draft"}, fake_db)
        shopify.get_orders_by_ids.side_effect = ExternalServiceError("Shopify", "connection refused")

        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        assert result.message == "Sync complete"
        assert result.updated == 0

    @pytest.mark.anyio()
    async def test_completed_draft_links_real_order(self, fake_db, shopify) -> None:
        _row({"id": "i1", "shopify_order_id": "D1", "shopify_order_status": "draft"}, fake_db, "influencers")
        shopify.get_draft_order.return_value = {"id": "D1", "status": "completed", "order_id": 777}
        shopify.get_order.return_value = {"id": 777, "fulfillments": []}

        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        assert result.updated == 1
        row = fake_db.tables["influencers"][0]
        assert row["shopify_real_order_id"] == "777"
        assert row["shopify_order_status"] == "draft"

    @pytest.mark.anyio()
    async def test_completed_draft_with_unreachable_order_links_id_only(
        self, fake_db, shopify
    ) -> None:
        _row({"id": "m1", "shopify_order_id": "D1", "shopify_order_status": "draft"}, fake_db)
        shopify.get_draft_order.return_value = {"status": "completed", "order_id": 777}
        shopify.get_order.side_effect = ExternalServiceError("Shopify", "read timed out")

        await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        row = fake_db.tables["campaign_influencers"][0]
        assert row["shopify_real_order_id"] == "777"
        assert row["shopify_order_status"] == "draft"

    @pytest.mark.anyio()
    async def test_open_draft_only_touches_timestamp(self, fake_db, shopify) -> None:
        _row({"id": "m1", "shopify_order_id": "D1", "shopify_order_status": "draft"}, fake_db)
        shopify.get_draft_order.return_value = {"status": "open"}

        result = await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

        assert result.updated == 1
        row = fake_db.tables["campaign_influencers"][0]
        assert "shopify_real_order_id" not in row
        assert row["order_status_updated_at"]


class TestRegisterOrderWebhooks:
    @pytest.mark.anyio()
    async def test_registers_every_topic(self, shopify) -> None:
        results = await register_order_webhooks(shopify, "https://crm.example.com/")
        assert [r.topic for r in results] == list(ORDER_WEBHOOK_TOPICS)
        assert all(r.success for r in results)
        shopify.create_webhook.assert_any_await(
            "orders/create", "https://crm.example.com/webhooks/shopify/orders"
        )

    @pytest.mark.anyio()
    async def test_failure_recorded_per_topic(self, shopify) -> None:
        rejected = ExternalServiceError(
            "Shopify", "POST /webhooks.json failed", 422, detail='{"errors":"taken"}'
        )
        shopify.create_webhook.side_effect = [{"id": 1}, rejected, {"id": 3}, {"id": 4}]

        results = await register_order_webhooks(shopify, "https://crm.example.com")

        assert [r.success for r in results] == [True, False, True, True]
        assert results[1].error == '{"errors":"taken"}'


# ---------------------------------------------------------------------------
# Unconfigured store
# ---------------------------------------------------------------------------


class TestUnconfiguredShopify:
    @pytest.mark.anyio()
    async def test_missing_token_fails_the_poll(self, fake_db, settings) -> None:
        _row({"id": "m1", "shopify_real_order_id": "R1", "shopify_order_status": "draft"}, fake_db)
        settings = settings.model_copy(update={"shopify_access_token": SecretStr("")})
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"orders": []}))
        client = ShopifyClient(
            "nama-test.myshopify.com",
            ShopifyTokenProvider(settings),
            http=httpx.AsyncClient(transport=transport),
        )

        with pytest.raises(ConfigurationError, match="Shopify not configured"):
            await OrderStatusSyncer(OrderStore(fake_db), client).sync(NOW)
        assert "order_status_updated_at" not in fake_db.tables["campaign_influencers"][0]

    @pytest.mark.anyio()
    async def test_missing_token_fails_even_with_nothing_stale(self, fake_db, shopify) -> None:
        shopify.ensure_configured.side_effect = ConfigurationError("Shopify not configured")
        with pytest.raises(ConfigurationError):
            await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)

    @pytest.mark.anyio()
    async def test_configuration_error_mid_poll_is_not_swallowed(self, fake_db, shopify) -> None:
        _row({"id": "m1", "shopify_order_id": "D1", "shopify_order_status": "draft"}, fake_db)
        shopify.get_draft_order.side_effect = ConfigurationError("Shopify not configured")
        with pytest.raises(ConfigurationError):
            await OrderStatusSyncer(OrderStore(fake_db), shopify).sync(NOW)
