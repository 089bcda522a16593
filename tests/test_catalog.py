import pytest

from storefront.commerce.catalog import (
    get_card_gateway,
    get_category_products,
    get_product,
    get_related_products,
    post_lead,
)
from storefront.commerce.models import Failed, Record

PAYMENT_SETTINGS = {
    "methods": [{"id": "paypal"}, {"id": "card", "gateway": "stripe"}],
    "gateways": [
        {
            "id": "stripe",
            "mode": "test",
            "test_publishable_key": "pk_test_123",
            "live_publishable_key": "pk_live_456",
        }
    ],
}


@pytest.mark.asyncio
async def test_get_product_requests_active_product(client, ctx):
    client.on("GET", "/products/blue-shirt", {"id": "p1", "slug": "blue-shirt"})

    product = await get_product(ctx, "blue-shirt")

    assert product["id"] == "p1"
    assert client.calls == [("GET", "/products/blue-shirt", {"active": True})]


@pytest.mark.asyncio
async def test_related_products_exclude_the_product(client, ctx):
    client.on("GET", "/products", {"results": [{"id": "p2"}]})

    await get_related_products(ctx, "p1")

    assert client.calls == [("GET", "/products", {
        "id": {"$ne": "p1"},
        "slug": {"$ne": "p1"},
        "active": True,
        "limit": 5,
    })]


@pytest.mark.asyncio
async def test_related_products_in_category_use_category_order(client, ctx):
    client.on("GET", "/categories/shirts", {"id": "cat1", "slug": "shirts"})
    client.on("GET", "/products", {"results": []})

    await get_related_products(ctx, "p1", category_id="shirts", limit=3)

    _, _, query = client.calls_to("GET", "/products")[0]
    assert query["category_index.id"] == "cat1"
    assert query["sort"] == "category_index.sort.cat1 ASC"
    assert query["limit"] == 3


@pytest.mark.asyncio
async def test_category_products_expand_product(client, ctx):
    client.on("GET", "/categories/cat1/products", {"results": []})

    await get_category_products(ctx, "cat1")

    assert client.calls == [("GET", "/categories/cat1/products", {"expand": "product"})]


@pytest.mark.asyncio
async def test_card_gateway_uses_test_key_outside_live_mode(client, ctx):
    client.on("GET", "/settings/payments", PAYMENT_SETTINGS)

    gateway = await get_card_gateway(ctx)

    assert gateway["id"] == "stripe"
    assert gateway["publishable_key"] == "pk_test_123"


@pytest.mark.asyncio
async def test_card_gateway_uses_live_key_in_live_mode(client, ctx):
    settings = {**PAYMENT_SETTINGS, "gateways": [{**PAYMENT_SETTINGS["gateways"][0], "mode": "live"}]}
    client.on("GET", "/settings/payments", settings)

    gateway = await get_card_gateway(ctx)

    assert gateway["publishable_key"] == "pk_live_456"


@pytest.mark.asyncio
async def test_card_gateway_empty_without_card_method(client, ctx):
    client.on("GET", "/settings/payments", {"methods": [{"id": "paypal"}], "gateways": []})

    assert await get_card_gateway(ctx) == {}


@pytest.mark.asyncio
async def test_post_lead_marks_new(client, ctx):
    client.on("POST", "/leads", lambda payload: {"id": "l1", **payload})

    lead = await post_lead(ctx, {"email": "jane@example.com", "message": "Hello", "extra": "dropped"})

    assert isinstance(lead, Record)
    _, _, payload = client.calls_to("POST", "/leads")[0]
    assert payload["status"] == "new"
    assert "extra" not in payload


@pytest.mark.asyncio
async def test_post_lead_forwards_errors(client, ctx):
    client.on("POST", "/leads", {"errors": {"email": {"message": "Invalid", "code": "INVALID"}}})

    assert isinstance(await post_lead(ctx, {"email": "nope"}), Failed)
