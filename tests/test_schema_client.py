import base64
import json

import httpx
import pytest

from storefront.schema.client import SchemaApiError, SchemaClient, expand_path
from storefront.utils.cache import ResponseCache


def make_client(handler, cache=None):
    return SchemaClient(
        client_id="store-id",
        client_key="store-key",
        api_url="https://api.example.test",
        cache=cache,
        transport=httpx.MockTransport(handler),
    )


def test_expand_path_consumes_placeholder_values():
    path, payload = expand_path("/carts/{id}/items", {"id": "c1", "quantity": 2})

    assert path == "/carts/c1/items"
    assert payload == {"quantity": 2}


def test_expand_path_quotes_values():
    path, payload = expand_path("/accounts/{email}", {"email": "jane+shop@example.com"})

    assert path == "/accounts/jane%2Bshop%40example.com"
    assert payload == {}


def test_expand_path_requires_values():
    with pytest.raises(ValueError):
        expand_path("/carts/{id}", {"id": None})


def test_missing_credentials_are_rejected():
    with pytest.raises(ValueError):
        SchemaClient(client_id="", client_key="", api_url="https://api.example.test")


@pytest.mark.asyncio
async def test_get_sends_auth_session_and_query():
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json={"id": "p1"})

    client = make_client(handler)
    result = await client.get("/products/{id}", {"id": "p1", "active": True, "price": {"$gt": 5}}, session_id="s1")

    request = seen["request"]
    assert result == {"id": "p1"}
    assert request.url.path == "/products/p1"
    assert request.url.params["active"] == "true"
    assert json.loads(request.url.params["price"]) == {"$gt": 5}
    assert request.headers["X-Session"] == "s1"
    expected = base64.b64encode(b"store-id:store-key").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"


@pytest.mark.asyncio
async def test_put_sends_json_body():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "c1", "coupon_code": "SAVE"})

    client = make_client(handler)
    await client.put("/carts/{id}", {"id": "c1", "coupon_code": "SAVE", "billing": None})

    assert seen["body"] == {"coupon_code": "SAVE", "billing": None}


@pytest.mark.asyncio
async def test_not_found_returns_none():
    client = make_client(lambda request: httpx.Response(404, json={"error": "Not found"}))

    assert await client.get("/carts/{id}", {"id": "missing"}) is None


@pytest.mark.asyncio
async def test_validation_errors_are_returned_as_records():
    body = {"errors": {"email": {"message": "Required", "code": "REQUIRED"}}}
    client = make_client(lambda request: httpx.Response(422, json=body))

    assert await client.post("/accounts", {"email": ""}) == body


@pytest.mark.asyncio
async def test_server_errors_raise():
    client = make_client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(SchemaApiError) as exc_info:
        await client.get("/products")

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_errors_raise():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(SchemaApiError):
        await client.get("/products")


@pytest.mark.asyncio
async def test_get_responses_are_cached_until_a_write():
    hits = []

    def handler(request):
        hits.append((request.method, request.url.path))
        return httpx.Response(200, json={"id": "c1"})

    client = make_client(handler, cache=ResponseCache())

    await client.get("/carts/{id}", {"id": "c1"}, session_id="s1")
    await client.get("/carts/{id}", {"id": "c1"}, session_id="s1")
    assert hits == [("GET", "/carts/c1")]

    await client.put("/carts/{id}", {"id": "c1", "comments": "hi"}, session_id="s1")
    await client.get("/carts/{id}", {"id": "c1"}, session_id="s1")
    assert hits == [("GET", "/carts/c1"), ("PUT", "/carts/c1"), ("GET", "/carts/c1")]


@pytest.mark.asyncio
async def test_cache_is_per_session():
    hits = []

    def handler(request):
        hits.append(request.headers.get("X-Session"))
        return httpx.Response(200, json={"results": []})

    client = make_client(handler, cache=ResponseCache())

    await client.get("/products", session_id="s1")
    await client.get("/products", session_id="s2")

    assert hits == ["s1", "s2"]


@pytest.mark.asyncio
async def test_action_paths_are_never_cached():
    hits = []

    def handler(request):
        hits.append(request.url.path)
        return httpx.Response(200, json={"cart_id": "c1"})

    client = make_client(handler, cache=ResponseCache())

    await client.get("/:sessions/:current", session_id="s1")
    await client.get("/:sessions/:current", session_id="s1")

    assert len(hits) == 2
