"""Catalog client behaviour against a mocked HTTP transport."""

from __future__ import annotations

import httpx
import pytest

from catalog_favorites.services.catalog_client import CatalogClient, CatalogFetchError

PRODUCT_PAYLOAD = {
    "id": 7,
    "title": "Backpack",
    "price": 109.95,
    "description": "Fits 15 inch laptops",
    "category": "men's clothing",
    "image": "https://catalog.test/img/7.jpg",
    "rating": {"rate": 3.9, "count": 120},
}


def _client(handler) -> CatalogClient:
    transport = httpx.MockTransport(handler)
    return CatalogClient(httpx.AsyncClient(transport=transport, base_url="https://catalog.test"))


@pytest.mark.asyncio
async def test_get_by_id_parses_product() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=PRODUCT_PAYLOAD)

    client = _client(handler)
    product = await client.get_by_id(7)
    await client.aclose()

    assert seen == ["/products/7"]
    assert product is not None
    assert product.title == "Backpack"
    assert product.rating_rate == pytest.approx(3.9)
    assert product.rating_count == 120


@pytest.mark.asyncio
async def test_get_by_id_without_rating_block() -> None:
    payload = {key: value for key, value in PRODUCT_PAYLOAD.items() if key != "rating"}
    client = _client(lambda request: httpx.Response(200, json=payload))

    product = await client.get_by_id(7)

    assert product is not None
    assert product.rating is None
    assert product.rating_rate is None
    assert product.rating_count is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "body"),
    [(404, b'{"message": "not found"}'), (200, b""), (200, b"null")],
)
async def test_get_by_id_treats_missing_products_as_absent(status_code: int, body: bytes) -> None:
    client = _client(lambda request: httpx.Response(status_code, content=body))

    assert await client.get_by_id(999) is None
    assert await client.validate(999) is False


@pytest.mark.asyncio
async def test_validate_reports_known_products() -> None:
    client = _client(lambda request: httpx.Response(200, json=PRODUCT_PAYLOAD))

    assert await client.validate(7) is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "body"),
    [(500, b"upstream exploded"), (200, b"<html>oops</html>"), (200, b'{"id": 7}')],
)
async def test_get_by_id_wraps_failures(status_code: int, body: bytes) -> None:
    client = _client(lambda request: httpx.Response(status_code, content=body))

    with pytest.raises(CatalogFetchError):
        await client.get_by_id(7)


@pytest.mark.asyncio
async def test_transport_errors_become_fetch_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(CatalogFetchError):
        await client.get_by_id(7)
    with pytest.raises(CatalogFetchError):
        await client.get_all()


@pytest.mark.asyncio
async def test_get_all_returns_listing_in_catalog_order() -> None:
    second = {**PRODUCT_PAYLOAD, "id": 8, "title": "Jacket"}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/products"
        return httpx.Response(200, json=[PRODUCT_PAYLOAD, second])

    products = await _client(handler).get_all()

    assert [product.id for product in products] == [7, 8]


@pytest.mark.asyncio
async def test_get_all_rejects_non_list_payload() -> None:
    client = _client(lambda request: httpx.Response(200, json={"products": []}))

    with pytest.raises(CatalogFetchError):
        await client.get_all()
