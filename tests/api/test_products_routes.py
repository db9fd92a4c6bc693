from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.support.fake_catalog import FakeCatalog


@pytest.mark.asyncio
async def test_list_products(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.get("/api/products", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert [product["id"] for product in body] == [1, 2, 3]
    assert body[0]["rating"] == {"rate": 4.1, "count": 120}
    assert body[2]["rating"] is None


@pytest.mark.asyncio
async def test_get_product(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.get("/api/products/2", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["title"] == "Product 2"


@pytest.mark.asyncio
async def test_unknown_product_is_not_found(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    response = await client.get("/api/products/999", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


@pytest.mark.asyncio
async def test_non_numeric_product_id_is_bad_request(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    response = await client.get("/api/products/abc", headers=auth_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_catalog_outage_is_server_error(
    client: AsyncClient, auth_headers: dict[str, str], catalog: FakeCatalog
) -> None:
    catalog.fail = True

    response = await client.get("/api/products", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch products from the catalog"}


@pytest.mark.asyncio
async def test_products_require_authentication(
    client: AsyncClient, catalog: FakeCatalog
) -> None:
    response = await client.get("/api/products")

    assert response.status_code == 401
    assert catalog.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("product_id", [0, -3])
async def test_non_positive_product_id_is_not_found(
    client: AsyncClient, auth_headers: dict[str, str], product_id: int
) -> None:
    response = await client.get(f"/api/products/{product_id}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}
