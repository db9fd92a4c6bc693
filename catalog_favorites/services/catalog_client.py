"""HTTP client for the remote product catalog.

The catalog is the source of truth for product data; this service only reads
from it.  Every call is a single attempt: a remote 404 becomes ``None`` and any
other failure surfaces as :class:`CatalogFetchError`.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from catalog_favorites.schemas.products import CatalogProduct
from catalog_favorites.settings import AppSettings

logger = logging.getLogger(__name__)

_PRODUCT_LIST_ADAPTER = TypeAdapter(list[CatalogProduct])


class CatalogFetchError(RuntimeError):
    """Raised when the catalog cannot be reached or returns an unusable payload."""


class CatalogProductSource(Protocol):
    """Read-only view of the catalog consumed by the favorites workflow."""

    async def get_all(self) -> list[CatalogProduct]: ...

    async def get_by_id(self, product_id: int) -> CatalogProduct | None: ...

    async def validate(self, product_id: int) -> bool: ...


class CatalogClient(CatalogProductSource):
    """Thin wrapper over :class:`httpx.AsyncClient` bound to the catalog base URL."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "CatalogClient":
        http_client = httpx.AsyncClient(
            base_url=settings.catalog_api_url.rstrip("/"),
            timeout=settings.catalog_timeout_seconds,
            headers={"Accept": "application/json"},
        )
        return cls(http_client)

    async def get_all(self) -> list[CatalogProduct]:
        """Return the full catalog listing."""

        try:
            response = await self._http.get("/products")
            response.raise_for_status()
            return _PRODUCT_LIST_ADAPTER.validate_python(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.warning("Catalog listing failed: %s", exc)
            raise CatalogFetchError("Failed to fetch products from the catalog") from exc

    async def get_by_id(self, product_id: int) -> CatalogProduct | None:
        """Return a single product, or ``None`` when the catalog does not know it."""

        try:
            response = await self._http.get(f"/products/{product_id}")
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            # The FakeStore API answers unknown ids with ``200`` and an empty body.
            if not response.content.strip():
                return None
            payload = response.json()
            if payload is None:
                return None
            return CatalogProduct.model_validate(payload)
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.warning("Catalog lookup for product %s failed: %s", product_id, exc)
            raise CatalogFetchError(
                f"Failed to fetch product {product_id} from the catalog"
            ) from exc

    async def validate(self, product_id: int) -> bool:
        """Return ``True`` when the catalog knows ``product_id``."""

        return await self.get_by_id(product_id) is not None

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["CatalogClient", "CatalogFetchError", "CatalogProductSource"]
