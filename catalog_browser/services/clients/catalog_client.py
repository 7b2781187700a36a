"""Remote product-data service client abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Annotated, Any
from urllib.parse import quote

import httpx
from fastapi import Depends
from pydantic import ValidationError

from catalog_browser.config import settings
from catalog_browser.models.catalog import ListingQuery, SearchQuery
from catalog_browser.models.product import CatalogResponse, Category, Product
from catalog_browser.services.errors import FetchError, NotFoundError

logger = logging.getLogger(__name__)

# Fields needed for catalog cards (smaller payload than the full product)
LIST_SELECT = "id,title,thumbnail,price,discountPercentage,rating,category,brand"

# Category results are sorted locally, so creation metadata is also needed
CATEGORY_SELECT = f"{LIST_SELECT},meta"

PRODUCTS_ERROR = "Failed to fetch products"
CATEGORIES_ERROR = "Failed to fetch categories"
PRODUCT_NOT_FOUND = "Product not found"


class CatalogClient(ABC):
    """Abstract interface to the remote product-data service."""

    @abstractmethod
    async def list_products(self, query: ListingQuery | SearchQuery) -> CatalogResponse:
        """Return one server-side page for a listing or search query."""

    @abstractmethod
    async def list_by_category(self, slug: str) -> CatalogResponse:
        """Return every product of the given category."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product:
        """Return the full product record including reviews."""

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Return the categories offered by the service."""

    async def close(self) -> None:
        """Release any underlying resources."""


class HttpCatalogClient(CatalogClient):
    """Catalog client backed by plain HTTP GET requests."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Catalog API base URL is required to initialize client")

        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _get(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        error_message: str,
        missing_is_not_found: bool = False,
    ) -> Any:
        """Issue a GET request and return the decoded JSON body."""

        logger.debug("GET %s params=%s", path, params)
        try:
            response = await self._http_client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", path, exc)
            raise FetchError(error_message) from exc

        if response.status_code >= 400:
            logger.warning(
                "Request failed: %s %s - %s",
                response.status_code,
                path,
                response.text[:200],
            )
            if missing_is_not_found:
                raise NotFoundError(error_message, status_code=response.status_code)
            raise FetchError(error_message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Malformed JSON returned by %s", path)
            raise FetchError(error_message, status_code=response.status_code) from exc

    # ==================== Product APIs ====================

    async def list_products(self, query: ListingQuery | SearchQuery) -> CatalogResponse:
        """Search products when text is present, otherwise list them."""

        params: dict[str, str] = {}
        search = (query.search or "").strip()
        path = "/products"
        if search:
            path = "/products/search"
            params["q"] = search

        params.update(
            {
                "limit": str(query.limit),
                "skip": str(query.offset),
                "sortBy": query.sort_field,
                "order": query.sort_direction,
                "select": LIST_SELECT,
            }
        )

        data = await self._get(path, params=params, error_message=PRODUCTS_ERROR)
        return _parse_envelope(data, PRODUCTS_ERROR)

    async def list_by_category(self, slug: str) -> CatalogResponse:
        """Fetch the whole category; limit=0 asks the service for every item."""

        data = await self._get(
            f"/products/category/{quote(slug, safe='')}",
            params={"limit": "0", "select": CATEGORY_SELECT},
            error_message=PRODUCTS_ERROR,
        )
        if not isinstance(data, dict):
            raise FetchError(PRODUCTS_ERROR)

        return _parse_envelope(
            {
                "products": data.get("products") or [],
                "total": data.get("total") or 0,
                "skip": data.get("skip") or 0,
                "limit": data.get("limit") or 0,
            },
            PRODUCTS_ERROR,
        )

    async def get_product(self, product_id: str) -> Product:
        """Get product details"""

        data = await self._get(
            f"/products/{quote(str(product_id), safe='')}",
            error_message=PRODUCT_NOT_FOUND,
            missing_is_not_found=True,
        )
        try:
            return Product.model_validate(data)
        except ValidationError as exc:
            raise FetchError(PRODUCT_NOT_FOUND) from exc

    async def list_categories(self) -> list[Category]:
        """Get available product categories"""

        data = await self._get("/products/categories", error_message=CATEGORIES_ERROR)
        if not isinstance(data, list):
            raise FetchError(CATEGORIES_ERROR)
        try:
            return [Category.model_validate(item) for item in data]
        except ValidationError as exc:
            raise FetchError(CATEGORIES_ERROR) from exc


def _parse_envelope(data: Any, error_message: str) -> CatalogResponse:
    try:
        return CatalogResponse.model_validate(data)
    except ValidationError as exc:
        logger.warning("Unexpected catalog payload: %s", exc)
        raise FetchError(error_message) from exc


_catalog_client: CatalogClient | None = None


def get_catalog_client() -> CatalogClient:
    """Return a singleton catalog client for the current process."""

    global _catalog_client
    if _catalog_client is None:
        _catalog_client = HttpCatalogClient(
            base_url=settings.CATALOG_API_BASE_URL,
            timeout=settings.CATALOG_HTTP_TIMEOUT_SECONDS,
        )
    return _catalog_client


async def close_catalog_client() -> None:
    """Close the shared client, if one was created."""

    global _catalog_client
    if _catalog_client is not None:
        await _catalog_client.close()
        _catalog_client = None


CatalogClientDependency = Annotated[CatalogClient, Depends(get_catalog_client)]
