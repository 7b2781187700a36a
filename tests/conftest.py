"""Pytest configuration and fixtures for the catalog browser."""

from __future__ import annotations

import json
import re

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from catalog_browser.services.clients.catalog_client import (
    HttpCatalogClient,
    get_catalog_client,
)

BASE_URL = "https://catalog.test"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


def _category_for(product_id: int) -> str:
    if product_id <= 5:
        return "beauty"
    if product_id <= 10:
        return "fragrances"
    return "groceries"


def make_products() -> list[dict]:
    """32 products with distinct prices spread over three categories."""

    products = []
    for product_id in range(1, 33):
        product = {
            "id": product_id,
            "title": f"Product {product_id}",
            "description": f"Description of product {product_id}",
            "category": _category_for(product_id),
            "price": float((product_id * 37) % 100) + 0.99,
            "discountPercentage": 10.0 if product_id % 2 else 0.0,
            "rating": 3.5 + (product_id % 3) * 0.5,
            "stock": product_id * 2,
            "brand": "Essence" if product_id % 2 else "Glamour Beauty",
            "thumbnail": f"https://cdn.test/{product_id}/thumb.webp",
            "images": [f"https://cdn.test/{product_id}/1.webp"],
            "availabilityStatus": "In Stock",
            "reviews": [
                {
                    "rating": 5,
                    "comment": "Great product!",
                    "date": "2024-05-23T08:56:21.618Z",
                    "reviewerName": "Lucas Gordon",
                    "reviewerEmail": "lucas.gordon@x.dummyjson.com",
                }
            ],
        }
        # product 3 has no metadata and sorts as if created at the epoch
        if product_id != 3:
            product["meta"] = {
                "createdAt": f"2024-05-{product_id % 28 + 1:02d}T08:56:21.618Z",
                "updatedAt": "2024-05-23T08:56:21.618Z",
            }
        products.append(product)
    return products


CATEGORIES = [
    {"slug": "beauty", "name": "Beauty", "url": f"{BASE_URL}/products/category/beauty"},
    {
        "slug": "fragrances",
        "name": "Fragrances",
        "url": f"{BASE_URL}/products/category/fragrances",
    },
    {
        "slug": "groceries",
        "name": "Groceries",
        "url": f"{BASE_URL}/products/category/groceries",
    },
]


class FakeCatalogService:
    """In-process stand-in for the remote product-data service."""

    def __init__(self) -> None:
        self.products = make_products()
        self.categories = list(CATEGORIES)
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, int] = {}
        self.malformed: set[str] = set()

    def fail(self, path_prefix: str, status_code: int = 500) -> None:
        self.failures[path_prefix] = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        for prefix, status_code in self.failures.items():
            if path.startswith(prefix):
                return httpx.Response(status_code, json={"message": "upstream failure"})
        if path in self.malformed:
            return httpx.Response(200, content=b"<html>not json</html>")

        if path == "/products/categories":
            return httpx.Response(200, json=self.categories)

        if path.startswith("/products/category/"):
            slug = path.rsplit("/", 1)[1]
            items = [p for p in self.products if p["category"] == slug]
            # totals deliberately omitted
            return httpx.Response(200, json={"products": items})

        if path in ("/products", "/products/search"):
            items = list(self.products)
            if path == "/products/search":
                needle = params.get("q", "").lower()
                items = [p for p in items if needle in p["title"].lower()]
            return httpx.Response(200, json=self._page(items, params))

        match = re.fullmatch(r"/products/(\d+)", path)
        if match:
            for product in self.products:
                if product["id"] == int(match.group(1)):
                    return httpx.Response(200, json=product)
        return httpx.Response(
            404,
            content=json.dumps({"message": f"Product with id '{path}' not found"}),
        )

    @staticmethod
    def _page(items: list[dict], params: httpx.QueryParams) -> dict:
        sort_by = params.get("sortBy")
        if sort_by:
            items = sorted(
                items,
                key=lambda p: p[sort_by],
                reverse=params.get("order") == "desc",
            )
        skip = int(params.get("skip", "0"))
        limit = int(params.get("limit", "30"))
        return {
            "products": items[skip : skip + limit],
            "total": len(items),
            "skip": skip,
            "limit": limit,
        }


@pytest.fixture()
def fake_service() -> FakeCatalogService:
    return FakeCatalogService()


@pytest_asyncio.fixture()
async def catalog_client(fake_service):
    """HTTP catalog client wired to the fake service."""

    client = HttpCatalogClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(fake_service.handler),
    )
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture()
async def client(catalog_client):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from catalog_browser.main import app

    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_catalog_client, None)
