"""Tests for the catalog and product detail endpoints."""

from __future__ import annotations

import pytest

from catalog_browser.services.clients.catalog_client import LIST_SELECT


@pytest.mark.asyncio
async def test_catalog_view_price_ascending(client, fake_service):
    response = await client.get("/", params={"sort": "price-asc"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_pages"] == 4
    assert data["effective_total"] == 32
    assert data["showing"] == 8
    assert data["has_previous"] is False
    assert data["has_next"] is True
    prices = [p["display_price"] for p in data["products"]]
    assert len(prices) == 8

    request = fake_service.requests[-1]
    assert request.url.path == "/products"
    assert dict(request.url.params) == {
        "limit": "8",
        "skip": "0",
        "sortBy": "price",
        "order": "asc",
        "select": LIST_SELECT,
    }


@pytest.mark.asyncio
async def test_catalog_view_search(client, fake_service):
    response = await client.get("/", params={"search": " product 2 ", "page": 1})

    assert response.status_code == 200
    request = fake_service.requests[-1]
    assert request.url.path == "/products/search"
    assert request.url.params["q"] == "product 2"
    assert request.url.params["skip"] == "8"


@pytest.mark.asyncio
async def test_catalog_view_category_pages_locally(client, fake_service):
    response = await client.get(
        "/",
        params={"category": "groceries", "sort": "price-desc", "page": 2},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["effective_total"] == 22
    assert data["total_pages"] == 3
    assert data["page_index"] == 2
    assert data["showing"] == 6
    assert data["has_next"] is False

    request = fake_service.requests[-1]
    assert request.url.path == "/products/category/groceries"
    assert request.url.params["limit"] == "0"


@pytest.mark.asyncio
async def test_catalog_view_clamps_page_beyond_last(client, fake_service):
    response = await client.get("/", params={"page": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["page_index"] == 3
    assert data["total_pages"] == 4
    assert data["showing"] == 8
    assert data["has_previous"] is True
    assert data["has_next"] is False
    assert fake_service.requests[-1].url.params["skip"] == "24"


@pytest.mark.asyncio
async def test_catalog_view_reports_upstream_failure(client, fake_service):
    fake_service.fail("/products")

    response = await client.get("/")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch products"


@pytest.mark.asyncio
async def test_catalog_view_rejects_unknown_sort(client):
    response = await client.get("/", params={"sort": "rating"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_category_options(client):
    response = await client.get("/categories")

    assert response.status_code == 200
    assert response.json()[:2] == [
        {"value": "", "label": "All Categories"},
        {"value": "beauty", "label": "Beauty"},
    ]


@pytest.mark.asyncio
async def test_category_options_degrade_to_default(client, fake_service):
    fake_service.fail("/products/categories")

    response = await client.get("/categories")

    assert response.json() == [{"value": "", "label": "All Categories"}]


@pytest.mark.asyncio
async def test_sort_options(client):
    response = await client.get("/sort-options")

    assert [o["value"] for o in response.json()] == [
        "newest",
        "oldest",
        "price-asc",
        "price-desc",
    ]


@pytest.mark.asyncio
async def test_product_detail(client):
    response = await client.get("/products/4")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 4
    assert data["category_display"] == "Beauty"
    assert data["sku"] == "HL-004"
    assert data["main_image"] == "https://cdn.test/4/1.webp"
    assert data["reviews"][0]["comment"] == "Great product!"
    assert data["order_enabled"] is False


@pytest.mark.asyncio
async def test_product_detail_not_found(client):
    response = await client.get("/products/999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Product not found", "back_href": "/"}
