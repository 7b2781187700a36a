"""System-level routes such as health checks."""

from __future__ import annotations

import httpx
from fastapi import APIRouter

from catalog_browser.config import settings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint with product-data service connectivity check."""

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{settings.CATALOG_API_BASE_URL.rstrip('/')}/products/categories",
                timeout=5.0,
            )
            catalog_status = (
                "connected" if response.status_code == 200 else "disconnected"
            )
    except httpx.HTTPError:
        catalog_status = "disconnected"

    return {
        "status": "healthy",
        "catalog_api": catalog_status,
        "environment": settings.ENVIRONMENT,
    }
