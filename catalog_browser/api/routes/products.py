"""Product detail routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path, status
from fastapi.responses import JSONResponse

from catalog_browser.models.views import ProductDetail
from catalog_browser.services.catalog.formatting import to_detail
from catalog_browser.services.clients.catalog_client import CatalogClientDependency
from catalog_browser.services.errors import FetchError, NotFoundError, normalize_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get(
    "/{product_id}",
    response_model=ProductDetail,
    summary="Detail view for a single product",
    responses={404: {"description": "Product not found"}},
)
async def product_detail(
    client: CatalogClientDependency,
    product_id: str = Path(..., description="Identifier assigned by the remote service"),
):
    """Detail view for one product, or a 404 carrying a link back to the catalog."""
    try:
        product = await client.get_product(product_id)
    except NotFoundError as exc:
        logger.info("Product %s not found (status=%s)", product_id, exc.status_code)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": normalize_error(exc, "Product not found"), "back_href": "/"},
        )
    except FetchError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=normalize_error(exc, "Failed to load"),
        ) from exc

    return to_detail(product)
