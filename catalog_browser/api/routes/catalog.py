"""Catalog listing routes consumed by the rendering layer."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from catalog_browser.config import settings
from catalog_browser.models.catalog import SORT_OPTION_LABELS, PageState, SortOption
from catalog_browser.models.views import CatalogViewResponse, PickerOption
from catalog_browser.services.catalog.formatting import to_card
from catalog_browser.services.catalog.reconciler import (
    ALL_CATEGORIES_LABEL,
    LOAD_FAILED_MESSAGE,
    load_catalog_page,
)
from catalog_browser.services.clients.catalog_client import CatalogClientDependency
from catalog_browser.services.errors import FetchError, normalize_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get(
    "/",
    response_model=CatalogViewResponse,
    summary="Catalog view for the given search, category, sort and page",
)
async def catalog_view(
    client: CatalogClientDependency,
    search: str = Query("", description="Free-text search"),
    category: str = Query("", description="Category slug; overrides search"),
    sort: SortOption = Query(
        SortOption(settings.DEFAULT_SORT_OPTION),
        description="Sort order",
    ),
    page: int = Query(0, ge=0, description="0-based page index"),
) -> CatalogViewResponse:
    """One page of the catalog. Out-of-range pages are clamped to the last page."""

    state = PageState(
        search_text=search,
        category=category or None,
        sort=sort,
        page_index=page,
    )
    try:
        result = await load_catalog_page(client, state, settings.CATALOG_PAGE_SIZE)
        if state.page_index > result.total_pages - 1:
            logger.debug(
                "Page %s out of range (pages=%s), clamping", page, result.total_pages
            )
            state = state.model_copy(update={"page_index": result.total_pages - 1})
            result = await load_catalog_page(client, state, settings.CATALOG_PAGE_SIZE)
    except FetchError as exc:
        message = normalize_error(exc, LOAD_FAILED_MESSAGE)
        logger.warning("Catalog view failed: %s", message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=message) from exc

    return CatalogViewResponse(
        products=[to_card(product) for product in result.products],
        effective_total=result.effective_total,
        total_pages=result.total_pages,
        page_index=result.page_index,
        has_previous=result.page_index > 0,
        has_next=result.page_index < result.total_pages - 1,
        showing=len(result.products),
    )


@router.get(
    "/categories",
    response_model=list[PickerOption],
    summary="Options for the category picker",
)
async def category_options(client: CatalogClientDependency) -> list[PickerOption]:
    """Category picker options; only the default entry if categories fail to load."""
    try:
        categories = await client.list_categories()
    except FetchError as exc:
        logger.warning("Category options unavailable: %s", normalize_error(exc))
        categories = []

    return [PickerOption(value="", label=ALL_CATEGORIES_LABEL)] + [
        PickerOption(value=c.slug, label=c.display_name) for c in categories
    ]


@router.get(
    "/sort-options",
    response_model=list[PickerOption],
    summary="Options for the sort picker",
)
async def sort_options() -> list[PickerOption]:
    """Sort picker options in display order."""
    return [
        PickerOption(value=option.value, label=label)
        for option, label in SORT_OPTION_LABELS.items()
    ]
