"""Catalog page state, query shapes and fetch lifecycle models."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from catalog_browser.models.product import Product


class SortOption(str, Enum):
    """Sort orders offered by the catalog page."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


SORT_OPTION_LABELS: dict[SortOption, str] = {
    SortOption.NEWEST: "Newest",
    SortOption.OLDEST: "Oldest",
    SortOption.PRICE_ASC: "Price: Low to High",
    SortOption.PRICE_DESC: "Price: High to Low",
}

SortDirection = Literal["asc", "desc"]


# ---------------------------------------------------------------------------
# Query shapes
# ---------------------------------------------------------------------------


class ListingQuery(BaseModel):
    """Unfiltered listing with server-side paging and sorting."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["listing"] = "listing"
    limit: int = Field(..., ge=1)
    offset: int = Field(0, ge=0)
    sort_field: str = "id"
    sort_direction: SortDirection = "asc"
    search: str | None = Field(
        None,
        description="Search text; blank values keep listing behaviour",
    )


class SearchQuery(BaseModel):
    """Free-text search with server-side paging and sorting."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["search"] = "search"
    search: str = Field(..., min_length=1)
    limit: int = Field(..., ge=1)
    offset: int = Field(0, ge=0)
    sort_field: str = "id"
    sort_direction: SortDirection = "asc"


class CategoryFetchQuery(BaseModel):
    """Whole-category retrieval; paging and sorting happen locally."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["category"] = "category"
    category: str = Field(..., min_length=1)
    limit: None = Field(None, description="Unbounded: every matching item")


CatalogQuery = Annotated[
    Union[ListingQuery, SearchQuery, CategoryFetchQuery],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Page state and intents
# ---------------------------------------------------------------------------


class PageState(BaseModel):
    """Owned UI state driving the catalog page.

    ``search_text`` holds the debounced search value, not the raw input.
    """

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    category: str | None = None
    sort: SortOption = SortOption.PRICE_ASC
    page_index: int = Field(0, ge=0)

    @property
    def is_category_mode(self) -> bool:
        return bool(self.category)


class SetSearch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_search"] = "set_search"
    text: str


class SetCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_category"] = "set_category"
    category: str | None


class SetSort(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_sort"] = "set_sort"
    sort: SortOption


class SetPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_page"] = "set_page"
    page_index: int = Field(..., ge=0)


PageIntent = Annotated[
    Union[SetSearch, SetCategory, SetSort, SetPage],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Fetch lifecycle
# ---------------------------------------------------------------------------


class CatalogPage(BaseModel):
    """Visible slice of the catalog plus the totals that drive pagination."""

    products: list[Product] = Field(default_factory=list)
    effective_total: int = Field(0, ge=0)
    total_pages: int = Field(1, ge=1)
    page_index: int = Field(0, ge=0)


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"
    generation: int


class Loaded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loaded"] = "loaded"
    page: CatalogPage


class Errored(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["errored"] = "errored"
    message: str


Lifecycle = Annotated[
    Union[Idle, Loading, Loaded, Errored],
    Field(discriminator="status"),
]


class CatalogView(BaseModel):
    """Renderable state handed to the presentation layer."""

    products: list[Product] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None
    effective_total: int = 0
    total_pages: int = 1
    page_index: int = 0
    has_previous: bool = False
    has_next: bool = False

    @property
    def showing(self) -> int:
        return len(self.products)
