"""API schemas returned to the rendering layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from catalog_browser.models.product import Review


class PickerOption(BaseModel):
    """Single option of a selectable control."""

    value: str
    label: str


class ProductCard(BaseModel):
    """Compact product entry shown in the catalog grid."""

    id: int
    title: str
    thumbnail: str
    rating: float
    full_stars: int = Field(..., ge=0, le=5)
    empty_stars: int = Field(..., ge=0, le=5)
    display_price: float
    href: str


class CatalogViewResponse(BaseModel):
    """Response body for the catalog view."""

    products: list[ProductCard] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None
    effective_total: int = 0
    total_pages: int = 1
    page_index: int = 0
    has_previous: bool = False
    has_next: bool = False
    showing: int = 0


class ProductDetail(BaseModel):
    """Response body for the product detail view."""

    id: int
    title: str
    description: str
    category: str
    category_display: str
    brand: str
    stock: int
    availability_status: str | None = None
    rating: float
    full_stars: int
    empty_stars: int
    price: float
    display_price: float
    discount_percentage: float
    main_image: str
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    sku: str
    reviews: list[Review] = Field(default_factory=list)
    order_enabled: bool = Field(
        False,
        description="Ordering is not supported; the action is inert",
    )
    back_href: str = "/"
