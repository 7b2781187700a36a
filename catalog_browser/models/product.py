"""Product domain models mirroring the remote product-data service payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductMeta(BaseModel):
    """Creation/update timestamps attached to a product record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")


class Review(BaseModel):
    """Single customer review. Owned by exactly one product."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    rating: float = Field(..., ge=0, le=5)
    comment: str = ""
    date: datetime | None = None
    reviewer_name: str = Field("", alias="reviewerName")
    reviewer_email: str = Field("", alias="reviewerEmail")


class Product(BaseModel):
    """Product as returned by the remote service.

    List views request a field projection, so everything except ``id`` may be
    missing from the payload and falls back to an empty default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: int = Field(..., description="Identifier assigned by the remote service")
    title: str = ""
    description: str = ""
    category: str = Field("", description="Category slug")
    price: float = Field(0.0, ge=0)
    discount_percentage: float = Field(0.0, ge=0, le=100, alias="discountPercentage")
    rating: float = Field(0.0, ge=0, le=5)
    stock: int = Field(0, ge=0)
    brand: str = ""
    thumbnail: str = ""
    images: list[str] = Field(default_factory=list)
    availability_status: str | None = Field(None, alias="availabilityStatus")
    meta: ProductMeta | None = None
    sku: str | None = None
    reviews: list[Review] = Field(default_factory=list)


class Category(BaseModel):
    """Category entry used to populate the category picker."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    slug: str
    name: str
    url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name


class CatalogResponse(BaseModel):
    """Normalized response envelope for list, search and category queries."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    products: list[Product] = Field(default_factory=list)
    total: int = Field(0, ge=0)
    offset: int = Field(0, ge=0, alias="skip")
    limit: int = Field(0, ge=0)
