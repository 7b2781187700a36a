"""Helpers that turn product records into card and detail view models."""

from __future__ import annotations

import math
import re

from catalog_browser.models.product import Product
from catalog_browser.models.views import ProductCard, ProductDetail

MAX_STARS = 5
MAX_TAGS = 4


def display_price(product: Product) -> float:
    """Price after the product's discount, rounded to cents."""

    price = product.price
    if product.discount_percentage:
        price = price * (1 - product.discount_percentage / 100)
    return round(price, 2)


def star_counts(rating: float) -> tuple[int, int]:
    """Return ``(full, empty)`` star counts for a 0-5 rating."""

    full = min(MAX_STARS, max(0, math.floor(rating)))
    return full, MAX_STARS - full


def format_category(slug: str) -> str:
    """``"mens-shirts"`` -> ``"Mens & Shirts"``."""

    words = [w for w in re.split(r"[- ]", slug) if w]
    return " & ".join(w[:1].upper() + w[1:].lower() for w in words)


def product_href(product_id: int) -> str:
    return f"/products/{product_id}"


def product_sku(product: Product) -> str:
    return product.sku or f"HL-{product.id:03d}"


def product_tags(product: Product) -> list[str]:
    tags = [product.category, product.brand.lower(), "quality"]
    return [tag for tag in tags if tag][:MAX_TAGS]


def to_card(product: Product) -> ProductCard:
    full, empty = star_counts(product.rating)
    return ProductCard(
        id=product.id,
        title=product.title,
        thumbnail=product.thumbnail,
        rating=product.rating,
        full_stars=full,
        empty_stars=empty,
        display_price=display_price(product),
        href=product_href(product.id),
    )


def to_detail(product: Product) -> ProductDetail:
    full, empty = star_counts(product.rating)
    return ProductDetail(
        id=product.id,
        title=product.title,
        description=product.description,
        category=product.category,
        category_display=format_category(product.category),
        brand=product.brand,
        stock=product.stock,
        availability_status=product.availability_status,
        rating=product.rating,
        full_stars=full,
        empty_stars=empty,
        price=product.price,
        display_price=display_price(product),
        discount_percentage=product.discount_percentage,
        main_image=product.images[0] if product.images else product.thumbnail,
        images=list(product.images),
        tags=product_tags(product),
        sku=product_sku(product),
        reviews=list(product.reviews),
    )
