"""Sort option mapping for server-side and in-memory ordering."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from catalog_browser.models.catalog import SortDirection, SortOption
from catalog_browser.models.product import Product

_EPOCH = datetime.fromtimestamp(0, UTC)

_SERVER_SORT: dict[SortOption, tuple[str, SortDirection]] = {
    SortOption.NEWEST: ("id", "desc"),
    SortOption.OLDEST: ("id", "asc"),
    SortOption.PRICE_ASC: ("price", "asc"),
    SortOption.PRICE_DESC: ("price", "desc"),
}


def server_sort_params(sort: SortOption) -> tuple[str, SortDirection]:
    """Map a sort option to the remote service's ``sortBy``/``order`` pair."""

    return _SERVER_SORT.get(sort, ("title", "asc"))


def created_at(product: Product) -> datetime:
    """Creation timestamp used as a stand-in for id order.

    Products without metadata sort as if created at the epoch.
    """

    if product.meta is None or product.meta.created_at is None:
        return _EPOCH
    stamp = product.meta.created_at
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=UTC)
    return stamp


def sort_products(products: Sequence[Product], sort: SortOption) -> list[Product]:
    """Return a sorted copy of ``products``; the input is left untouched.

    ``sorted`` is stable, so ties keep the order the service returned.
    """

    if sort is SortOption.NEWEST:
        return sorted(products, key=created_at, reverse=True)
    if sort is SortOption.OLDEST:
        return sorted(products, key=created_at)
    if sort is SortOption.PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if sort is SortOption.PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    return list(products)
