"""Catalog page reconciliation: query selection, pagination and stale-response handling.

Two backend modes are reconciled here:

* listing/search: the remote service sorts and pages; ``effective_total`` is
  the server-reported ``total``.
* category: the whole category is fetched once, then sorted and sliced in
  memory; ``effective_total`` is the size of the local result set.

``CatalogController`` owns the page state and tags every fetch cycle with a
generation number. A response is applied only if its generation is still the
latest one, so a slow superseded request can never overwrite newer results.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable

from catalog_browser.config import settings
from catalog_browser.models.catalog import (
    SORT_OPTION_LABELS,
    CatalogPage,
    CatalogQuery,
    CatalogView,
    CategoryFetchQuery,
    Errored,
    Idle,
    Lifecycle,
    ListingQuery,
    Loaded,
    Loading,
    PageIntent,
    PageState,
    SearchQuery,
    SetCategory,
    SetPage,
    SetSearch,
    SetSort,
    SortOption,
)
from catalog_browser.models.product import CatalogResponse, Category
from catalog_browser.services.catalog.selectable import SelectableOptions
from catalog_browser.services.catalog.sorting import server_sort_params, sort_products
from catalog_browser.services.clients.catalog_client import CatalogClient
from catalog_browser.services.debounce import Debouncer
from catalog_browser.services.errors import FetchError, normalize_error

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load"
ALL_CATEGORIES_LABEL = "All Categories"


def apply_intent(state: PageState, intent: PageIntent) -> PageState:
    """Pure transition from one page state to the next.

    Changing the category or the (debounced) search text changes the result
    set, so the page index goes back to 0.
    """

    if isinstance(intent, SetSearch):
        if intent.text == state.search_text:
            return state
        return state.model_copy(update={"search_text": intent.text, "page_index": 0})

    if isinstance(intent, SetCategory):
        category = intent.category or None
        if category == state.category:
            return state
        return state.model_copy(update={"category": category, "page_index": 0})

    if isinstance(intent, SetSort):
        return state.model_copy(update={"sort": intent.sort})

    if isinstance(intent, SetPage):
        return state.model_copy(update={"page_index": intent.page_index})

    raise TypeError(f"Unsupported intent: {intent!r}")


def derive_query(state: PageState, page_size: int) -> CatalogQuery:
    """Pick the single query shape for ``state``. Category wins over search."""

    if state.category:
        return CategoryFetchQuery(category=state.category)

    sort_field, sort_direction = server_sort_params(state.sort)
    offset = state.page_index * page_size
    search = state.search_text.strip()
    if search:
        return SearchQuery(
            search=search,
            limit=page_size,
            offset=offset,
            sort_field=sort_field,
            sort_direction=sort_direction,
        )
    return ListingQuery(
        limit=page_size,
        offset=offset,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )


def total_pages(effective_total: int, page_size: int) -> int:
    """Number of pages for ``effective_total`` items, never less than 1."""

    if effective_total < 0:
        raise ValueError("effective_total must be non-negative")
    return max(1, math.ceil(effective_total / page_size))


def build_page(response: CatalogResponse, state: PageState, page_size: int) -> CatalogPage:
    """Compute the visible slice and totals for a response under ``state``."""

    if state.is_category_mode:
        ordered = sort_products(response.products, state.sort)
        start = state.page_index * page_size
        products = ordered[start : start + page_size]
        effective_total = len(ordered)
    else:
        products = list(response.products)
        effective_total = response.total

    return CatalogPage(
        products=products,
        effective_total=effective_total,
        total_pages=total_pages(effective_total, page_size),
        page_index=state.page_index,
    )


async def fetch_catalog(client: CatalogClient, query: CatalogQuery) -> CatalogResponse:
    """Execute ``query`` against the remote service."""

    if isinstance(query, CategoryFetchQuery):
        return await client.list_by_category(query.category)
    return await client.list_products(query)


async def load_catalog_page(
    client: CatalogClient,
    state: PageState,
    page_size: int,
) -> CatalogPage:
    """Run a single fetch cycle for ``state`` without any session bookkeeping."""

    response = await fetch_catalog(client, derive_query(state, page_size))
    return build_page(response, state, page_size)


ViewListener = Callable[[CatalogView], None]


class CatalogController:
    """Stateful reconciler behind an interactive catalog page.

    User intents (``set_search``, ``set_category``, ``set_sort``,
    ``set_page``) update the owned ``PageState`` and start fetch cycles as
    asyncio tasks. Intents must be issued from inside a running event loop.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        page_size: int | None = None,
        debounce_ms: int | None = None,
        initial_state: PageState | None = None,
        on_change: ViewListener | None = None,
    ) -> None:
        self._client = client
        self.page_size = page_size or settings.CATALOG_PAGE_SIZE
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")

        self._state = initial_state or PageState(
            sort=SortOption(settings.DEFAULT_SORT_OPTION)
        )
        self._raw_search = self._state.search_text
        self._lifecycle: Lifecycle = Idle()
        self._generation = 0
        self._last_page: CatalogPage | None = None
        # Page count of the current result set; 1 until that set has loaded
        self._known_pages = 1
        self._pending_query: CatalogQuery | None = None
        self._category_result: tuple[str, CatalogResponse] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._on_change = on_change

        window = settings.SEARCH_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self._debouncer: Debouncer[str] = Debouncer(
            self._state.search_text,
            window,
            on_settle=self._on_search_settled,
        )

        self.sort_picker: SelectableOptions[SortOption] = SelectableOptions(
            self._state.sort,
            list(SORT_OPTION_LABELS.items()),
            placeholder="Sort",
        )
        self.sort_picker.subscribe(self.set_sort)

        self.category_picker: SelectableOptions[str] = SelectableOptions(
            self._state.category or "",
            [("", ALL_CATEGORIES_LABEL)],
            placeholder=ALL_CATEGORIES_LABEL,
        )
        self.category_picker.subscribe(lambda slug: self.set_category(slug or None))

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def lifecycle(self) -> Lifecycle:
        return self._lifecycle

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def search_text(self) -> str:
        """Raw, not yet debounced, search input."""
        return self._raw_search

    def view(self) -> CatalogView:
        """Renderable snapshot of the current state."""

        lifecycle = self._lifecycle
        last = self._last_page
        if isinstance(lifecycle, Loaded):
            products = lifecycle.page.products
        elif isinstance(lifecycle, Loading) and last is not None:
            products = last.products
        else:
            products = []

        pages = last.total_pages if last else 1
        page_index = self._state.page_index
        return CatalogView(
            products=products,
            loading=isinstance(lifecycle, Loading),
            error=lifecycle.message if isinstance(lifecycle, Errored) else None,
            effective_total=last.effective_total if last else 0,
            total_pages=pages,
            page_index=page_index,
            has_previous=page_index > 0,
            has_next=page_index < pages - 1,
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def set_search(self, text: str) -> None:
        """Record raw search input; it takes effect once typing pauses."""

        self._raw_search = text
        self._debouncer.push(text)

    def set_category(self, category: str | None) -> asyncio.Task[None] | None:
        return self._dispatch(SetCategory(category=category))

    def set_sort(self, sort: SortOption) -> asyncio.Task[None] | None:
        return self._dispatch(SetSort(sort=sort))

    def set_page(self, page_index: int) -> asyncio.Task[None] | None:
        """Navigate to ``page_index``, clamped to the known page range."""

        pages = self._known_pages
        clamped = max(0, min(page_index, pages - 1))
        if clamped != page_index:
            logger.debug("Clamped page %s to %s (pages=%s)", page_index, clamped, pages)
        return self._dispatch(SetPage(page_index=clamped))

    def next_page(self) -> asyncio.Task[None] | None:
        if not self.view().has_next:
            return None
        return self.set_page(self._state.page_index + 1)

    def previous_page(self) -> asyncio.Task[None] | None:
        if self._state.page_index == 0:
            return None
        return self.set_page(self._state.page_index - 1)

    def refresh(self) -> asyncio.Task[None] | None:
        """Re-run the current query against the network."""

        self._category_result = None
        self._pending_query = None
        return self._reconcile()

    async def load_categories(self) -> list[Category]:
        """Populate the category picker. Failures leave only the default option."""

        try:
            categories = await self._client.list_categories()
        except FetchError as exc:
            logger.warning("Could not load categories: %s", normalize_error(exc))
            categories = []

        self.category_picker.replace_options(
            [("", ALL_CATEGORIES_LABEL)] + [(c.slug, c.display_name) for c in categories]
        )
        return categories

    async def wait_idle(self) -> None:
        """Wait until no fetch cycle is in flight."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending timers and in-flight cycles."""

        self._debouncer.close()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _on_search_settled(self, text: str) -> None:
        self._dispatch(SetSearch(text=text))

    def _dispatch(self, intent: PageIntent) -> asyncio.Task[None] | None:
        previous = self._state
        self._state = apply_intent(previous, intent)

        if isinstance(intent, SetSearch) and self._state == previous:
            return None
        if self._state.category != previous.category:
            self._category_result = None
        if (
            self._state.category != previous.category
            or self._state.search_text != previous.search_text
        ):
            self._known_pages = 1

        self.sort_picker.set_value(self._state.sort)
        self.category_picker.set_value(self._state.category or "")
        return self._reconcile()

    def _reconcile(self) -> asyncio.Task[None] | None:
        query = derive_query(self._state, self.page_size)

        if isinstance(query, CategoryFetchQuery):
            cached = self._category_result
            if cached is not None and cached[0] == query.category:
                # Sort/page change over an already fetched category: local only
                self._generation += 1
                self._pending_query = None
                self._apply(cached[1])
                return None
            if self._pending_query == query:
                # The in-flight fetch is sliced against the state current on arrival
                return None

        return self._start_cycle(query)

    def _start_cycle(self, query: CatalogQuery) -> asyncio.Task[None]:
        self._generation += 1
        generation = self._generation
        self._pending_query = query
        self._lifecycle = Loading(generation=generation)
        logger.debug("Starting fetch cycle %s: %s", generation, query)
        self._notify()

        task = asyncio.get_running_loop().create_task(self._run_cycle(generation, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_cycle(self, generation: int, query: CatalogQuery) -> None:
        try:
            response = await fetch_catalog(self._client, query)
        except Exception as exc:
            if generation != self._generation:
                logger.debug("Discarding stale failure from cycle %s", generation)
                return
            self._pending_query = None
            message = normalize_error(exc, LOAD_FAILED_MESSAGE)
            logger.warning("Fetch cycle %s failed: %s", generation, message)
            self._lifecycle = Errored(message=message)
            self._notify()
            return

        if generation != self._generation:
            logger.debug(
                "Discarding stale response from cycle %s (current %s)",
                generation,
                self._generation,
            )
            return

        self._pending_query = None
        if isinstance(query, CategoryFetchQuery):
            self._category_result = (query.category, response)
        self._apply(response)

    def _apply(self, response: CatalogResponse) -> None:
        page = build_page(response, self._state, self.page_size)
        self._known_pages = page.total_pages
        last_index = page.total_pages - 1
        if self._state.page_index > last_index:
            logger.debug(
                "Page %s out of range (pages=%s), clamping",
                self._state.page_index,
                page.total_pages,
            )
            self._state = self._state.model_copy(update={"page_index": last_index})
            if not self._state.is_category_mode:
                # The server returned an empty page; fetch the last real one
                self._start_cycle(derive_query(self._state, self.page_size))
                return
            page = build_page(response, self._state, self.page_size)
        self._last_page = page
        self._lifecycle = Loaded(page=page)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.view())
