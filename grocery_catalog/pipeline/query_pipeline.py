"""
Filter Query Pipeline

Combines the category and supermarket selections into catalog queries:

    selection change -> debounce -> drop unchanged (category, supermarket)
        -> fetch /data-3/<category>.json (switch to latest) -> normalize -> sinks

Only the most recently started fetch may publish. Fetch and parse
failures publish an empty row list instead of propagating, and a sink
that raises is logged without stopping the other sinks. After
close() nothing is fetched or published.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from ..catalog import CatalogNormalizer
from ..common.config_loader import CatalogSettings
from ..common.constants import (
    CATEGORY_IDS,
    DEFAULT_CATEGORY,
    DEFAULT_DEBOUNCE_SECONDS,
    SUPERMARKET_IDS,
)
from ..models import ProductRow
from ..sources import DocumentFetchError, DocumentSource, catalog_path
from .selection import SelectionSlot

logger = logging.getLogger(__name__)

RowSink = Callable[[List[ProductRow]], None]
FilterPair = Tuple[Optional[str], Optional[str]]

_NO_PAIR = object()


class FilterQueryPipeline:
    """
    Reactive product query driven by two selection slots.

    Must be started from inside a running asyncio event loop; all
    callbacks, timers and fetches run on that loop.

    Usage:
        async with FilterQueryPipeline(source, sink=table.update) as pipeline:
            pipeline.select_supermarket("as")
            await pipeline.wait_until_idle()
    """

    def __init__(
        self,
        source: DocumentSource,
        sink: Optional[RowSink] = None,
        normalizer: Optional[CatalogNormalizer] = None,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        initial_category: Optional[str] = DEFAULT_CATEGORY,
        initial_supermarket: Optional[str] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            source: Where catalog documents are fetched from
            sink: Called with each published row list
            normalizer: Document normalizer (default: CatalogNormalizer())
            debounce: Seconds to coalesce selection changes over
            initial_category: Category selected at start
            initial_supermarket: Supermarket selected at start (None = all)
        """
        if debounce < 0:
            raise ValueError("debounce must not be negative")

        self.source = source
        self.normalizer = normalizer or CatalogNormalizer()
        self.debounce = debounce

        self.category = SelectionSlot("category", CATEGORY_IDS, initial_category)
        self.supermarket = SelectionSlot("supermarket", SUPERMARKET_IDS, initial_supermarket)

        self.rows: List[ProductRow] = []
        self._sinks: List[RowSink] = [sink] if sink else []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._debounce_task: Optional[asyncio.Task] = None
        self._fetch_task: Optional[asyncio.Task] = None
        self._last_pair = _NO_PAIR
        self._generation = 0
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        source: DocumentSource,
        settings: CatalogSettings,
        sink: Optional[RowSink] = None,
    ) -> "FilterQueryPipeline":
        return cls(
            source,
            sink=sink,
            debounce=settings.debounce_seconds,
            initial_category=settings.default_category,
        )

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    @property
    def started(self) -> bool:
        return self._loop is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def add_sink(self, sink: RowSink) -> Callable[[], None]:
        """
        Register another row sink.

        Returns:
            Function removing the sink
        """
        self._sinks.append(sink)

        def remove() -> None:
            if sink in self._sinks:
                self._sinks.remove(sink)

        return remove

    def start(self) -> None:
        """
        Attach to the running event loop and schedule the first query.

        Raises:
            RuntimeError: If already started, closed, or not called from a running loop
        """
        if self._closed:
            raise RuntimeError("Pipeline is closed")
        if self._loop is not None:
            raise RuntimeError("Pipeline already started")

        self._loop = asyncio.get_running_loop()
        self._unsubscribers = [
            self.category.subscribe(self._on_selection_changed),
            self.supermarket.subscribe(self._on_selection_changed),
        ]

    def close(self) -> None:
        """Stop the pipeline: cancel pending work and block further publication."""
        if self._closed:
            return
        self._closed = True

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        for task in (self._debounce_task, self._fetch_task):
            if task is not None and not task.done():
                task.cancel()
        logger.debug("Pipeline closed")

    async def aclose(self) -> None:
        """Close and wait for cancelled tasks to finish."""
        self.close()
        pending = self._pending_tasks()
        if pending:
            await asyncio.wait(pending)

    # -- Selection -----------------------------------------------------

    def select_category(self, category_id: str) -> Optional[str]:
        return self.category.select(category_id)

    def select_supermarket(self, supermarket_id: str) -> Optional[str]:
        return self.supermarket.select(supermarket_id)

    def is_category_selected(self, category_id: str) -> bool:
        return self.category.is_selected(category_id)

    def is_supermarket_selected(self, supermarket_id: str) -> bool:
        return self.supermarket.is_selected(supermarket_id)

    @property
    def current_filters(self) -> FilterPair:
        return self.category.value, self.supermarket.value

    # -- Scheduling ----------------------------------------------------

    def _pending_tasks(self) -> set:
        return {
            task for task in (self._debounce_task, self._fetch_task)
            if task is not None and not task.done()
        }

    async def wait_until_idle(self) -> None:
        """Wait until no debounce timer or fetch is outstanding."""
        while True:
            pending = self._pending_tasks()
            if not pending:
                return
            await asyncio.wait(pending)

    def _on_selection_changed(self, _value: Optional[str]) -> None:
        if self._closed or self._loop is None:
            return

        # Restart the debounce window
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = self._loop.create_task(self._debounce())

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce)
        self._debounce_task = None
        self._query(self.current_filters)

    def _query(self, pair: FilterPair) -> None:
        if self._closed:
            return
        if pair == self._last_pair:
            logger.debug("Filters unchanged %s, not refetching", pair)
            return
        self._last_pair = pair

        # Switch to latest: supersede whatever is in flight
        self._generation += 1
        generation = self._generation
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._fetch_task = None

        category, supermarket = pair
        logger.info("Filter changed: category=%s supermarket=%s", category, supermarket)

        if category is None:
            logger.debug("No category selected, publishing empty rows")
            self._publish([], generation)
            return

        self._fetch_task = self._loop.create_task(self._load(category, supermarket, generation))

    async def _load(self, category: str, supermarket: Optional[str], generation: int) -> None:
        path = catalog_path(category)
        try:
            document = await self.source.fetch(path)
            rows = self.normalizer.normalize(document, category, supermarket)
        except DocumentFetchError as e:
            logger.error("Error loading %s: %s", category, e)
            rows = []
        except Exception:
            logger.exception("Error processing catalog for %s", category)
            rows = []
        else:
            logger.info("Loaded %d items for category %s", len(rows), category)

        self._publish(rows, generation)

    def _publish(self, rows: List[ProductRow], generation: int) -> None:
        if self._closed or generation != self._generation:
            logger.debug("Discarding stale result (generation %d)", generation)
            return

        self.rows = rows
        for sink in list(self._sinks):
            try:
                sink(rows)
            except Exception:
                logger.exception("Row sink %r failed", sink)
