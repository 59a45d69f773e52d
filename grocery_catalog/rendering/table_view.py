"""
Product Table View

In-memory table over the rows published by the filter pipeline: column
sorting, pagination and a plain-text rendering for terminals.
"""

import logging
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..common.money import format_pence
from ..models import ProductRow

logger = logging.getLogger(__name__)

# Columns shown in the table, in display order
DISPLAYED_COLUMNS = ['image', 'name', 'subcategory', 'price', 'netWeight']

COLUMN_HEADERS = {
    'image': 'Image',
    'name': 'Name',
    'subcategory': 'Subcategory',
    'price': 'Price',
    'netWeight': 'Net weight',
    'supermarket': 'Supermarket',
    'pricePerUnit': 'Price per unit',
}


def _net_weight_key(row: ProductRow) -> Optional[float]:
    # Non-numeric magnitudes sort with the missing ones
    magnitude = row.net_weight.t if row.net_weight else None
    if isinstance(magnitude, bool) or not isinstance(magnitude, Real):
        return None
    return magnitude


# Sortable column -> key function
SORT_KEYS: Dict[str, Callable[[ProductRow], Any]] = {
    'name': lambda row: row.name.lower(),
    'subcategory': lambda row: row.subcategory.lower(),
    'price': lambda row: row.price,
    'supermarket': lambda row: row.supermarket.lower(),
    'netWeight': _net_weight_key,
}

DEFAULT_PAGE_SIZE_OPTIONS = (5, 10, 20)


def format_cell(row: ProductRow, column: str) -> str:
    """Format one cell for text display."""
    if column == 'price':
        return format_pence(row.price)
    if column == 'netWeight':
        return str(row.net_weight) if row.net_weight else ""
    value = row.to_dict().get(column)
    return "" if value is None else str(value)


class TableView:
    """
    Sortable, paginated view of product rows.

    `update` has the row-sink signature, so a view can be handed straight
    to FilterQueryPipeline.
    """

    def __init__(
        self,
        page_size: int = 20,
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
        columns: Optional[List[str]] = None,
    ):
        self.page_size_options = tuple(page_size_options)
        self.columns = list(columns or DISPLAYED_COLUMNS)
        self.rows: List[ProductRow] = []
        self.page_index = 0
        self.sort_column: Optional[str] = None
        self.sort_descending = False
        self.page_size = page_size
        self.set_page_size(page_size)

    def update(self, rows: List[ProductRow]) -> None:
        """Replace all rows, keep the current sort and go back to the first page."""
        self.rows = list(rows)
        self.page_index = 0
        if self.sort_column:
            self._apply_sort()
        logger.debug("Table updated with %d rows", len(self.rows))

    def sort(self, column: str, descending: bool = False) -> None:
        """
        Sort rows by a column. Rows with no value sort last either way.

        Raises:
            ValueError: If the column is not sortable
        """
        if column not in SORT_KEYS:
            raise ValueError(f"Column not sortable: {column}")
        self.sort_column = column
        self.sort_descending = descending
        self.page_index = 0
        self._apply_sort()

    def _apply_sort(self) -> None:
        key = SORT_KEYS[self.sort_column]
        present = [row for row in self.rows if key(row) is not None]
        missing = [row for row in self.rows if key(row) is None]
        present.sort(key=key, reverse=self.sort_descending)
        self.rows = present + missing

    def set_page_size(self, page_size: int) -> None:
        """
        Raises:
            ValueError: If page_size is not one of the allowed options
        """
        if page_size not in self.page_size_options:
            raise ValueError(f"Page size must be one of {self.page_size_options}")
        self.page_size = page_size
        self.page_index = 0

    @property
    def page_count(self) -> int:
        return max(1, -(-len(self.rows) // self.page_size))

    def page(self, index: Optional[int] = None) -> List[ProductRow]:
        """
        Get the rows of one page.

        Args:
            index: Zero-based page index (default: current page)

        Returns:
            Rows on that page (empty past the last page)

        Raises:
            ValueError: If index is negative
        """
        if index is None:
            index = self.page_index
        if index < 0:
            raise ValueError("Page index must not be negative")
        start = index * self.page_size
        return self.rows[start:start + self.page_size]

    def go_to_page(self, index: int) -> List[ProductRow]:
        """Move to a page, clamped to the last page."""
        if index < 0:
            raise ValueError("Page index must not be negative")
        self.page_index = min(index, self.page_count - 1)
        return self.page()

    def range_label(self) -> str:
        """Paginator-style label, e.g. "1 – 20 of 57"."""
        total = len(self.rows)
        if total == 0:
            return "0 of 0"
        start = self.page_index * self.page_size
        end = min(start + self.page_size, total)
        return f"{start + 1} – {end} of {total}"

    def render_text(self, index: Optional[int] = None) -> str:
        """Render a page as an aligned text table."""
        headers = [COLUMN_HEADERS.get(column, column) for column in self.columns]
        body = [[format_cell(row, column) for column in self.columns] for row in self.page(index)]

        widths = [len(header) for header in headers]
        for line in body:
            widths = [max(width, len(cell)) for width, cell in zip(widths, line)]

        def fmt(cells):
            return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

        lines = [fmt(headers), fmt(["-" * width for width in widths])]
        lines.extend(fmt(line) for line in body)
        if not body:
            lines.append("No products found.")
        return "\n".join(lines)
