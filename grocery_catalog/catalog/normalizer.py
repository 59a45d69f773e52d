"""
Catalog Normalizer

Flattens a category catalog document into ProductRow records.

Documents look like:

    {"items": {
        "<subcategory>": {
            "<supermarket id>": {"<product id>": {"n": ..., "p": ...}, ...},
            "<grouping>": {
                "<supermarket id>": {...}
            }
        }
    }}

A sub-category may hold supermarket maps directly, grouping levels that
hold supermarket maps, or a mix of both. Only two grouping levels below
"items" are searched: supermarket maps nested any deeper are not reached
and their products are dropped.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..common.constants import (
    ITEMS_KEY,
    SUBCATEGORY_SEPARATOR,
    SUPERMARKETS,
)
from ..common.money import to_pence
from ..models import ProductRow, RawProductRecord
from .classifier import (
    NodeKind,
    classify_node,
    has_entry,
    is_mapping,
    parse_net_weight,
    parse_product_record,
)

logger = logging.getLogger(__name__)

# (subcategory label, supermarket id, product mapping)
ProductGroup = Tuple[str, str, Any]


class CatalogNormalizer:
    """
    Turns raw catalog documents into ordered product rows.

    Never raises for malformed documents: anything that is not where a
    supermarket map or product record is expected is skipped.

    Usage:
        normalizer = CatalogNormalizer()
        rows = normalizer.normalize(document, "salad", supermarket_filter="as")
    """

    def __init__(self, supermarkets: Optional[Dict[str, str]] = None):
        """
        Initialize the normalizer.

        Args:
            supermarkets: Supermarket id -> display name table (default: SUPERMARKETS)
        """
        self.supermarkets = dict(SUPERMARKETS if supermarkets is None else supermarkets)
        self.supermarket_ids = frozenset(self.supermarkets)

    def supermarket_name(self, supermarket_id: str) -> str:
        return self.supermarkets.get(supermarket_id, supermarket_id)

    def normalize(
        self,
        document: Any,
        category: str,
        supermarket_filter: Optional[str] = None,
    ) -> List[ProductRow]:
        """
        Flatten a catalog document.

        Args:
            document: Parsed JSON document
            category: Category label copied onto every row
            supermarket_filter: Only include this supermarket id (None = all)

        Returns:
            Rows in document key order (empty if the document has no "items")
        """
        items = document.get(ITEMS_KEY) if is_mapping(document) else None
        if not is_mapping(items):
            logger.debug("Document for %s has no items mapping, skipping", category)
            return []

        rows = []
        for subcategory, supermarket_id, products in self._iter_product_groups(items, supermarket_filter):
            rows.extend(self._rows_for_group(products, category, subcategory, supermarket_id))

        logger.debug("Normalized %d rows for %s (supermarket=%s)", len(rows), category, supermarket_filter)
        return rows

    def _iter_product_groups(
        self,
        items: Mapping,
        supermarket_filter: Optional[str],
    ) -> Iterator[ProductGroup]:
        """Yield every product mapping reachable under "items", in key order."""
        for subcategory, level in items.items():
            if not is_mapping(level):
                continue
            if supermarket_filter:
                yield from self._filtered_groups(level, str(subcategory), supermarket_filter)
            else:
                yield from self._all_groups(level, str(subcategory))

    def _filtered_groups(self, level: Mapping, subcategory: str, supermarket_id: str) -> Iterator[ProductGroup]:
        # Found directly under the sub-category: no nested search
        if has_entry(level, supermarket_id):
            yield subcategory, supermarket_id, level[supermarket_id]
            return

        for grouping, nested in level.items():
            if is_mapping(nested) and has_entry(nested, supermarket_id):
                yield self._join(subcategory, grouping), supermarket_id, nested[supermarket_id]

    def _all_groups(self, level: Mapping, subcategory: str) -> Iterator[ProductGroup]:
        for key, nested in level.items():
            if key in self.supermarket_ids:
                yield subcategory, key, nested
                continue

            # Only a grouping level can hold supermarket maps one level down
            if classify_node(nested, self.supermarket_ids) is not NodeKind.SUPERMARKET_MAP:
                continue
            for supermarket_id, products in nested.items():
                if supermarket_id in self.supermarket_ids:
                    yield self._join(subcategory, key), supermarket_id, products

    @staticmethod
    def _join(outer: Any, inner: Any) -> str:
        return f"{outer}{SUBCATEGORY_SEPARATOR}{inner}"

    def _rows_for_group(
        self,
        products: Any,
        category: str,
        subcategory: str,
        supermarket_id: str,
    ) -> Iterator[ProductRow]:
        if not is_mapping(products):
            return
        for product_id, value in products.items():
            record = parse_product_record(value)
            if record is None:
                continue
            yield self.create_row(record, str(product_id), category, subcategory, supermarket_id)

    def create_row(
        self,
        record: RawProductRecord,
        product_id: str,
        category: str,
        subcategory: str,
        supermarket_id: str,
    ) -> ProductRow:
        """
        Map one raw record onto a ProductRow.

        Args:
            record: Parsed product record
            product_id: Key of the record within its supermarket map
            category: Category label
            subcategory: Sub-category path label
            supermarket_id: Supermarket the record was found under

        Returns:
            ProductRow with price in pence and supermarket display name
        """
        return ProductRow(
            id=product_id,
            name=record.n,
            category=category,
            subcategory=subcategory,
            price=to_pence(record.p),
            quantity=record.q,
            unit=record.u,
            price_per_unit=record.ppuom,
            image=record.img,
            net_weight=parse_net_weight(record.nw),
            supermarket=self.supermarket_name(supermarket_id),
        )


_default_normalizer = CatalogNormalizer()


def normalize(document: Any, category: str, supermarket_filter: Optional[str] = None) -> List[ProductRow]:
    """Flatten a catalog document using the built-in supermarket table."""
    return _default_normalizer.normalize(document, category, supermarket_filter)
