"""
Shared constants for the project.

Closed sets of supermarket and category identifiers used by the catalog
documents, plus the document path layout. Single source of truth for both
the normalizer and the filter pipeline.
"""

# Supermarket id -> display name (order is the order shown in the filter bar)
SUPERMARKETS = {
    "as": "Asda",
    "al": "Aldi",
    "ms": "Morrisons",
    "oc": "Ocado",
    "tc": "Tesco",
}

SUPERMARKET_IDS = frozenset(SUPERMARKETS)

# Category id -> display name
CATEGORIES = {
    "fruit": "Fruit",
    "vegs": "Vegetables",
    "sndfm": "Seeds & Nuts",
    "prtn": "Protein",
    "salad": "Salad",
}

CATEGORY_IDS = frozenset(CATEGORIES)

DEFAULT_CATEGORY = "salad"

# Catalog documents live at /data-3/<category-id>.json
CATALOG_PATH_TEMPLATE = "/data-3/{category}.json"

# Top-level key holding the sub-category tree
ITEMS_KEY = "items"

# Separator between outer and inner grouping labels ("leafy - organic")
SUBCATEGORY_SEPARATOR = " - "

PENCE_PER_POUND = 100
CURRENCY_SYMBOL = "£"

DEFAULT_DEBOUNCE_SECONDS = 0.1


def get_supermarket_name(supermarket_id: str) -> str:
    """Resolve a supermarket id to its display name (unknown ids map to themselves)."""
    return SUPERMARKETS.get(supermarket_id, supermarket_id)
