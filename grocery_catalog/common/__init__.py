# Common utilities
from .config_loader import (
    CatalogSettings,
    SourceSettings,
    build_catalog_settings,
    load_catalog_settings,
    load_config,
)
from .constants import (
    CATEGORIES,
    CATEGORY_IDS,
    DEFAULT_CATEGORY,
    SUPERMARKET_IDS,
    SUPERMARKETS,
    get_supermarket_name,
)
from .csv_utils import export_rows, rows_to_records, write_csv
from .log_config import setup_logging
from .money import format_pence, to_pence
