"""
Configuration Loader

Loads the YAML configuration for the catalog viewer: default filter
selection, debounce window, table paging and document source settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .constants import CATEGORY_IDS, DEFAULT_CATEGORY

CATALOG_CONFIG_FILE = 'catalog.yaml'

# Environment variables that override the YAML source settings
ENV_BASE_URL = 'CATALOG_BASE_URL'
ENV_DATA_DIR = 'CATALOG_DATA_DIR'


@dataclass
class SourceSettings:
    """Where catalog documents are fetched from."""
    base_url: str = "http://localhost:4200"
    data_dir: str = "data"
    timeout: float = 30.0
    max_retries: int = 3


@dataclass
class CatalogSettings:
    """Runtime settings for the filter pipeline and table view."""
    default_category: Optional[str] = DEFAULT_CATEGORY
    debounce_ms: int = 100
    page_size: int = 20
    page_size_options: List[int] = field(default_factory=lambda: [5, 10, 20])
    source: SourceSettings = field(default_factory=SourceSettings)

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.default_category is not None and self.default_category not in CATEGORY_IDS:
            raise ValueError(f"Unknown default category: {self.default_category}")
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if self.page_size not in self.page_size_options:
            raise ValueError(
                f"page_size {self.page_size} not in page_size_options {self.page_size_options}"
            )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


def _get_config_dir() -> Path:
    """Locate config/ beside the installed package, else under the working directory."""
    repo_root = Path(__file__).parent.parent.parent
    config_dir = repo_root / 'config'

    if config_dir.exists():
        return config_dir

    # Running from a checkout with the package installed elsewhere
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Read one file from the catalog config directory with yaml.safe_load.

    Args:
        filename: File inside config/, normally 'catalog.yaml'

    Returns:
        The parsed mapping; an empty file gives {}

    Raises:
        FileNotFoundError: If config/ or the file is missing
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def build_catalog_settings(config: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> CatalogSettings:
    """
    Build settings from a parsed config mapping.

    Args:
        config: Parsed YAML content
        env: Environment mapping for overrides (if None, uses os.environ)

    Returns:
        Validated CatalogSettings

    Raises:
        ValueError: If a setting is out of range
    """
    if env is None:
        env = os.environ

    source_cfg = config.get('source') or {}
    source = SourceSettings(
        base_url=env.get(ENV_BASE_URL) or source_cfg.get('base_url', SourceSettings.base_url),
        data_dir=env.get(ENV_DATA_DIR) or source_cfg.get('data_dir', SourceSettings.data_dir),
        timeout=float(source_cfg.get('timeout', SourceSettings.timeout)),
        max_retries=int(source_cfg.get('max_retries', SourceSettings.max_retries)),
    )

    kwargs: Dict[str, Any] = {'source': source}
    if 'default_category' in config:
        kwargs['default_category'] = config['default_category']
    if 'debounce_ms' in config:
        kwargs['debounce_ms'] = int(config['debounce_ms'])
    if 'page_size' in config:
        kwargs['page_size'] = int(config['page_size'])
    if 'page_size_options' in config:
        kwargs['page_size_options'] = [int(size) for size in config['page_size_options']]

    return CatalogSettings(**kwargs)


def load_catalog_settings(env: Optional[Dict[str, str]] = None) -> CatalogSettings:
    """
    Load catalog settings from config/catalog.yaml.

    Returns:
        Validated CatalogSettings

    Example:
        CatalogSettings(default_category='salad', debounce_ms=100, page_size=20, ...)
    """
    return build_catalog_settings(load_config(CATALOG_CONFIG_FILE), env=env)
