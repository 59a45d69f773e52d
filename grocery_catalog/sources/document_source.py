"""
Catalog Document Sources

Async sources returning parsed catalog JSON documents for a path such
as "/data-3/salad.json". HTTP fetching uses a requests session run in
a worker thread; local fetching reads from a directory mirror of the
same layout.
"""

import asyncio
import json
import logging
import math
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import requests

from ..common.constants import CATALOG_PATH_TEMPLATE, CATEGORY_IDS

logger = logging.getLogger(__name__)


class DocumentFetchError(Exception):
    """Raised when a catalog document cannot be fetched or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load {path}: {reason}")
        self.path = path
        self.reason = reason


def catalog_path(category: str) -> str:
    """
    Build the document path for a category.

    Args:
        category: Category id (e.g. "salad")

    Returns:
        Path like "/data-3/salad.json"

    Raises:
        ValueError: If the category id is unknown
    """
    if category not in CATEGORY_IDS:
        raise ValueError(f"Unknown category: {category}")
    return CATALOG_PATH_TEMPLATE.format(category=category)


class DocumentSource(ABC):
    """Base class for catalog document sources."""

    @abstractmethod
    async def fetch(self, path: str) -> Any:
        """
        Fetch and parse the document at `path`.

        Raises:
            DocumentFetchError: On transport, lookup or parse failure
        """

    def close(self) -> None:
        """Release any held resources."""


class HttpDocumentSource(DocumentSource):
    """
    Fetches catalog documents over HTTP.

    Handles:
    - Retries with backoff on 429/5xx gateway errors
    - Mapping transport, HTTP and JSON errors to DocumentFetchError

    Usage:
        source = HttpDocumentSource("http://localhost:4200")
        document = await source.fetch("/data-3/salad.json")
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the source.

        Args:
            base_url: Root URL the document paths are appended to
            timeout: Request timeout in seconds
            max_retries: Attempts per fetch (default: MAX_RETRIES)
            session: Session to use (default: a new requests.Session)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = self.MAX_RETRIES if max_retries is None else max_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.backoff_base = 1.0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self.session.close()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def fetch(self, path: str) -> Any:
        return await asyncio.to_thread(self.get_document, path)

    def retry_delay(self, response, attempt: int) -> float:
        """
        Seconds to wait before retrying.

        Uses a numeric Retry-After header when present; an HTTP-date,
        negative or unparseable header falls back to exponential backoff.
        """
        backoff = self.backoff_base * 2 ** attempt
        header = response.headers.get("Retry-After")
        if header is None:
            return backoff
        try:
            delay = float(header)
        except (TypeError, ValueError):
            return backoff
        if not math.isfinite(delay) or delay < 0:
            return backoff
        return delay

    def get_document(self, path: str) -> Any:
        """
        Blocking GET of a document with retries.

        Args:
            path: Document path (e.g. "/data-3/salad.json")

        Returns:
            Parsed JSON document

        Raises:
            DocumentFetchError: On any failure
        """
        url = self.url_for(path)

        for attempt in range(self.max_retries):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.Timeout:
                raise DocumentFetchError(path, "request timeout")
            except requests.exceptions.RequestException as e:
                raise DocumentFetchError(path, f"request failed: {e}") from e

            # Retry on rate limiting or server errors
            if response.status_code in self.RETRYABLE_STATUS_CODES:
                retry_after = self.retry_delay(response, attempt)
                logger.warning("HTTP %d on %s, retry %d/%d in %.1fs...",
                               response.status_code, path, attempt + 1,
                               self.max_retries, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code >= 400:
                raise DocumentFetchError(path, f"HTTP {response.status_code}")

            try:
                return response.json()
            except ValueError as e:
                raise DocumentFetchError(path, f"invalid JSON: {e}") from e

        raise DocumentFetchError(path, f"max retries ({self.max_retries}) exceeded")


class LocalDocumentSource(DocumentSource):
    """
    Reads catalog documents from a local directory.

    The directory mirrors the served layout, so "/data-3/salad.json"
    resolves to "<root>/data-3/salad.json".
    """

    def __init__(self, root_dir: str | Path):
        self.root_dir = Path(root_dir).resolve()

    def resolve(self, path: str) -> Path:
        """
        Map a document path to a file under the root directory.

        Raises:
            DocumentFetchError: If the path escapes the root directory
        """
        file_path = (self.root_dir / path.lstrip("/")).resolve()
        if not file_path.is_relative_to(self.root_dir):
            raise DocumentFetchError(path, "path outside data directory")
        return file_path

    async def fetch(self, path: str) -> Any:
        return self.read_document(path)

    def read_document(self, path: str) -> Any:
        """
        Read and parse a document.

        Raises:
            DocumentFetchError: If the file is missing, unreadable or not JSON
        """
        file_path = self.resolve(path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise DocumentFetchError(path, f"file not found: {file_path}")
        except (OSError, ValueError) as e:
            raise DocumentFetchError(path, str(e)) from e
