"""Shared test fixtures."""

import asyncio
import json
from pathlib import Path

import pytest

from grocery_catalog.models import NetWeight, ProductRow
from grocery_catalog.sources import DocumentFetchError, DocumentSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class StaticDocumentSource(DocumentSource):
    """Returns canned documents at once; unknown paths fail like a 404."""

    def __init__(self, documents):
        self.documents = documents
        self.calls = []

    async def fetch(self, path):
        self.calls.append(path)
        if path not in self.documents:
            raise DocumentFetchError(path, "HTTP 404")
        document = self.documents[path]
        if isinstance(document, Exception):
            raise document
        return document


class GatedDocumentSource(DocumentSource):
    """Holds each fetch open until the test releases that path."""

    def __init__(self, documents):
        self.documents = documents
        self.calls = []
        self.cancelled = []
        self._started = {}
        self._gates = {}

    def _event(self, table, path):
        if path not in table:
            table[path] = asyncio.Event()
        return table[path]

    async def fetch(self, path):
        self.calls.append(path)
        self._event(self._started, path).set()
        try:
            await self._event(self._gates, path).wait()
        except asyncio.CancelledError:
            self.cancelled.append(path)
            raise
        return self.documents[path]

    async def wait_started(self, path):
        await self._event(self._started, path).wait()

    def release(self, path):
        self._event(self._gates, path).set()


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def salad_document():
    """Load the mixed-shape salad catalog fixture."""
    return json.loads((FIXTURES_DIR / "data-3" / "salad.json").read_text(encoding="utf-8"))


@pytest.fixture
def spinach_document():
    """Single product directly under a supermarket map."""
    return {"items": {"leafy": {"as": {"p1": {"n": "Spinach", "p": 1.2}}}}}


@pytest.fixture
def kale_document():
    """Single product one grouping level below the sub-category."""
    return {"items": {"leafy": {"organic": {"as": {"p2": {"n": "Kale"}}}}}}


@pytest.fixture
def category_documents(spinach_document, kale_document):
    """Documents keyed by path for the fake sources."""
    return {
        "/data-3/salad.json": spinach_document,
        "/data-3/vegs.json": kale_document,
        "/data-3/fruit.json": {"items": {"citrus": {"tc": {"f1": {"n": "Lemon", "p": 0.3}}}}},
    }


@pytest.fixture
def sample_rows():
    """A few rows for table and CSV tests."""
    return [
        ProductRow(id="p1", name="Spinach", category="salad", subcategory="leafy",
                   price=120, supermarket="Asda", net_weight=NetWeight(t=250, u="g")),
        ProductRow(id="a1", name="cherry tomatoes", category="salad", subcategory="tomatoes",
                   price=79, supermarket="Aldi", net_weight=NetWeight(t=0.25, u="kg")),
        ProductRow(id="o2", name="Organic Chard", category="salad", subcategory="leafy - organic",
                   price=0, supermarket="Morrisons"),
    ]


@pytest.fixture
def static_source(category_documents):
    """Immediate source over category_documents."""
    return StaticDocumentSource(category_documents)


@pytest.fixture
def gated_source(category_documents):
    """Test-controlled source over category_documents."""
    return GatedDocumentSource(category_documents)
