"""
Catalog document sources.

Modules:
    document_source - HTTP and local-directory sources for catalog JSON
"""

from .document_source import (
    DocumentFetchError,
    DocumentSource,
    HttpDocumentSource,
    LocalDocumentSource,
    catalog_path,
)

__all__ = [
    'DocumentFetchError',
    'DocumentSource',
    'HttpDocumentSource',
    'LocalDocumentSource',
    'catalog_path',
]
