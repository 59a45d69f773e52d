"""
Catalog document normalization.

Modules:
    classifier - Structural classification of document levels and records
    normalizer - CatalogNormalizer flattening documents into ProductRows
"""

from .classifier import NodeKind, classify_node, has_entry, parse_net_weight, parse_product_record
from .normalizer import CatalogNormalizer, normalize

__all__ = [
    'CatalogNormalizer',
    'NodeKind',
    'classify_node',
    'has_entry',
    'normalize',
    'parse_net_weight',
    'parse_product_record',
]
