"""
Data models for catalog rows.

This module contains pure data classes with no business logic.
"""

from .product import NetWeight, ProductRow, RawProductRecord

__all__ = ['NetWeight', 'ProductRow', 'RawProductRecord']
