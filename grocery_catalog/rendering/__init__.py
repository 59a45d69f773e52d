"""
Table rendering for product rows.

Modules:
    table_view - TableView (sort, pagination, text rendering)
"""

from .table_view import DISPLAYED_COLUMNS, TableView, format_cell

__all__ = ['DISPLAYED_COLUMNS', 'TableView', 'format_cell']
