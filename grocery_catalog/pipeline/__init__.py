"""
Reactive filter pipeline.

Modules:
    selection      - SelectionSlot toggle-select observable state
    query_pipeline - FilterQueryPipeline (debounce, dedupe, switch-latest fetch)
"""

from .query_pipeline import FilterQueryPipeline
from .selection import SelectionSlot

__all__ = ['FilterQueryPipeline', 'SelectionSlot']
