"""
Selection Slots

Observable single-value slots backing the category and supermarket
filters. A slot holds at most one id from a closed option set, toggles
on re-selection, and notifies listeners only when its value changes.
"""

import logging
from typing import AbstractSet, Callable, List, Optional

logger = logging.getLogger(__name__)

SelectionListener = Callable[[Optional[str]], None]


class SelectionSlot:
    """
    Single-selection filter state.

    Usage:
        slot = SelectionSlot("supermarket", {"as", "tc"})
        unsubscribe = slot.subscribe(print)   # prints None
        slot.select("as")                     # prints as
        slot.select("as")                     # prints None (toggled off)
    """

    def __init__(self, name: str, options: AbstractSet[str], initial: Optional[str] = None):
        """
        Initialize the slot.

        Args:
            name: Slot name used in log messages
            options: Closed set of selectable ids
            initial: Initial value (None = nothing selected)

        Raises:
            ValueError: If initial is not one of the options
        """
        self.name = name
        self.options = frozenset(options)
        self._check(initial)
        self._value = initial
        self._listeners: List[SelectionListener] = []

    def _check(self, value: Optional[str]) -> None:
        if value is not None and value not in self.options:
            raise ValueError(f"Unknown {self.name}: {value}")

    @property
    def value(self) -> Optional[str]:
        return self._value

    def select(self, option_id: str) -> Optional[str]:
        """
        Toggle-select an id: selects it, or clears the slot if it is
        already the current value.

        Returns:
            The new value
        """
        self._check(option_id)
        self._set(None if self._value == option_id else option_id)
        return self._value

    def set(self, value: Optional[str]) -> None:
        """Set the value directly (no toggling)."""
        self._check(value)
        self._set(value)

    def clear(self) -> None:
        self._set(None)

    def is_selected(self, option_id: str) -> bool:
        return self._value == option_id

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """
        Register a listener.

        The listener is called at once with the current value, then once
        per change. Re-setting the current value does not notify.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)
        listener(self._value)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, value: Optional[str]) -> None:
        if value == self._value:
            return
        logger.debug("%s: %s -> %s", self.name, self._value, value)
        self._value = value
        for listener in list(self._listeners):
            listener(value)
