"""In-memory stand-in for the browser history of the posts page."""
from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

NavigationListener = Callable[[str], None]


class MemoryHistory:
    """Ordered list of visited query strings with a cursor.

    ``push`` behaves like ``history.pushState``: it records a location without
    emitting an event. ``back``/``forward``/``go`` emit a navigation event, the
    way the browser fires ``popstate``.
    """

    def __init__(self, initial_location: str = "") -> None:
        self._entries: list[str] = [_strip(initial_location)]
        self._index = 0
        self._listeners: list[NavigationListener] = []

    @property
    def location(self) -> str:
        return self._entries[self._index]

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def listen(self, listener: NavigationListener) -> Callable[[], None]:
        """Register a navigation listener and return its remover."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def push(self, location: str) -> None:
        location = _strip(location)
        if location == self.location:
            return
        del self._entries[self._index + 1:]
        self._entries.append(location)
        self._index += 1
        logger.debug("History push ?%s", location)

    def replace(self, location: str) -> None:
        """Overwrite the current entry, like ``history.replaceState``."""
        self._entries[self._index] = _strip(location)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def go(self, delta: int) -> None:
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        self._index = target
        for listener in list(self._listeners):
            listener(self.location)


def _strip(location: str) -> str:
    return location.lstrip("?")
