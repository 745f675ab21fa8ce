"""Bidirectional mapping between QueryState and the URL query string.

Two one-directional paths exist:

- user setters change the state and, for navigable fields, push the URL;
- ``apply_location`` re-parses a URL after a navigation event and never
  writes the URL back.

Listeners are told which path produced a change, so no shared reactive loop
is needed.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol
from urllib.parse import parse_qs, urlencode

from posts_manager.core.settings import settings
from posts_manager.schemas import NAVIGABLE_FIELDS, QueryState, SortBy, SortOrder

logger = logging.getLogger(__name__)

# URL parameter name for each QueryState field
URL_PARAMS: dict[str, str] = {
    "skip": "skip",
    "limit": "limit",
    "search": "search",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
    "tag": "tag",
}


class ChangeSource(str, Enum):
    """Origin of a QueryState change."""

    USER = "user"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class QueryChange:
    """Notification sent to store listeners."""

    state: QueryState
    previous: QueryState
    changed: frozenset[str]
    source: ChangeSource

    @property
    def requires_reload(self) -> bool:
        """True when a field that drives the reactive fetch changed."""
        return bool(self.changed & NAVIGABLE_FIELDS)


QueryListener = Callable[[QueryChange], None]


class Navigator(Protocol):
    """Anything able to record a new location, such as ``MemoryHistory``."""

    def push(self, location: str) -> None: ...


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_query_string(query: str, default_limit: int | None = None) -> QueryState:
    """Build a QueryState from a URL query string.

    Missing or malformed values fall back to their defaults.
    """
    default_limit = default_limit or settings.default_page_limit
    values = {key: items[-1] for key, items in parse_qs(query.lstrip("?")).items()}

    skip = _parse_int(values.get("skip"), 0)
    limit = _parse_int(values.get("limit"), default_limit)

    try:
        sort_by = SortBy(values.get("sortBy") or SortBy.NONE.value)
    except ValueError:
        sort_by = SortBy.NONE
    try:
        sort_order = SortOrder(values.get("sortOrder") or SortOrder.ASC.value)
    except ValueError:
        sort_order = SortOrder.ASC

    return QueryState(
        skip=max(skip, 0),
        limit=limit if limit > 0 else default_limit,
        search=values.get("search", ""),
        sort_by=sort_by,
        sort_order=sort_order,
        tag=values.get("tag", ""),
    )


def serialize_query_state(state: QueryState, default_limit: int | None = None) -> str:
    """Render a QueryState as a query string, omitting default values."""
    default_limit = default_limit or settings.default_page_limit
    params: list[tuple[str, str]] = []
    if state.skip:
        params.append((URL_PARAMS["skip"], str(state.skip)))
    if state.limit != default_limit:
        params.append((URL_PARAMS["limit"], str(state.limit)))
    if state.search:
        params.append((URL_PARAMS["search"], state.search))
    if state.sort_by is not SortBy.NONE:
        params.append((URL_PARAMS["sort_by"], state.sort_by.value))
    if state.sort_order is not SortOrder.ASC:
        params.append((URL_PARAMS["sort_order"], state.sort_order.value))
    if state.tag:
        params.append((URL_PARAMS["tag"], state.tag))
    return urlencode(params)


class QueryStateStore:
    """Source of truth for filter, sort and pagination intent."""

    def __init__(
        self,
        navigator: Navigator | None = None,
        *,
        initial_location: str = "",
        default_limit: int | None = None,
    ) -> None:
        self.navigator = navigator
        self.default_limit = default_limit or settings.default_page_limit
        self._state = parse_query_string(initial_location, self.default_limit)
        self._listeners: list[QueryListener] = []

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def query_string(self) -> str:
        return serialize_query_state(self._state, self.default_limit)

    def subscribe(self, listener: QueryListener) -> Callable[[], None]:
        """Register a change listener and return its remover."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def apply_location(self, location: str) -> QueryChange | None:
        """Overwrite the state from a URL after a navigation event."""
        parsed = parse_query_string(location, self.default_limit)
        return self._commit(parsed, ChangeSource.NAVIGATION)

    def update(self, **changes: Any) -> QueryChange | None:
        """Apply user changes to one or more fields in a single step."""
        unknown = set(changes) - set(URL_PARAMS)
        if unknown:
            raise ValueError(f"Unknown query fields: {sorted(unknown)}")
        candidate = QueryState.model_validate({**self._state.model_dump(), **changes})
        return self._commit(candidate, ChangeSource.USER)

    def set_skip(self, skip: int) -> QueryChange | None:
        return self.update(skip=skip)

    def set_limit(self, limit: int) -> QueryChange | None:
        return self.update(limit=limit)

    def set_search(self, search: str) -> QueryChange | None:
        return self.update(search=search)

    def set_sort_by(self, sort_by: SortBy | str) -> QueryChange | None:
        return self.update(sort_by=sort_by)

    def set_sort_order(self, sort_order: SortOrder | str) -> QueryChange | None:
        return self.update(sort_order=sort_order)

    def set_tag(self, tag: str) -> QueryChange | None:
        return self.update(tag=tag)

    def go_next(self, total: int) -> QueryChange | None:
        if not self._state.has_next_page(total):
            return None
        return self.update(skip=self._state.skip + self._state.limit)

    def go_previous(self) -> QueryChange | None:
        if not self._state.has_previous_page:
            return None
        return self.update(skip=max(0, self._state.skip - self._state.limit))

    def _commit(self, candidate: QueryState, source: ChangeSource) -> QueryChange | None:
        changed = candidate.changed_fields(self._state)
        if not changed:
            return None

        change = QueryChange(
            state=candidate,
            previous=self._state,
            changed=changed,
            source=source,
        )
        self._state = candidate

        if source is ChangeSource.USER and change.requires_reload and self.navigator:
            self.navigator.push(self.query_string)

        logger.debug("Query state %s change: %s", source.value, sorted(changed))
        for listener in list(self._listeners):
            listener(change)
        return change
