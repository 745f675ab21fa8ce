"""Filter, sort and pagination state of the posts page."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ALL_TAGS = "all"


class SortBy(str, Enum):
    """Sort column selected in the page controls."""

    NONE = "none"
    ID = "id"
    TITLE = "title"
    REACTIONS = "reactions"


class SortOrder(str, Enum):
    """Sort direction selected in the page controls."""

    ASC = "asc"
    DESC = "desc"


# Fields whose change is written back to the URL and triggers a reload.
NAVIGABLE_FIELDS = frozenset({"skip", "limit", "sort_by", "sort_order", "tag"})


class QueryState(BaseModel):
    """Immutable snapshot of what the user asked to see.

    ``skip`` and ``limit`` define the requested page window. An empty ``tag``
    means no tag filter; the "all" select value is normalized to it.
    """

    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=10, gt=0)
    search: str = ""
    sort_by: SortBy = SortBy.NONE
    sort_order: SortOrder = SortOrder.ASC
    tag: str = ""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("tag")
    @classmethod
    def _normalize_tag(cls, value: str) -> str:
        value = value.strip()
        return "" if value == ALL_TAGS else value

    @property
    def has_tag_filter(self) -> bool:
        return bool(self.tag)

    @property
    def has_previous_page(self) -> bool:
        return self.skip > 0

    def has_next_page(self, total: int) -> bool:
        """Forward pagination is available while the window ends before ``total``."""
        return self.skip + self.limit < total

    def changed_fields(self, other: QueryState) -> frozenset[str]:
        """Return the names of fields whose values differ from ``other``."""
        return frozenset(
            name
            for name in type(self).model_fields
            if getattr(self, name) != getattr(other, name)
        )
