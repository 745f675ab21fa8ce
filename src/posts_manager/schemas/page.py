"""Serializable views of the posts page."""
from __future__ import annotations

from pydantic import Field

from .comment import Comment
from .common import WireModel
from .post import PostWithAuthor, Tag
from .query import QueryState, SortBy, SortOrder
from .ui import UIState


class PageSnapshot(WireModel):
    """Everything a renderer needs to draw the page at one instant."""

    query: QueryState
    query_string: str = ""
    posts: list[PostWithAuthor] = Field(default_factory=list)
    total: int = 0
    loading: bool = False
    strategy: str | None = None
    search_active: bool = False
    has_previous_page: bool = False
    has_next_page: bool = False
    tags: list[Tag] = Field(default_factory=list)
    limit_options: list[int] = Field(default_factory=list)
    ui: UIState = Field(default_factory=UIState)
    selected_post_comments: list[Comment] | None = None


class QueryPatch(WireModel):
    """User changes to the query; unset fields are left alone."""

    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, gt=0)
    search: str | None = None
    sort_by: SortBy | None = None
    sort_order: SortOrder | None = None
    tag: str | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


class SearchRequest(WireModel):
    """Explicit search trigger; ``None`` reuses the text already typed."""

    q: str | None = None
