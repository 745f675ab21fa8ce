"""
Pydantic schemas for backend payloads and page state.

These schemas define the structure of REST data for serialization and validation.
"""

from .comment import (
    Comment,
    CommentCreate,
    CommentDraft,
    CommentLike,
    CommentsPage,
    CommentUpdate,
    CommentUser,
    merge_comment,
)
from .post import (
    Post,
    PostDraft,
    PostsPage,
    PostUpdate,
    PostWithAuthor,
    Reactions,
    Tag,
    join_author,
    merge_post,
)
from .page import PageSnapshot, QueryPatch, SearchRequest
from .query import ALL_TAGS, NAVIGABLE_FIELDS, QueryState, SortBy, SortOrder
from .ui import UIState
from .user import Address, Author, Company, User, UsersPage

__all__ = [
    "Comment", "CommentCreate", "CommentDraft", "CommentLike", "CommentsPage", "CommentUpdate",
    "CommentUser", "merge_comment",
    "Post", "PostDraft", "PostsPage", "PostUpdate", "PostWithAuthor",
    "Reactions", "Tag", "join_author", "merge_post",
    "ALL_TAGS", "NAVIGABLE_FIELDS", "QueryState", "SortBy", "SortOrder",
    "PageSnapshot", "QueryPatch", "SearchRequest", "UIState",
    "Address", "Author", "Company", "User", "UsersPage",
]
