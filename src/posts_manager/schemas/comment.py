"""Comment-related Pydantic schemas."""
from __future__ import annotations

from pydantic import Field

from .common import WireModel


class CommentUser(WireModel):
    """Author summary embedded in every comment."""

    id: int
    username: str = ""
    full_name: str = ""


class Comment(WireModel):
    """Comment belonging to exactly one post."""

    id: int
    body: str = ""
    post_id: int
    likes: int = Field(default=0, ge=0)
    user: CommentUser


class CommentsPage(WireModel):
    """Response of ``GET /comments/post/{postId}``."""

    comments: list[Comment] = Field(default_factory=list)
    total: int = 0


class CommentDraft(WireModel):
    """Payload for creating a comment."""

    body: str = ""
    post_id: int | None = None
    user_id: int = 1


class CommentCreate(CommentDraft):
    """Create payload accepted over HTTP; the owning post is required."""

    post_id: int


class CommentUpdate(WireModel):
    """Payload for editing a comment body."""

    body: str


class CommentLike(WireModel):
    """Payload carrying an absolute like count."""

    likes: int = Field(ge=0)


def merge_comment(current: Comment, updated: Comment) -> Comment:
    """Apply a server-acknowledged comment onto the cached entry.

    Some backends answer partial updates without the embedded user; the cached
    one is kept in that case.
    """
    if updated.user.username or not current.user.username:
        return updated
    return updated.model_copy(update={"user": current.user})
