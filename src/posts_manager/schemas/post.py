"""Post-related Pydantic schemas."""
from __future__ import annotations

from pydantic import Field

from .common import WireModel
from .user import Author


class Reactions(WireModel):
    """Like/dislike counters attached to a post."""

    likes: int = Field(default=0, ge=0)
    dislikes: int = Field(default=0, ge=0)


class Post(WireModel):
    """Post as returned by the backend."""

    id: int
    title: str = ""
    body: str = ""
    user_id: int
    tags: list[str] = Field(default_factory=list)
    reactions: Reactions = Field(default_factory=Reactions)
    views: int = 0


class PostWithAuthor(Post):
    """Post joined with its author, when one matched ``user_id``."""

    author: Author | None = None


class PostsPage(WireModel):
    """Response of the list, search and tag endpoints."""

    posts: list[Post] = Field(default_factory=list)
    total: int = 0
    skip: int = 0
    limit: int = 0


class Tag(WireModel):
    """Selectable tag filter value."""

    slug: str
    name: str = ""
    url: str = ""


class PostDraft(WireModel):
    """Payload for creating a post."""

    title: str = ""
    body: str = ""
    user_id: int = 1


class PostUpdate(WireModel):
    """Partial payload for editing a post; unset fields are not sent."""

    title: str | None = None
    body: str | None = None

    @classmethod
    def from_post(cls, post: Post) -> PostUpdate:
        """Seed an edit draft from the currently displayed post."""
        return cls(title=post.title, body=post.body)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def join_author(post: Post, authors: dict[int, Author]) -> PostWithAuthor:
    """Attach the author whose id equals ``post.user_id``, if any."""
    data = post.model_dump()
    data.pop("author", None)
    return PostWithAuthor(**data, author=authors.get(post.user_id))


def merge_post(current: PostWithAuthor, updated: Post) -> PostWithAuthor:
    """Apply a server-acknowledged post onto the displayed entry.

    Server fields win; the joined author is kept unless the owner changed.
    """
    author = current.author if updated.user_id == current.user_id else None
    data = updated.model_dump()
    data.pop("author", None)
    return PostWithAuthor(**data, author=author)
