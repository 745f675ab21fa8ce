"""Dialog and selection state of the posts page."""
from __future__ import annotations

from pydantic import Field

from .comment import Comment, CommentDraft, CommentUpdate
from .common import WireModel
from .post import PostDraft, PostUpdate, PostWithAuthor
from .user import User


class UIState(WireModel):
    """Everything the page shows besides the data collections themselves."""

    show_add_dialog: bool = False
    show_edit_dialog: bool = False
    show_add_comment_dialog: bool = False
    show_edit_comment_dialog: bool = False
    show_post_detail_dialog: bool = False
    show_user_modal: bool = False

    selected_post: PostWithAuthor | None = None
    selected_comment: Comment | None = None
    selected_user: User | None = None

    new_post: PostDraft = Field(default_factory=PostDraft)
    post_edit: PostUpdate | None = None
    new_comment: CommentDraft = Field(default_factory=CommentDraft)
    comment_edit: CommentUpdate | None = None
