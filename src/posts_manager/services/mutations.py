"""Create, update, delete and like operations for posts and comments.

Mutations are pessimistic: the in-memory collections change only after the
backend acknowledged the call. A failed call is logged and leaves every
collection as it was. ``total`` is never adjusted here; it stays the value
reported by the last list fetch.
"""
from __future__ import annotations

import logging

from posts_manager.schemas import (
    Comment,
    CommentDraft,
    CommentUpdate,
    PostDraft,
    PostUpdate,
    PostWithAuthor,
)
from posts_manager.services.api_client import ApiClient, ApiError
from posts_manager.services.comment_cache import CommentCacheManager
from posts_manager.services.post_collection import PostCollectionManager

logger = logging.getLogger(__name__)


class MutationCoordinator:
    """Runs backend mutations and merges acknowledged results locally."""

    def __init__(
        self,
        posts: PostCollectionManager,
        comments: CommentCacheManager,
        client: ApiClient | None = None,
    ) -> None:
        self.posts = posts
        self.comments = comments
        self.client = client or posts.client

    async def create_post(self, draft: PostDraft) -> PostWithAuthor | None:
        try:
            created = await self.client.create_post(draft)
        except ApiError as exc:
            logger.warning("Failed to create post: %s", exc)
            return None
        return self.posts.prepend(created)

    async def update_post(self, post_id: int, update: PostUpdate) -> PostWithAuthor | None:
        try:
            updated = await self.client.update_post(post_id, update)
        except ApiError as exc:
            logger.warning("Failed to update post %s: %s", post_id, exc)
            return None
        return self.posts.replace(updated) or self.posts.join_one(updated)

    async def delete_post(self, post_id: int) -> bool:
        try:
            await self.client.delete_post(post_id)
        except ApiError as exc:
            logger.warning("Failed to delete post %s: %s", post_id, exc)
            return False
        self.posts.remove(post_id)
        return True

    async def create_comment(self, draft: CommentDraft) -> Comment | None:
        if draft.post_id is None:
            logger.warning("Comment draft has no post id; not submitted")
            return None
        try:
            created = await self.client.create_comment(draft)
        except ApiError as exc:
            logger.warning("Failed to create comment on post %s: %s", draft.post_id, exc)
            return None
        self.comments.append(created)
        return created

    async def update_comment(
        self, comment_id: int, post_id: int, update: CommentUpdate
    ) -> Comment | None:
        try:
            updated = await self.client.update_comment(comment_id, update)
        except ApiError as exc:
            logger.warning("Failed to update comment %s: %s", comment_id, exc)
            return None
        if updated.post_id != post_id:
            updated = updated.model_copy(update={"post_id": post_id})
        return self.comments.replace(comment_id, updated) or updated

    async def delete_comment(self, comment_id: int, post_id: int) -> bool:
        try:
            await self.client.delete_comment(comment_id)
        except ApiError as exc:
            logger.warning("Failed to delete comment %s: %s", comment_id, exc)
            return False
        self.comments.remove(comment_id, post_id)
        return True

    async def like_comment(self, comment_id: int, post_id: int) -> Comment | None:
        return await self.comments.like(comment_id, post_id)
