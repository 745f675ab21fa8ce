"""Lazily populated per-post comment buckets."""
from __future__ import annotations

import logging

from posts_manager.schemas import Comment, merge_comment
from posts_manager.services.api_client import ApiClient, ApiError, get_api_client

logger = logging.getLogger(__name__)


class CommentCacheManager:
    """Comment lists keyed by post id.

    A key exists only once that post's comments were fetched successfully, so
    an empty fetched bucket is distinct from one never fetched. Buckets live
    for the page session; there is no invalidation.
    """

    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or get_api_client()
        self._buckets: dict[int, list[Comment]] = {}

    def is_loaded(self, post_id: int) -> bool:
        return post_id in self._buckets

    def get(self, post_id: int) -> list[Comment] | None:
        """Return a copy of the bucket, or None when it was never fetched."""
        bucket = self._buckets.get(post_id)
        return None if bucket is None else list(bucket)

    def find(self, comment_id: int, post_id: int) -> Comment | None:
        return next(
            (comment for comment in self._buckets.get(post_id, []) if comment.id == comment_id),
            None,
        )

    async def ensure_loaded(self, post_id: int) -> list[Comment] | None:
        """Fetch the comments of ``post_id`` unless they are cached already."""
        if post_id in self._buckets:
            logger.debug("Comments for post %s already cached", post_id)
            return self.get(post_id)
        try:
            page = await self.client.fetch_comments(post_id)
        except ApiError as exc:
            logger.warning("Failed to fetch comments for post %s: %s", post_id, exc)
            return None
        self._buckets[post_id] = list(page.comments)
        return self.get(post_id)

    def append(self, comment: Comment) -> bool:
        """Add a created comment to the bucket of its own ``post_id``."""
        bucket = self._buckets.get(comment.post_id)
        if bucket is None:
            logger.debug(
                "Comments for post %s were never fetched; created comment %s not cached",
                comment.post_id,
                comment.id,
            )
            return False
        bucket.append(comment)
        return True

    def replace(self, comment_id: int, updated: Comment) -> Comment | None:
        """Swap comment ``comment_id`` in the bucket of ``updated.post_id``."""
        bucket = self._buckets.get(updated.post_id)
        if bucket is None:
            return None
        for index, current in enumerate(bucket):
            if current.id == comment_id:
                merged = merge_comment(current, updated)
                bucket[index] = merged
                return merged
        return None

    def remove(self, comment_id: int, post_id: int) -> bool:
        bucket = self._buckets.get(post_id)
        if bucket is None:
            return False
        remaining = [comment for comment in bucket if comment.id != comment_id]
        self._buckets[post_id] = remaining
        return len(remaining) != len(bucket)

    async def like(self, comment_id: int, post_id: int) -> Comment | None:
        """Send the cached like count plus one and store the answer.

        The count is read from local state, not the server: two likes sent
        before the first answer arrives both carry the same value.
        """
        current = self.find(comment_id, post_id)
        if current is None:
            logger.warning("Comment %s is not cached for post %s", comment_id, post_id)
            return None
        likes = current.likes + 1
        try:
            updated = await self.client.like_comment(comment_id, likes)
        except ApiError as exc:
            logger.warning("Failed to like comment %s: %s", comment_id, exc)
            return None
        if updated.post_id != post_id:
            updated = updated.model_copy(update={"post_id": post_id})
        return self.replace(comment_id, updated)

    def clear(self) -> None:
        self._buckets.clear()
