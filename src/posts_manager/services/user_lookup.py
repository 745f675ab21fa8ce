"""On-demand user fetches: full profiles and the bulk author listing."""
from __future__ import annotations

import logging

from posts_manager.schemas import Author, User
from posts_manager.services.api_client import ApiClient, ApiError, get_api_client

logger = logging.getLogger(__name__)


class UserLookupService:
    """Fetch users for the author join and the profile view."""

    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or get_api_client()

    async def fetch_one(self, user_id: int) -> User | None:
        """Return the full profile of ``user_id``; always hits the network."""
        try:
            return await self.client.fetch_user(user_id)
        except ApiError as exc:
            logger.warning("Failed to fetch user %s: %s", user_id, exc)
            return None

    async def fetch_authors(self) -> list[Author]:
        """Return every user with the reduced field set used by the post table.

        Errors propagate; the fetch strategy calling this owns the failure.
        """
        page = await self.client.fetch_users(limit=0)
        return page.users
