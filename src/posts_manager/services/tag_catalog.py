"""Session-scoped list of selectable tags."""
from __future__ import annotations

import logging

from posts_manager.schemas import Tag
from posts_manager.services.api_client import ApiClient, ApiError, get_api_client

logger = logging.getLogger(__name__)


class TagCatalog:
    """Fetches the tag list once and keeps it for the page session."""

    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or get_api_client()
        self._tags: list[Tag] | None = None

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags or [])

    @property
    def loaded(self) -> bool:
        return self._tags is not None

    async def ensure_loaded(self) -> list[Tag]:
        if self._tags is not None:
            return self.tags
        try:
            self._tags = await self.client.fetch_tags()
        except ApiError as exc:
            logger.warning("Failed to fetch tags: %s", exc)
        return self.tags

    def clear(self) -> None:
        self._tags = None
