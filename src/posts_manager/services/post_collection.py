"""Fetch-strategy selection, author join and the displayed page of posts.

The reactive path picks between the tag-filtered endpoint and the plain
paginated list. Free-text search only runs on an explicit trigger and keeps
its result on screen until the next reactive load.

Every load or search takes a new generation number. A response whose
generation is no longer current is dropped, so a slow, superseded request
can never overwrite what a newer one displayed.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum

from posts_manager.schemas import (
    Author,
    Post,
    PostsPage,
    PostWithAuthor,
    QueryState,
    SortBy,
    join_author,
    merge_post,
)
from posts_manager.services.api_client import ApiClient, ApiError, get_api_client
from posts_manager.services.user_lookup import UserLookupService

logger = logging.getLogger(__name__)


class FetchStrategy(str, Enum):
    """Endpoint family that produced the displayed posts."""

    LIST = "list"
    TAG = "tag"
    SEARCH = "search"


def select_strategy(state: QueryState) -> FetchStrategy:
    """Tag filter wins over the plain list on the reactive path."""
    return FetchStrategy.TAG if state.has_tag_filter else FetchStrategy.LIST


def build_author_index(authors: Iterable[Author]) -> dict[int, Author]:
    return {author.id: author for author in authors}


def join_posts(posts: Iterable[Post], authors: dict[int, Author]) -> list[PostWithAuthor]:
    """Join posts with authors by ``user_id``; unmatched posts keep no author."""
    return [join_author(post, authors) for post in posts]


class PostCollectionManager:
    """Owns the displayed posts, the reported total and the loading flag."""

    def __init__(
        self,
        client: ApiClient | None = None,
        users: UserLookupService | None = None,
    ) -> None:
        self.client = client or get_api_client()
        self.users = users or UserLookupService(self.client)
        self._posts: list[PostWithAuthor] = []
        self._total = 0
        self._loading = False
        self._generation = 0
        self._authors: dict[int, Author] = {}
        self.strategy: FetchStrategy | None = None
        self.search_query = ""

    @property
    def posts(self) -> list[PostWithAuthor]:
        return list(self._posts)

    @property
    def total(self) -> int:
        """Server-reported count for the active strategy."""
        return self._total

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def search_active(self) -> bool:
        return self.strategy is FetchStrategy.SEARCH

    async def load(self, state: QueryState) -> bool:
        """Run the reactive fetch for ``state``.

        Returns True when the response was applied.
        """
        strategy = select_strategy(state)

        if self.strategy is FetchStrategy.TAG and strategy is FetchStrategy.LIST:
            # Tag filter cleared: the filtered page must not linger.
            self._posts = []
            self._total = 0

        if strategy is FetchStrategy.TAG:
            return await self._run(strategy, lambda: self.client.fetch_posts_by_tag(state.tag))

        sort_by = None if state.sort_by is SortBy.NONE else state.sort_by.value
        return await self._run(
            strategy,
            lambda: self.client.fetch_posts(
                limit=state.limit,
                skip=state.skip,
                sort_by=sort_by,
                order=state.sort_order.value,
            ),
        )

    async def search(self, query: str, state: QueryState) -> bool:
        """Run the explicit search; an empty query falls back to ``load``."""
        query = query.strip()
        if not query:
            return await self.load(state)
        return await self._run(
            FetchStrategy.SEARCH,
            lambda: self.client.search_posts(query),
            search_query=query,
        )

    async def _run(
        self,
        strategy: FetchStrategy,
        fetch_page: Callable[[], Awaitable[PostsPage]],
        *,
        search_query: str = "",
    ) -> bool:
        self._generation += 1
        generation = self._generation
        self._loading = True

        try:
            page, authors = await self._fetch_with_authors(fetch_page)
        except ApiError as exc:
            logger.warning("Failed to fetch posts (%s): %s", strategy.value, exc)
            return False
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation:
            logger.debug(
                "Discarding stale %s response (generation %s, current %s)",
                strategy.value,
                generation,
                self._generation,
            )
            return False

        self._authors = build_author_index(authors)
        self._posts = join_posts(page.posts, self._authors)
        self._total = page.total
        self.strategy = strategy
        self.search_query = search_query
        return True

    async def _fetch_with_authors(
        self, fetch_page: Callable[[], Awaitable[PostsPage]]
    ) -> tuple[PostsPage, list[Author]]:
        """Fetch the page and the author listing concurrently.

        When one call fails the other is cancelled and awaited before the
        error propagates.
        """
        page_task = asyncio.ensure_future(fetch_page())
        authors_task = asyncio.ensure_future(self.users.fetch_authors())
        try:
            page, authors = await asyncio.gather(page_task, authors_task)
        except Exception:
            for task in (page_task, authors_task):
                task.cancel()
            await asyncio.gather(page_task, authors_task, return_exceptions=True)
            raise
        return page, authors

    def get(self, post_id: int) -> PostWithAuthor | None:
        return next((post for post in self._posts if post.id == post_id), None)

    def join_one(self, post: Post) -> PostWithAuthor:
        """Join a single post with the author index of the last fetch."""
        return join_author(post, self._authors)

    def prepend(self, post: Post) -> PostWithAuthor:
        """Insert a freshly created post at the top; ``total`` is left alone."""
        joined = self.join_one(post)
        self._posts.insert(0, joined)
        return joined

    def replace(self, updated: Post) -> PostWithAuthor | None:
        """Swap the entry with the same id in place, keeping display order."""
        for index, current in enumerate(self._posts):
            if current.id == updated.id:
                merged = merge_post(current, updated)
                if merged.author is None:
                    merged = self.join_one(merged)
                self._posts[index] = merged
                return merged
        logger.debug("Post %s is not displayed; update not applied locally", updated.id)
        return None

    def remove(self, post_id: int) -> bool:
        """Filter the entry out; ``total`` is left alone."""
        remaining = [post for post in self._posts if post.id != post_id]
        removed = len(remaining) != len(self._posts)
        self._posts = remaining
        return removed

    def reset(self) -> None:
        """Drop everything; responses still in flight become stale."""
        self._generation += 1
        self._posts = []
        self._total = 0
        self._loading = False
        self._authors = {}
        self.strategy = None
        self.search_query = ""
