"""Page controller tying query state, collections and dialogs together."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from posts_manager.core.settings import settings
from posts_manager.schemas import (
    Comment,
    CommentDraft,
    CommentUpdate,
    PageSnapshot,
    PostDraft,
    PostUpdate,
    PostWithAuthor,
    QueryState,
    UIState,
    User,
)
from posts_manager.services.api_client import ApiClient, get_api_client
from posts_manager.services.comment_cache import CommentCacheManager
from posts_manager.services.history import MemoryHistory
from posts_manager.services.mutations import MutationCoordinator
from posts_manager.services.post_collection import PostCollectionManager
from posts_manager.services.query_state import QueryChange, QueryStateStore
from posts_manager.services.tag_catalog import TagCatalog
from posts_manager.services.user_lookup import UserLookupService

logger = logging.getLogger(__name__)


def _fresh_ui_state() -> UIState:
    return UIState(
        new_post=PostDraft(user_id=settings.default_author_id),
        new_comment=CommentDraft(user_id=settings.default_author_id),
    )


class PostsManager:
    """Headless posts page.

    Store changes that touch navigable fields schedule a reload of the post
    collection; ``settle`` awaits whatever was scheduled. Every user action
    that depends on the network is a coroutine.
    """

    def __init__(
        self,
        client: ApiClient | None = None,
        history: MemoryHistory | None = None,
    ) -> None:
        self.client = client or get_api_client()
        self.history = history or MemoryHistory()
        self.store = QueryStateStore(self.history, initial_location=self.history.location)
        self.users = UserLookupService(self.client)
        self.tags = TagCatalog(self.client)
        self.posts = PostCollectionManager(self.client, self.users)
        self.comments = CommentCacheManager(self.client)
        self.mutations = MutationCoordinator(self.posts, self.comments, self.client)
        self.ui = _fresh_ui_state()
        self.mounted = False
        self._pending: set[asyncio.Task[Any]] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def state(self) -> QueryState:
        return self.store.state

    # Lifecycle

    async def mount(self, location: str | None = None) -> PageSnapshot:
        """Read the initial URL, then load tags and the first page."""
        if self.mounted:
            return self.snapshot()

        if location is not None:
            self.history.replace(location)
            self.store.apply_location(location)

        self._unsubscribers = [
            self.store.subscribe(self._on_query_change),
            self.history.listen(self._on_navigation),
        ]
        self.mounted = True

        await asyncio.gather(self.tags.ensure_loaded(), self.posts.load(self.store.state))
        return self.snapshot()

    async def unmount(self) -> None:
        """Tear the page down; collections return to empty."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._pending.clear()

        self.posts.reset()
        self.comments.clear()
        self.tags.clear()
        self.ui = _fresh_ui_state()
        self.mounted = False

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def settle(self) -> None:
        """Wait until every scheduled reload has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _on_query_change(self, change: QueryChange) -> None:
        if change.requires_reload:
            self._schedule(self.posts.load(change.state))

    def _on_navigation(self, location: str) -> None:
        self.store.apply_location(location)

    # Navigation and query

    async def navigate(self, location: str) -> PageSnapshot:
        """Follow a link or typed URL: record it, then re-read the state from it."""
        self.history.push(location)
        self.store.apply_location(self.history.location)
        await self.settle()
        return self.snapshot()

    async def back(self) -> PageSnapshot:
        self.history.back()
        await self.settle()
        return self.snapshot()

    async def forward(self) -> PageSnapshot:
        self.history.forward()
        await self.settle()
        return self.snapshot()

    async def change_query(self, **changes: Any) -> PageSnapshot:
        self.store.update(**changes)
        await self.settle()
        return self.snapshot()

    async def select_tag(self, tag: str) -> PageSnapshot:
        return await self.change_query(tag=tag)

    async def go_next_page(self) -> PageSnapshot:
        self.store.go_next(self.posts.total)
        await self.settle()
        return self.snapshot()

    async def go_previous_page(self) -> PageSnapshot:
        self.store.go_previous()
        await self.settle()
        return self.snapshot()

    def set_search_text(self, text: str) -> None:
        """Typing only; neither the URL nor the displayed posts change."""
        self.store.set_search(text)

    async def submit_search(self, text: str | None = None) -> PageSnapshot:
        if text is not None:
            self.set_search_text(text)
        await self.posts.search(self.store.state.search, self.store.state)
        return self.snapshot()

    # Posts

    def open_add_post(self) -> None:
        self.ui.show_add_dialog = True

    async def submit_new_post(self, draft: PostDraft | None = None) -> PostWithAuthor | None:
        created = await self.mutations.create_post(draft or self.ui.new_post)
        if created is not None:
            self.ui.show_add_dialog = False
            self.ui.new_post = PostDraft(user_id=settings.default_author_id)
        return created

    def start_edit_post(self, post_id: int) -> PostUpdate | None:
        post = self.posts.get(post_id)
        if post is None:
            return None
        self.ui.selected_post = post
        self.ui.post_edit = PostUpdate.from_post(post)
        self.ui.show_edit_dialog = True
        return self.ui.post_edit

    async def submit_post_edit(self, update: PostUpdate | None = None) -> PostWithAuthor | None:
        selected = self.ui.selected_post
        update = update or self.ui.post_edit
        if selected is None or update is None:
            return None
        updated = await self.mutations.update_post(selected.id, update)
        if updated is not None:
            self.ui.selected_post = updated
            self.ui.post_edit = None
            self.ui.show_edit_dialog = False
        return updated

    async def delete_post(self, post_id: int) -> bool:
        return await self.mutations.delete_post(post_id)

    async def open_post_detail(self, post_id: int) -> list[Comment] | None:
        """Select a post, make sure its comments are cached and show the detail view."""
        post = self.posts.get(post_id)
        if post is None:
            logger.warning("Post %s is not displayed", post_id)
            return None
        self.ui.selected_post = post
        self.ui.show_post_detail_dialog = True
        return await self.comments.ensure_loaded(post_id)

    # Comments

    def open_add_comment(self, post_id: int) -> None:
        self.ui.new_comment = self.ui.new_comment.model_copy(update={"post_id": post_id})
        self.ui.show_add_comment_dialog = True

    async def submit_new_comment(self, draft: CommentDraft | None = None) -> Comment | None:
        created = await self.mutations.create_comment(draft or self.ui.new_comment)
        if created is not None:
            self.ui.show_add_comment_dialog = False
            self.ui.new_comment = CommentDraft(user_id=settings.default_author_id)
        return created

    def start_edit_comment(self, comment_id: int, post_id: int) -> CommentUpdate | None:
        comment = self.comments.find(comment_id, post_id)
        if comment is None:
            return None
        self.ui.selected_comment = comment
        self.ui.comment_edit = CommentUpdate(body=comment.body)
        self.ui.show_edit_comment_dialog = True
        return self.ui.comment_edit

    async def submit_comment_edit(self, update: CommentUpdate | None = None) -> Comment | None:
        selected = self.ui.selected_comment
        update = update or self.ui.comment_edit
        if selected is None or update is None:
            return None
        updated = await self.mutations.update_comment(selected.id, selected.post_id, update)
        if updated is not None:
            self.ui.selected_comment = None
            self.ui.comment_edit = None
            self.ui.show_edit_comment_dialog = False
        return updated

    async def delete_comment(self, comment_id: int, post_id: int) -> bool:
        return await self.mutations.delete_comment(comment_id, post_id)

    async def like_comment(self, comment_id: int, post_id: int) -> Comment | None:
        return await self.mutations.like_comment(comment_id, post_id)

    # Users

    async def open_user_modal(self, user_id: int) -> User | None:
        """Fetch the full profile; the modal only opens when that succeeds."""
        user = await self.users.fetch_one(user_id)
        if user is not None:
            self.ui.selected_user = user
            self.ui.show_user_modal = True
        return user

    def close_dialogs(self) -> None:
        self.ui.show_add_dialog = False
        self.ui.show_edit_dialog = False
        self.ui.show_add_comment_dialog = False
        self.ui.show_edit_comment_dialog = False
        self.ui.show_post_detail_dialog = False
        self.ui.show_user_modal = False

    def snapshot(self) -> PageSnapshot:
        state = self.store.state
        selected = self.ui.selected_post
        return PageSnapshot(
            query=state,
            query_string=self.store.query_string,
            posts=self.posts.posts,
            total=self.posts.total,
            loading=self.posts.loading,
            strategy=self.posts.strategy.value if self.posts.strategy else None,
            search_active=self.posts.search_active,
            has_previous_page=state.has_previous_page,
            has_next_page=state.has_next_page(self.posts.total),
            tags=self.tags.tags,
            limit_options=list(settings.page_limit_options),
            ui=self.ui.model_copy(deep=True),
            selected_post_comments=self.comments.get(selected.id) if selected else None,
        )
