"""REST client for the posts, comments and users backend.

This module provides the ApiClient class that handles all communication
with the DummyJSON-style backend. It includes:

- A lazily created ``httpx.AsyncClient`` bound to the configured base URL
- Uniform mapping of transport, status and payload failures to ``ApiError``
- One coroutine per endpoint, returning validated Pydantic models
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from posts_manager.core.settings import settings
from posts_manager.schemas import (
    Comment,
    CommentDraft,
    CommentLike,
    CommentsPage,
    CommentUpdate,
    Post,
    PostDraft,
    PostsPage,
    PostUpdate,
    Tag,
    User,
    UsersPage,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400

ModelT = TypeVar("ModelT", bound=BaseModel)

_TAGS_ADAPTER = TypeAdapter(list[Tag])


class ApiError(RuntimeError):
    """Base exception raised when a backend call fails.

    Transport failures, error statuses and malformed payloads all end up here;
    callers treat every subclass as "operation failed".
    """


class ApiResponseError(ApiError):
    """Raised when the backend answers with an error status."""

    def __init__(self, status_code: int, endpoint: str) -> None:
        super().__init__(f"{endpoint} responded with {status_code}")
        self.status_code = status_code
        self.endpoint = endpoint


@dataclass(frozen=True)
class ApiConfig:
    """Immutable configuration for backend access."""

    base_url: str
    timeout_seconds: float
    author_fields: str
    apply_server_sort: bool


def load_api_config() -> ApiConfig:
    """Build configuration object from global settings."""

    return ApiConfig(
        base_url=settings.api_root,
        timeout_seconds=float(settings.api_timeout_seconds),
        author_fields=settings.author_fields,
        apply_server_sort=settings.apply_server_sort,
    )


class ApiClient:
    """HTTP client wrapper for the posts backend."""

    POSTS_CREATE_PATH = "/posts/add"
    COMMENTS_CREATE_PATH = "/comments/add"

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_api_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                    headers={"Accept": "application/json"},
                )
        return self._client

    @dataclass
    class RequestParams:
        """Parameters for HTTP requests."""
        method: str
        path: str
        json_data: Any | None = None
        params: Mapping[str, Any] | None = None

    async def _request(self, params: RequestParams) -> Any:
        client = await self._ensure_client()
        endpoint = f"{params.method} {params.path}"
        logger.debug("Backend request %s params=%s", endpoint, params.params)

        try:
            response = await client.request(
                params.method,
                params.path,
                json=params.json_data,
                params=params.params,
            )
        except httpx.HTTPError as exc:
            raise ApiError(f"{endpoint} failed: {exc}") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            raise ApiResponseError(response.status_code, endpoint)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"{endpoint} returned a non-JSON body") from exc

    async def _request_model(self, params: RequestParams, model: type[ModelT]) -> ModelT:
        payload = await self._request(params)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise ApiError(
                f"{params.method} {params.path} returned an unexpected payload"
            ) from exc

    # Posts

    async def fetch_posts(
        self,
        *,
        limit: int,
        skip: int,
        sort_by: str | None = None,
        order: str | None = None,
    ) -> PostsPage:
        """Fetch one page of the unfiltered post list."""

        query: dict[str, Any] = {"limit": limit, "skip": skip}
        if self.config.apply_server_sort and sort_by:
            query["sortBy"] = sort_by
            query["order"] = order or "asc"

        return await self._request_model(
            self.RequestParams(method="GET", path="/posts", params=query),
            PostsPage,
        )

    async def search_posts(self, q: str) -> PostsPage:
        """Fetch posts matching a free-text query."""

        return await self._request_model(
            self.RequestParams(method="GET", path="/posts/search", params={"q": q}),
            PostsPage,
        )

    async def fetch_posts_by_tag(self, tag: str) -> PostsPage:
        """Fetch posts carrying ``tag``; the tag is escaped as one path segment."""

        return await self._request_model(
            self.RequestParams(method="GET", path=f"/posts/tag/{quote(tag, safe='')}"),
            PostsPage,
        )

    async def fetch_tags(self) -> list[Tag]:
        """Fetch every selectable tag."""

        payload = await self._request(self.RequestParams(method="GET", path="/posts/tags"))
        try:
            return _TAGS_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            raise ApiError("GET /posts/tags returned an unexpected payload") from exc

    async def create_post(self, draft: PostDraft) -> Post:
        """Create a post and return it with its server-assigned id."""

        return await self._request_model(
            self.RequestParams(
                method="POST",
                path=self.POSTS_CREATE_PATH,
                json_data=draft.to_wire(),
            ),
            Post,
        )

    async def update_post(self, post_id: int, update: PostUpdate) -> Post:
        """Send a (partial) post update and return the updated post."""

        return await self._request_model(
            self.RequestParams(
                method="PUT",
                path=f"/posts/{post_id}",
                json_data=update.to_wire(),
            ),
            Post,
        )

    async def delete_post(self, post_id: int) -> None:
        """Delete a post."""

        await self._request(self.RequestParams(method="DELETE", path=f"/posts/{post_id}"))

    # Comments

    async def fetch_comments(self, post_id: int) -> CommentsPage:
        """Fetch every comment of a post."""

        return await self._request_model(
            self.RequestParams(method="GET", path=f"/comments/post/{post_id}"),
            CommentsPage,
        )

    async def create_comment(self, draft: CommentDraft) -> Comment:
        """Create a comment and return it with its server-assigned id."""

        return await self._request_model(
            self.RequestParams(
                method="POST",
                path=self.COMMENTS_CREATE_PATH,
                json_data=draft.to_wire(),
            ),
            Comment,
        )

    async def update_comment(self, comment_id: int, update: CommentUpdate) -> Comment:
        """Replace a comment body."""

        return await self._request_model(
            self.RequestParams(
                method="PUT",
                path=f"/comments/{comment_id}",
                json_data=update.to_wire(),
            ),
            Comment,
        )

    async def like_comment(self, comment_id: int, likes: int) -> Comment:
        """Store an absolute like count on a comment."""

        return await self._request_model(
            self.RequestParams(
                method="PUT",
                path=f"/comments/{comment_id}",
                json_data=CommentLike(likes=likes).to_wire(),
            ),
            Comment,
        )

    async def delete_comment(self, comment_id: int) -> None:
        """Delete a comment."""

        await self._request(
            self.RequestParams(method="DELETE", path=f"/comments/{comment_id}")
        )

    # Users

    async def fetch_users(self, *, limit: int = 0, select: str | None = None) -> UsersPage:
        """Fetch the user listing; ``limit=0`` asks for every user."""

        return await self._request_model(
            self.RequestParams(
                method="GET",
                path="/users",
                params={"limit": limit, "select": select or self.config.author_fields},
            ),
            UsersPage,
        )

    async def fetch_user(self, user_id: int) -> User:
        """Fetch a full user profile."""

        return await self._request_model(
            self.RequestParams(method="GET", path=f"/users/{user_id}"),
            User,
        )

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _ApiClientSingleton:
    """Singleton wrapper for ApiClient."""

    _instance: ApiClient | None = None

    @classmethod
    def get_instance(cls) -> ApiClient:
        """Get or create the singleton ApiClient instance."""
        if cls._instance is None:
            cls._instance = ApiClient()
        return cls._instance


def get_api_client() -> ApiClient:
    """Return a singleton API client instance."""
    return _ApiClientSingleton.get_instance()
