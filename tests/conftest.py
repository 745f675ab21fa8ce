# tests/conftest.py
from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from posts_manager.api.v1.dependencies import get_posts_manager
from posts_manager.main import app as posts_app
from posts_manager.schemas import CommentsPage, PostsPage, UsersPage
from posts_manager.services.api_client import ApiClient, ApiConfig
from posts_manager.services.history import MemoryHistory
from posts_manager.services.posts_manager import PostsManager

BACKEND_URL = "http://backend.test"

USERS: list[dict[str, Any]] = [
    {
        "id": 1,
        "username": "emilys",
        "image": "https://img.test/1.png",
        "firstName": "Emily",
        "lastName": "Johnson",
        "age": 28,
        "email": "emily.johnson@x.dummyjson.com",
        "phone": "+81 965-431-3024",
        "address": {"address": "626 Main Street", "city": "Phoenix", "state": "Mississippi"},
        "company": {"name": "Dooley, Kozey and Cronin", "title": "Sales Manager"},
    },
    {"id": 2, "username": "michaelw", "image": "https://img.test/2.png", "firstName": "Michael"},
    {"id": 3, "username": "sophiab", "image": "https://img.test/3.png", "firstName": "Sophia"},
]

POSTS: list[dict[str, Any]] = [
    {
        "id": 1,
        "title": "His mother had always taught him",
        "body": "His mother had always taught him not to ever think of himself as better than others.",
        "userId": 1,
        "tags": ["history", "american", "crime"],
        "reactions": {"likes": 192, "dislikes": 25},
        "views": 305,
    },
    {
        "id": 2,
        "title": "He was an expert but not in a discipline",
        "body": "He was an expert but not in a discipline that anyone could fully appreciate.",
        "userId": 2,
        "tags": ["french", "fiction", "english"],
        "reactions": {"likes": 859, "dislikes": 32},
        "views": 4884,
    },
    {
        "id": 3,
        "title": "Dave watched as the forest burned up on the hill",
        "body": "Dave watched as the forest burned up on the hill, only a few miles from her house.",
        "userId": 3,
        "tags": ["magical", "history", "french"],
        "reactions": {"likes": 1448, "dislikes": 39},
        "views": 4152,
    },
    {
        "id": 4,
        "title": "All he wanted was a candy bar",
        "body": "All he wanted was a candy bar. It didn't seem like a difficult request to comprehend.",
        "userId": 99,
        "tags": ["mystery", "english", "american"],
        "reactions": {"likes": 359, "dislikes": 18},
        "views": 4548,
    },
    {
        "id": 5,
        "title": "Hopes and dreams were dashed that day",
        "body": "Hopes and dreams were dashed that day. It should have been expected.",
        "userId": 1,
        "tags": ["crime", "mystery", "love"],
        "reactions": {"likes": 119, "dislikes": 30},
        "views": 626,
    },
]

COMMENTS: dict[int, list[dict[str, Any]]] = {
    1: [
        {
            "id": 1,
            "body": "This is some awesome thinking!",
            "postId": 1,
            "likes": 3,
            "user": {"id": 2, "username": "michaelw", "fullName": "Michael Williams"},
        },
        {
            "id": 2,
            "body": "What terrific math skills you're showing!",
            "postId": 1,
            "likes": 5,
            "user": {"id": 3, "username": "sophiab", "fullName": "Sophia Brown"},
        },
    ],
}

TAGS: list[dict[str, str]] = [
    {"slug": "history", "name": "History", "url": f"{BACKEND_URL}/posts/tag/history"},
    {"slug": "crime", "name": "Crime", "url": f"{BACKEND_URL}/posts/tag/crime"},
    {"slug": "french", "name": "French", "url": f"{BACKEND_URL}/posts/tag/french"},
]

# The backend reports more posts than the handful served here.
LIST_TOTAL = 30


class FakeBackend:
    """In-memory DummyJSON lookalike served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.users = copy.deepcopy(USERS)
        self.posts = copy.deepcopy(POSTS)
        self.comments = copy.deepcopy(COMMENTS)
        self.tags = copy.deepcopy(TAGS)
        self.requests: list[httpx.Request] = []
        self.fail_paths: set[str] = set()
        self.next_post_id = 251
        self.next_comment_id = 341

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        params = request.url.params

        if path in self.fail_paths:
            return httpx.Response(500, json={"message": "backend exploded"})

        if method == "GET" and path == "/posts":
            skip = int(params.get("skip", 0))
            limit = int(params.get("limit", 30))
            return httpx.Response(
                200,
                json={
                    "posts": self.posts[skip:skip + limit],
                    "total": LIST_TOTAL,
                    "skip": skip,
                    "limit": limit,
                },
            )
        if method == "GET" and path == "/posts/search":
            q = params.get("q", "").lower()
            found = [p for p in self.posts if q in p["title"].lower()]
            return httpx.Response(200, json={"posts": found, "total": len(found)})
        if method == "GET" and path == "/posts/tags":
            return httpx.Response(200, json=self.tags)
        if match := re.fullmatch(r"/posts/tag/([\w-]+)", path):
            found = [p for p in self.posts if match.group(1) in p["tags"]]
            return httpx.Response(200, json={"posts": found, "total": len(found)})
        if method == "POST" and path == "/posts/add":
            body = json.loads(request.content)
            created = {"id": self.next_post_id, **body}
            self.next_post_id += 1
            return httpx.Response(201, json=created)
        if match := re.fullmatch(r"/posts/(\d+)", path):
            post = next((p for p in self.posts if p["id"] == int(match.group(1))), None)
            if post is None:
                return httpx.Response(404, json={"message": "Post not found"})
            if method == "PUT":
                return httpx.Response(200, json={**post, **json.loads(request.content)})
            if method == "DELETE":
                return httpx.Response(200, json={**post, "isDeleted": True})

        if match := re.fullmatch(r"/comments/post/(\d+)", path):
            found = self.comments.get(int(match.group(1)), [])
            return httpx.Response(200, json={"comments": found, "total": len(found)})
        if method == "POST" and path == "/comments/add":
            body = json.loads(request.content)
            user = next(u for u in self.users if u["id"] == body["userId"])
            created = {
                "id": self.next_comment_id,
                "body": body["body"],
                "postId": body["postId"],
                "likes": 0,
                "user": {"id": user["id"], "username": user["username"], "fullName": "Emily Johnson"},
            }
            self.next_comment_id += 1
            return httpx.Response(201, json=created)
        if match := re.fullmatch(r"/comments/(\d+)", path):
            comment_id = int(match.group(1))
            comment = next(
                (c for bucket in self.comments.values() for c in bucket if c["id"] == comment_id),
                None,
            )
            if comment is None:
                return httpx.Response(404, json={"message": "Comment not found"})
            if method == "PUT":
                return httpx.Response(200, json={**comment, **json.loads(request.content)})
            if method == "DELETE":
                return httpx.Response(200, json={**comment, "isDeleted": True})

        if method == "GET" and path == "/users":
            selected = [
                {"id": u["id"], "username": u["username"], "image": u["image"]}
                for u in self.users
            ]
            return httpx.Response(200, json={"users": selected, "total": len(selected)})
        if match := re.fullmatch(r"/users/(\d+)", path):
            user = next((u for u in self.users if u["id"] == int(match.group(1))), None)
            if user is None:
                return httpx.Response(404, json={"message": "User not found"})
            return httpx.Response(200, json=user)

        return httpx.Response(404, json={"message": f"No route for {method} {path}"})


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def api_config() -> ApiConfig:
    return ApiConfig(
        base_url=BACKEND_URL,
        timeout_seconds=5.0,
        author_fields="username,image",
        apply_server_sort=False,
    )


@pytest.fixture()
def api_client(backend: FakeBackend, api_config: ApiConfig) -> ApiClient:
    return ApiClient(config=api_config, transport=httpx.MockTransport(backend.handle))


@pytest.fixture()
def history() -> MemoryHistory:
    return MemoryHistory()


@pytest.fixture()
def manager(api_client: ApiClient, history: MemoryHistory) -> Iterator[PostsManager]:
    yield PostsManager(client=api_client, history=history)


@pytest.fixture()
def app(manager: PostsManager) -> Iterator[FastAPI]:
    """Serve the page controller bound to the fake backend."""
    posts_app.dependency_overrides[get_posts_manager] = lambda: manager
    try:
        yield posts_app
    finally:
        posts_app.dependency_overrides.pop(get_posts_manager, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def mock_client() -> AsyncMock:
    """ApiClient double answering with the fixture data."""
    client = AsyncMock(spec=ApiClient)
    client.fetch_posts.return_value = PostsPage.model_validate(
        {"posts": POSTS, "total": LIST_TOTAL, "skip": 0, "limit": 10}
    )
    client.fetch_posts_by_tag.return_value = PostsPage.model_validate(
        {"posts": [POSTS[0], POSTS[2]], "total": 2}
    )
    client.search_posts.return_value = PostsPage.model_validate(
        {"posts": [POSTS[3]], "total": 1}
    )
    client.fetch_users.return_value = UsersPage.model_validate(
        {"users": [{"id": u["id"], "username": u["username"], "image": u["image"]} for u in USERS]}
    )
    client.fetch_comments.return_value = CommentsPage.model_validate(
        {"comments": COMMENTS[1], "total": 2}
    )
    return client
