"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .page import router as page_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "comments_router",
    "page_router",
    "posts_router",
    "users_router",
]
