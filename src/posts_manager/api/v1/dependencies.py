"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from posts_manager.services.posts_manager import PostsManager


class _PostsManagerSingleton:
    """Singleton wrapper for the page controller served over HTTP."""

    _instance: PostsManager | None = None

    @classmethod
    def get_instance(cls) -> PostsManager:
        """Get or create the singleton PostsManager instance."""
        if cls._instance is None:
            cls._instance = PostsManager()
        return cls._instance

    @classmethod
    def peek(cls) -> PostsManager | None:
        return cls._instance


def get_posts_manager() -> PostsManager:
    """Return the shared page controller."""
    return _PostsManagerSingleton.get_instance()


def current_posts_manager() -> PostsManager | None:
    """Return the shared page controller if one was created."""
    return _PostsManagerSingleton.peek()


async def get_mounted_manager(
    manager: Annotated[PostsManager, Depends(get_posts_manager)],
) -> PostsManager:
    """Return the page controller, mounting it on first use."""
    if not manager.mounted:
        await manager.mount()
    return manager


async def get_manager_at_location(
    request: Request,
    manager: Annotated[PostsManager, Depends(get_posts_manager)],
) -> PostsManager:
    """Return the page controller, mounting it at the request's query string on first use."""
    if not manager.mounted:
        await manager.mount(request.url.query)
    return manager


ManagerDep = Annotated[PostsManager, Depends(get_mounted_manager)]
LocatedManagerDep = Annotated[PostsManager, Depends(get_manager_at_location)]
