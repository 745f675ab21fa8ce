"""Orchestration services for the posts manager."""

from .api_client import ApiClient, ApiError, ApiResponseError, get_api_client
from .comment_cache import CommentCacheManager
from .history import MemoryHistory
from .mutations import MutationCoordinator
from .post_collection import FetchStrategy, PostCollectionManager
from .posts_manager import PostsManager
from .query_state import ChangeSource, QueryChange, QueryStateStore
from .tag_catalog import TagCatalog
from .user_lookup import UserLookupService

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiResponseError",
    "get_api_client",
    "CommentCacheManager",
    "MemoryHistory",
    "MutationCoordinator",
    "FetchStrategy",
    "PostCollectionManager",
    "PostsManager",
    "ChangeSource",
    "QueryChange",
    "QueryStateStore",
    "TagCatalog",
    "UserLookupService",
]
