"""Application settings and configuration.

This module defines all configuration options for the posts manager.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from posts_manager import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Posts Manager", alias="APP_NAME")
    app_version: str = Field(default=__version__, alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Upstream REST backend
    api_base_url: str = Field(default="https://dummyjson.com", alias="POSTS_API_BASE_URL")
    api_timeout_seconds: float = Field(default=10.0, alias="POSTS_API_TIMEOUT_SECONDS")

    # Pagination defaults (also the values omitted from serialized URLs)
    default_page_limit: int = Field(default=10, gt=0, alias="DEFAULT_PAGE_LIMIT")
    page_limit_options: list[int] = Field(
        default=[10, 20, 30],
        alias="PAGE_LIMIT_OPTIONS",
    )

    # Reduced field set requested for the bulk author join
    author_fields: str = Field(default="username,image", alias="AUTHOR_FIELDS")

    # Author assigned to fresh post and comment drafts
    default_author_id: int = Field(default=1, alias="DEFAULT_AUTHOR_ID")

    # Forward sortBy/order to the list endpoint. Off by default: the sort
    # controls only round-trip through the URL.
    apply_server_sort: bool = Field(default=False, alias="APPLY_SERVER_SORT")

    # CORS configuration for the JSON surface
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def api_root(self) -> str:
        """Return the backend base URL without a trailing slash."""
        return self.api_base_url.rstrip("/")


settings = Settings()
