"""Application settings and configuration.

This module defines all configuration options for the Blog Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    This class defines all configuration options for the Blog Stage application.
    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Blog Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Public site address used for redirects, sitemap and robots
    site_url: str = Field(default="http://localhost:3000", alias="SITE_URL")

    # Hosted backend (auth + GraphQL)
    supabase_url: str = Field(alias="SUPABASE_URL")
    supabase_anon_key: str = Field(alias="SUPABASE_ANON_KEY")
    supabase_jwt_secret: str = Field(alias="SUPABASE_JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str = Field(default="authenticated", alias="JWT_AUDIENCE")

    # Outbound HTTP behaviour
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    circuit_failure_threshold: int = Field(default=5, alias="CIRCUIT_FAILURE_THRESHOLD")
    circuit_recovery_seconds: float = Field(default=60.0, alias="CIRCUIT_RECOVERY_SECONDS")
    circuit_success_threshold: int = Field(default=3, alias="CIRCUIT_SUCCESS_THRESHOLD")

    # Anonymous read cache (revalidation window for public pages)
    revalidate_seconds: int = Field(default=60, alias="REVALIDATE_SECONDS")
    query_cache_max_entries: int = Field(default=512, alias="QUERY_CACHE_MAX_ENTRIES")

    # Page sizes
    posts_per_page: int = Field(default=6, alias="POSTS_PER_PAGE")
    search_page_size: int = Field(default=20, alias="SEARCH_PAGE_SIZE")
    comments_page_size: int = Field(default=50, alias="COMMENTS_PAGE_SIZE")
    notifications_page_size: int = Field(default=10, alias="NOTIFICATIONS_PAGE_SIZE")
    author_posts_page_size: int = Field(default=20, alias="AUTHOR_POSTS_PAGE_SIZE")
    sitemap_max_posts: int = Field(default=1000, alias="SITEMAP_MAX_POSTS")

    # Session cookies
    access_cookie_name: str = Field(default="sb-access-token", alias="ACCESS_COOKIE_NAME")
    refresh_cookie_name: str = Field(default="sb-refresh-token", alias="REFRESH_COOKIE_NAME")
    verifier_cookie_name: str = Field(default="sb-code-verifier", alias="VERIFIER_COOKIE_NAME")
    cookie_secure: bool = Field(default=True, alias="COOKIE_SECURE")
    refresh_cookie_max_age: int = Field(
        default=60 * 60 * 24 * 30,
        alias="REFRESH_COOKIE_MAX_AGE",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
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
    def graphql_url(self) -> str:
        """Return the GraphQL endpoint of the hosted backend."""
        return f"{self.supabase_url.rstrip('/')}/graphql/v1"

    @property
    def auth_url(self) -> str:
        """Return the base URL of the hosted auth endpoints."""
        return f"{self.supabase_url.rstrip('/')}/auth/v1"

    @property
    def base_site_url(self) -> str:
        """Return the public site URL without a trailing slash."""
        return self.site_url.rstrip("/")


settings = Settings()  # type: ignore[call-arg]
