"""Application settings and configuration.

This module defines all configuration options for the Viet K-Connect API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Viet K-Connect API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./kconnect.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT session settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Post listing tunables
    post_list_default_limit: int = Field(default=20, alias="POST_LIST_DEFAULT_LIMIT")
    post_list_max_limit: int = Field(default=50, alias="POST_LIST_MAX_LIMIT")
    search_max_length: int = Field(default=80, alias="SEARCH_MAX_LENGTH")
    search_max_tokens: int = Field(default=8, alias="SEARCH_MAX_TOKENS")
    post_preview_limit: int = Field(default=4000, alias="POST_PREVIEW_LIMIT")

    # Shared cache directives for anonymous feed responses
    feed_cache_s_maxage: int = Field(default=60, alias="FEED_CACHE_S_MAXAGE")
    feed_cache_swr: int = Field(default=300, alias="FEED_CACHE_SWR")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
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
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Bare PostgreSQL URLs are bound to psycopg 3, the driver shipped in the
        ``postgres`` extra.
        """
        url = self.database_url
        if self.use_testing_database and self.test_database_url:
            url = self.test_database_url
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url


settings = Settings()  # type: ignore[call-arg]
