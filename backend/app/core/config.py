"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for a local MySQL server.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

MYSQL_SYSTEM_SCHEMAS = frozenset({"mysql", "sys", "information_schema", "performance_schema"})


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables or a `.env`
    file next to the backend directory.

    Attributes:
        APP_NAME: Application name.
        APP_VERSION: Application version.
        ENVIRONMENT: development, testing or production.
        DEBUG: Enables the debug routes and the OpenAPI docs.
        DB_NAME: Default schema. Set it to an application schema when the
            database role assignment backend is used.
        DATABASE_URL: Full SQLAlchemy URL; overrides the DB_* parts.
        ROLE_ASSIGNMENT_BACKEND: "memory" (default) or "database".
    """

    # Application metadata
    APP_NAME: str = Field(default="MySQL User Manager")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    PORT: int = Field(default=4000)

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # Database connection
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=3306)
    DB_USER: str = Field(default="root")
    DB_PASSWORD: str = Field(default="")
    DB_NAME: str = Field(default="mysql")
    DATABASE_URL: Optional[str] = Field(default=None)

    # Connection pool
    DB_POOL_SIZE: int = Field(default=10)
    DB_MAX_OVERFLOW: int = Field(default=5)
    DB_POOL_TIMEOUT: int = Field(default=30)
    DB_POOL_RECYCLE: int = Field(default=1800)
    DB_CONNECT_TIMEOUT: int = Field(default=10)

    # CORS
    CORS_ORIGINS: str = Field(default="*")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False)
    CORS_METHODS: str = Field(default="GET,POST,DELETE,OPTIONS")
    CORS_HEADERS: str = Field(default="*")

    # Account management
    DEFAULT_USER_HOST: str = Field(default="localhost")
    SYSTEM_ACCOUNTS: str = Field(default="root,mysql.session,mysql.sys,debian-sys-maint")
    ROLE_ASSIGNMENT_BACKEND: str = Field(default="memory")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the server hosting the managed accounts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "mysql+pymysql",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)

    @property
    def targets_system_schema(self) -> bool:
        """True when the connection's default schema is a MySQL system schema."""
        url = make_url(self.database_url)
        return url.get_backend_name() == "mysql" and url.database in MYSQL_SYSTEM_SCHEMAS

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def cors_methods_list(self) -> list[str]:
        return _split_csv(self.CORS_METHODS)

    @property
    def cors_headers_list(self) -> list[str]:
        return _split_csv(self.CORS_HEADERS)

    @property
    def system_accounts_list(self) -> list[str]:
        return _split_csv(self.SYSTEM_ACCOUNTS)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
