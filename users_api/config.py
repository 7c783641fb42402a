"""
Users API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory and the `python -m users_api` entry point.
When:  Loaded once at module import time; validated before the app starts.

Environment:
    PORT, LISTEN_HOST                       → where uvicorn listens
    DB_HOST, DB_PORT, DB_USER,
    DB_PASSWORD, DB_DATABASE, DB_DRIVER     → store connection parts
    DATABASE_URL                            → full URL, overrides the parts
    LOG_LEVEL                               → logging verbosity
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults are suitable for local development against a PostgreSQL
    instance on localhost; deployments set the DB_* credentials.
    """

    # ── Server ────────────────────────────────────────────────────────────
    port: int = Field(default=3000, ge=1, le=65535)
    listen_host: str = Field(default="0.0.0.0")

    # ── Database ──────────────────────────────────────────────────────────
    # Format of the composed URL: <driver>://user:password@host:port/database
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="")
    db_password: str = Field(default="")
    db_database: str = Field(default="")
    db_driver: str = Field(
        default="postgresql+asyncpg",
        description="SQLAlchemy async dialect+driver used to build the URL",
    )

    # What: Complete connection URL; when set, the DB_* parts are ignored
    # Used by tests (sqlite+aiosqlite) and by platforms that hand out one URL
    database_url: Optional[str] = Field(default=None)

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def sqlalchemy_url(self) -> str:
        """
        What: The URL handed to create_async_engine.
        How:  DATABASE_URL verbatim, otherwise composed from the DB_* parts
              with URL.create so credentials are escaped correctly.
        """
        if self.database_url:
            return self.database_url
        url = URL.create(
            drivername=self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database or None,
        )
        return url.render_as_string(hide_password=False)

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the store connection is configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        if self.database_url:
            return
        errors = []
        if not self.db_database:
            errors.append("DB_DATABASE is not set (name of the database holding the Users table)")
        if not self.db_user:
            errors.append("DB_USER is not set")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
