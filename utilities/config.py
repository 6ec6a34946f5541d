"""
Database configuration loaded from environment variables.
Every connection setting is required; nothing falls back to a default host or credential.
"""

from typing import Any, Dict

import pydantic
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from books_api.errors import ConfigurationError


class DatabaseConfig(BaseSettings):
    """
    Connection settings for the relational store.
    Field names map to DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME and DB_DRIVER.
    """

    db_host: str = Field(..., description="Database host")
    db_port: int = Field(..., description="Database port")
    db_user: str = Field(..., description="Database username")
    db_password: str = Field(..., description="Database password")
    db_name: str = Field(..., description="Database name")

    # SQLAlchemy async dialect+driver; the service targets MySQL
    db_driver: str = Field(default="mysql+aiomysql", description="SQLAlchemy dialect and driver")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_port")
    @classmethod
    def validate_port(cls, v):
        """Ensure the port is a valid TCP port."""
        if v < 1 or v > 65535:
            raise ValueError("db_port must be between 1 and 65535")
        return v

    def get_url(self) -> URL:
        """Build the SQLAlchemy URL; credentials are escaped by URL.create."""
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    def describe(self) -> Dict[str, Any]:
        """Connection details safe to log (no password)."""
        return {
            "driver": self.db_driver,
            "host": self.db_host,
            "port": self.db_port,
            "database": self.db_name,
            "user": self.db_user,
        }


def load_database_config(**overrides: Any) -> DatabaseConfig:
    """
    Load the database configuration from the environment.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        DatabaseConfig instance

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return DatabaseConfig(**overrides)
    except pydantic.ValidationError as e:
        missing = [
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err.get("type") == "missing" and err.get("loc")
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            ) from e
        raise ConfigurationError(f"Invalid database configuration: {e}") from e
