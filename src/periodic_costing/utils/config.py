"""
Configuration management for the Periodic Costing engine.

This module handles:
- Database URL configuration
- Environment-specific configuration (production, development, test)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    DATABASE_FILENAME,
    ENV_DATABASE_URL,
    ENV_ENVIRONMENT,
)

logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = ("production", "development", "test")


class Config:
    """
    Application configuration manager.

    Handles database location and environment mode.
    """

    def __init__(self, environment: str = "production", database_url: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production', 'development' or 'test'
            database_url: Optional explicit SQLAlchemy URL. Falls back to the
                PERIODIC_COSTING_DATABASE_URL environment variable, then to a
                SQLite file in the data directory.

        Raises:
            ValueError: If environment is not recognized
        """
        if environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment '{environment}', expected one of {VALID_ENVIRONMENTS}"
            )

        self.environment = environment

        if environment == "production":
            self._base_dir = Path.home() / ".periodic_costing"
        else:
            # Project data/ directory for development and tests
            self._base_dir = Path(__file__).parent.parent.parent.parent / "data"

        self._database_path = self._base_dir / DATABASE_FILENAME
        self._database_url = database_url or os.environ.get(ENV_DATABASE_URL)

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        Test environments default to an in-memory database.

        Returns:
            Database URL string for SQLAlchemy
        """
        if self._database_url:
            return self._database_url
        if self.environment == "test":
            return "sqlite:///:memory:"
        # Use forward slashes for SQLite URL
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    def ensure_directories(self) -> None:
        """Create the data directory for file-based databases."""
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(environment='{self.environment}', database_url='{self.database_url}')"


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument - this prevents switching databases
    mid-session.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    PERIODIC_COSTING_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None
