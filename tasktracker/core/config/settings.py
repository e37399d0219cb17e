"""Main application settings and configuration management.

This module composes the settings from the different modules (app, database,
auth) into a single ``Settings`` class. Values come from environment variables
and an env file chosen by ``APP_ENV``:

- development: ``.env``
- test: ``.env.test``
- staging: ``.env.staging``
- production: ``.env.production``
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}


class Settings(AppSettings, DatabaseSettings, AuthSettings):
    """The main settings class that aggregates all application configurations.

    Access it through the module-level ``settings`` singleton.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")
    env_file = ENV_FILES.get(env, ".env")

    if Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)

    logger.info("No %s file found, using environment variables only", env_file)
    return Settings(_env_file=None)


settings = create_settings()
