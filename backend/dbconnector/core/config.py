"""
Application settings (pydantic-settings).

Values come from the environment or a ``.env`` file one level above ``backend/``.
External connection profiles can be declared up-front with EXTERNAL_DB_CONNECTIONS
(JSON list of ConnectionProfile objects); they are registered on the pool manager
the first time it is created.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from dbconnector.models import ConnectionProfile


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "dbconnector"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Pool key namespace; one process may host several connectors.
    CONNECTOR_NAME: str = "dbconnector"

    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10

    EXTERNAL_DB_POOL_MAX_ACTIVE: int = 8
    EXTERNAL_DB_POOL_SIZE: int = 5  # max idle connections kept per key
    EXTERNAL_DB_POOL_MAX_WAIT_SEC: float = 30.0
    EXTERNAL_DB_POOL_MAX_AGE_SEC: float = 600.0
    # Ping idle connections older than this before checkout (0 = always ping).
    EXTERNAL_DB_POOL_VALIDATION_IDLE_SEC: float = 0.0

    EXTERNAL_DB_CONNECTIONS: list[ConnectionProfile] = []


settings = Settings()  # type: ignore
