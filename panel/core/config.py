from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


NETWORK_DEFAULTS: Dict[str, Any] = {
    "host": "127.0.0.1",
    "database": "panel",
    "username": "pelican",
}


class Settings(BaseSettings):
    """Panel configuration loaded from env and .env file."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database connection (written by the database wizard)
    DB_CONNECTION: str = "sqlite"
    DB_HOST: Optional[str] = None
    DB_PORT: Optional[str] = None
    DB_DATABASE: Optional[str] = None
    DB_USERNAME: Optional[str] = None
    DB_PASSWORD: Optional[str] = None

    # Connection probe timeout used by the wizard (seconds)
    DB_PROBE_TIMEOUT_S: int = 5

    # Admin API server (panel-serve)
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    RELOAD: bool = False
    WORKERS: int = 1

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG/INFO/WARNING/ERROR
    DATABASE_LOG_LEVEL: str = "WARNING"

    def default_port(self, driver: str) -> int:
        return 5432 if driver == "pgsql" else 3306

    def connection_defaults(self, driver: str) -> Dict[str, Any]:
        """Prompt defaults for a networked driver: configured value, else the stock one."""
        return {
            "host": self.DB_HOST or NETWORK_DEFAULTS["host"],
            "port": self.DB_PORT or self.default_port(driver),
            "database": self.DB_DATABASE or NETWORK_DEFAULTS["database"],
            "username": self.DB_USERNAME or NETWORK_DEFAULTS["username"],
            "password": self.DB_PASSWORD or None,
        }

    def sqlite_path_default(self) -> str:
        return self.DB_DATABASE or "database.sqlite"


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    return Settings()
