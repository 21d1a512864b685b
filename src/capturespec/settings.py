"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the capturespec service.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  List values (``REGISTRY_GROUPS``) are JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"
    http_timeout_seconds: float = 30.0

    # Schema registry
    registry_url: str = "http://localhost:8080/apis/registry/v3"
    registry_groups: list[str] = ["paradigm.bidtools", "bfs.online"]
    registry_list_limit: int = 100
    artifact_cache_ttl_seconds: int = 1800  # 30 min
    artifact_cache_file: Path | None = None  # keep the artifact list across restarts

    # Persistence API
    persistence_api_url: str = "http://localhost:7071/api"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (platform PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port
