"""Mini README: Centralised configuration models and helpers for Actual Bridge.

Structure:
    * BridgeSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.
    * validate_required - reports every missing mandatory variable at once.

Usage:
    Settings are read from the process environment (and an optional ``.env``
    file) using the variable names of the original deployment, e.g.
    ``ACTUAL_SERVER_URL`` and ``NODE_ENV``. The configuration is cached so
    validation happens once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigMissing


class BridgeSettings(BaseSettings):
    """Runtime configuration for the bridge service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "production",
        validation_alias=AliasChoices("NODE_ENV", "ENVIRONMENT"),
        description="Environment label; 'development' switches to terse access logs.",
    )
    host: str = Field(
        "0.0.0.0",
        validation_alias="HOST",
        description="Network interface the HTTP service binds to.",
    )
    port: int = Field(
        8080,
        validation_alias="PORT",
        ge=1,
        le=65535,
    )
    server_url: Optional[str] = Field(
        None,
        validation_alias="ACTUAL_SERVER_URL",
        description="Base URL of the Actual sync server.",
    )
    password: Optional[str] = Field(
        None,
        validation_alias="ACTUAL_PASSWORD",
        description="Server password used to log in.",
    )
    budget_id: Optional[str] = Field(
        None,
        validation_alias="ACTUAL_BUDGET_ID",
        description="Preferred budget: local id, groupId or cloudFileId.",
    )
    file_password: Optional[str] = Field(
        None,
        validation_alias="ACTUAL_FILE_PASSWORD",
        description="Encryption password for end-to-end encrypted budget files.",
    )
    data_directory: Path = Field(
        Path(".actual-data"),
        validation_alias="ACTUAL_DATA_DIR",
        validate_default=True,
        description="Directory holding one subdirectory per downloaded budget.",
    )
    client_backend: str = Field(
        "actualpy",
        validation_alias="ACTUAL_CLIENT",
        description="Registry name of the budget client implementation.",
    )
    log_level: str = Field(
        "INFO",
        validation_alias="LOG_LEVEL",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Expand user directories; the orchestrator creates the folder lazily."""

        return Path(value).expanduser().resolve()

    @field_validator("server_url", "password", "budget_id", "file_password", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


def validate_required(settings: BridgeSettings) -> None:
    """Raise ``ConfigMissing`` naming every absent mandatory variable."""

    missing: List[str] = []
    if not settings.server_url:
        missing.append("ACTUAL_SERVER_URL")
    if not settings.password:
        missing.append("ACTUAL_PASSWORD")
    if missing:
        raise ConfigMissing(missing)


@lru_cache()
def get_settings() -> BridgeSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BridgeSettings()
