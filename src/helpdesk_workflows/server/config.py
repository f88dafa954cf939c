"""Configuration for the REST server."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the REST API.

    Notes:
        - The server keeps workflows in memory only. Restarting it drops every
          workflow and version history.
    """

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "text"] = Field(
        default="json", validation_alias="WORKFLOWS_LOG_FORMAT"
    )

    default_author: str = Field(
        default="You",
        validation_alias="WORKFLOWS_DEFAULT_AUTHOR",
        description="Author recorded on published versions when the request names none.",
    )

    # Dev-friendly CORS for a local builder UI. Override via WORKFLOWS_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="WORKFLOWS_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
