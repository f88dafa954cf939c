"""Settings for the command-line host.

Loaded from environment variables and a local `.env` file (if present).
Nothing here is required; every setting has a working default.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EngineSettings(BaseSettings):
    """Settings for the `workflows` CLI.

    Environment variables:
    - LOG_LEVEL                  (optional)
    - WORKFLOWS_LOG_FORMAT       (optional, `json` or `text`)
    - WORKFLOWS_DEFAULT_AUTHOR   (optional)

    Notes:
        Tests can point at a specific env file via
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="WORKFLOWS_LOG_FORMAT",
        description="Log line format on stdout",
    )
    default_author: str = Field(
        default="You",
        validation_alias="WORKFLOWS_DEFAULT_AUTHOR",
        description="Author recorded on published versions when none is given",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        upper = value.strip().upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return upper

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"
