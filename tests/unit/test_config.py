"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from helpdesk_workflows.engine.config import EngineSettings
from helpdesk_workflows.server.config import ServerSettings

_ENV_VARS = (
    "LOG_LEVEL",
    "WORKFLOWS_LOG_FORMAT",
    "WORKFLOWS_DEFAULT_AUTHOR",
    "WORKFLOWS_CORS_ORIGINS",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_engine_settings_defaults(clean_env: Path) -> None:
    settings = EngineSettings()

    assert settings.log_level == "WARNING"
    assert settings.json_logs is True
    assert settings.default_author == "You"


def test_engine_settings_loads_from_dotenv(clean_env: Path) -> None:
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=debug",
                "WORKFLOWS_LOG_FORMAT=text",
                "WORKFLOWS_DEFAULT_AUTHOR=Service Desk",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = EngineSettings()

    assert settings.log_level == "DEBUG"
    assert settings.json_logs is False
    assert settings.default_author == "Service Desk"


def test_environment_overrides_dotenv(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (clean_env / ".env").write_text("LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "error")

    assert EngineSettings().log_level == "ERROR"


def test_engine_settings_rejects_unknown_level(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        EngineSettings()


def test_server_settings_cors_origins(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    assert ServerSettings().parsed_cors_origins() == [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    monkeypatch.setenv("WORKFLOWS_CORS_ORIGINS", " https://desk.example.com , ,http://a ")
    assert ServerSettings().parsed_cors_origins() == ["https://desk.example.com", "http://a"]
