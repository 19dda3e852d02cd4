"""Mini README: Tests for settings parsing and the CLI start-up guard.

Structure:
    * environment variables map onto ``BridgeSettings`` fields.
    * validate_required lists every missing variable.
    * the CLI exits with status 1 before starting uvicorn when misconfigured.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import main_bridge
from actual_bridge.configuration import BridgeSettings, validate_required
from actual_bridge.errors import ConfigMissing

_VARIABLES = (
    "PORT",
    "NODE_ENV",
    "ENVIRONMENT",
    "ACTUAL_SERVER_URL",
    "ACTUAL_PASSWORD",
    "ACTUAL_BUDGET_ID",
    "ACTUAL_FILE_PASSWORD",
    "ACTUAL_DATA_DIR",
    "ACTUAL_CLIENT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env, tmp_path: Path) -> None:
    settings = BridgeSettings()

    assert settings.port == 8080
    assert settings.environment == "production"
    assert not settings.is_development
    assert settings.data_directory == (tmp_path / ".actual-data").resolve()
    assert settings.server_url is None


def test_environment_variables_are_read(clean_env) -> None:
    clean_env.setenv("PORT", "9090")
    clean_env.setenv("NODE_ENV", "development")
    clean_env.setenv("ACTUAL_SERVER_URL", "https://actual.example")
    clean_env.setenv("ACTUAL_PASSWORD", "hunter2")
    clean_env.setenv("ACTUAL_BUDGET_ID", "group-1")
    clean_env.setenv("ACTUAL_FILE_PASSWORD", "")

    settings = BridgeSettings()

    assert settings.port == 9090
    assert settings.is_development
    assert settings.server_url == "https://actual.example"
    assert settings.budget_id == "group-1"
    assert settings.file_password is None
    validate_required(settings)


def test_validate_required_names_every_missing_variable(clean_env) -> None:
    with pytest.raises(ConfigMissing) as excinfo:
        validate_required(BridgeSettings())

    assert excinfo.value.missing == ["ACTUAL_SERVER_URL", "ACTUAL_PASSWORD"]


def test_cli_exits_before_serving_without_credentials(clean_env) -> None:
    started = []
    clean_env.setattr(main_bridge.uvicorn, "run", lambda *args, **kwargs: started.append(kwargs))

    result = CliRunner().invoke(main_bridge.cli, [])

    assert result.exit_code == 1
    assert started == []


def test_cli_starts_uvicorn_with_configured_port(clean_env) -> None:
    clean_env.setenv("ACTUAL_SERVER_URL", "https://actual.example")
    clean_env.setenv("ACTUAL_PASSWORD", "hunter2")
    clean_env.setenv("PORT", "9191")
    started = []
    clean_env.setattr(main_bridge.uvicorn, "run", lambda *args, **kwargs: started.append(kwargs))

    result = CliRunner().invoke(main_bridge.cli, [])

    assert result.exit_code == 0
    assert started[0]["port"] == 9191
    assert started[0]["factory"] is True


def test_generic_variable_names_do_not_supply_credentials(clean_env) -> None:
    clean_env.setenv("SERVER_URL", "http://unrelated.example")
    clean_env.setenv("PASSWORD", "unrelated")
    clean_env.setenv("BUDGET_ID", "unrelated-budget")
    clean_env.setenv("DATA_DIRECTORY", "/nonexistent/unrelated")

    settings = BridgeSettings()

    assert settings.server_url is None
    assert settings.password is None
    assert settings.budget_id is None
    assert settings.data_directory.name == ".actual-data"


def test_cli_ignores_generic_credentials_and_exits(clean_env) -> None:
    clean_env.setenv("SERVER_URL", "http://unrelated.example")
    clean_env.setenv("PASSWORD", "unrelated")
    started = []
    clean_env.setattr(main_bridge.uvicorn, "run", lambda *args, **kwargs: started.append(kwargs))

    result = CliRunner().invoke(main_bridge.cli, [])

    assert result.exit_code == 1
    assert started == []
