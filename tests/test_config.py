"""
Tests for service configuration.
"""

import pytest
from pydantic import ValidationError

from utilities.config import FrontendConfig, ServerConfig


def test_server_defaults(monkeypatch):
    for name in ("DATABASE_URI", "DB_NAME", "COLLECTION_NAME", "SERVER_PORT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)

    config = ServerConfig(_env_file=None)

    assert config.database_uri == "mongodb://localhost:27017"
    assert config.db_name == "exercise-3"
    assert config.collection_name == "information"
    assert config.server_port == 8080
    assert config.debug is False
    assert config.get_server_selection_timeout_ms() == 10000


def test_frontend_defaults(monkeypatch):
    for name in ("API_URI", "SERVER_PORT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)

    config = FrontendConfig(_env_file=None)

    assert config.api_uri == "http://server:8080"
    assert config.server_port == 3030


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URI", "mongodb://mongodb:27017")
    monkeypatch.setenv("DB_NAME", "caps-ex3")
    monkeypatch.setenv("SERVER_PORT", "9090")
    monkeypatch.setenv("DEBUG", "true")

    config = ServerConfig(_env_file=None)

    assert config.database_uri == "mongodb://mongodb:27017"
    assert config.db_name == "caps-ex3"
    assert config.server_port == 9090
    assert config.effective_log_level() == "DEBUG"


def test_api_uri_trailing_slash(monkeypatch):
    monkeypatch.setenv("API_URI", "http://localhost:8080/")

    assert FrontendConfig(_env_file=None).api_uri == "http://localhost:8080"


@pytest.mark.parametrize("overrides", [
    {"server_port": 0},
    {"server_port": 70000},
    {"log_level": "VERBOSE"},
    {"log_format": "xml"},
    {"db_name": " "},
    {"connect_timeout": 0},
])
def test_invalid_server_settings(overrides):
    with pytest.raises(ValidationError):
        ServerConfig(_env_file=None, **overrides)


def test_invalid_api_uri():
    with pytest.raises(ValidationError):
        FrontendConfig(_env_file=None, api_uri="server:8080")


def test_log_settings_are_normalized():
    config = ServerConfig(_env_file=None, log_level="warning", log_format="JSON")

    assert config.log_level == "WARNING"
    assert config.log_format == "json"
