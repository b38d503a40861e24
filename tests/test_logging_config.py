"""Tests for logging configuration."""

import pytest

from keycloak_bridge.config.logging_config import LoggingConfig, get_log_level_from_verbosity


@pytest.mark.parametrize(
    "verbosity,level",
    [("quiet", "ERROR"), ("NORMAL", "WARNING"), ("verbose", "INFO"), ("debug", "DEBUG"), ("loud", "WARNING")],
)
def test_verbosity_levels(verbosity, level):
    assert get_log_level_from_verbosity(verbosity) == level


def test_build_from_environment(monkeypatch):
    monkeypatch.delenv("LOG_VERBOSITY", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "json")

    config = LoggingConfig.build()

    assert config["root"]["level"] == "DEBUG"
    assert config["formatters"]["default"]["format"].startswith('{"time"')
    assert config["loggers"]["keycloak"]["level"] == "ERROR"


def test_verbosity_wins_and_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
    monkeypatch.setenv("LOG_FORMAT", "xml")

    config = LoggingConfig.build()

    assert config["root"]["level"] == "ERROR"
    assert "%(levelname)s" in config["formatters"]["default"]["format"]
