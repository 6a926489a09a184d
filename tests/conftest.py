"""
Shared test fixtures for tdcli tests.
Resets config state so no test reads real config files or environment.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

_TD_ENV_VARS = (
    "TD_API_KEY",
    "TD_REGION",
    "TD_FORMAT",
    "TD_OUTPUT",
    "TD_HTTP_LOG",
    "TD_HTTP_LOG_SAMPLE_RATE",
    "TD_QUERY_ENGINE",
    "TD_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Ensure every test starts with a clean config state.
    Runs in an empty working directory with an empty HOME."""
    from tdcli import commands, config

    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(work)
    for name in _TD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(config, "API_KEY", "12345/fake-api-key")
    monkeypatch.setattr(config, "REGION", "us")
    monkeypatch.setattr(config, "SETTINGS", {})
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_LOG_SAMPLE_RATE", 1.0)
    monkeypatch.setattr(config, "HTTP_MAX_RETRIES", 2)
    monkeypatch.setattr(config, "HTTP_RETRY_BASE_SECONDS", 0.0)
    monkeypatch.setattr(commands, "_client", None)
