"""Tests for environment-driven settings."""

import pytest

from app.config import Settings


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NZBGEEK_API_KEY", raising=False)
    monkeypatch.delenv("SABCMD_PATH", raising=False)
    s = Settings(_env_file=None)
    assert s.NZBGEEK_API_KEY == ""
    assert s.NZBGEEK_API_URL == "https://api.nzbgeek.info/api"
    assert s.SABCMD_PATH == "./sabcmd/sabcmd"
    assert s.SABCMD_FAIL_ON_STDERR is True


def test_values_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NZBGEEK_API_KEY", "from-env")
    monkeypatch.setenv("SABCMD_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("SABCMD_FAIL_ON_STDERR", "false")
    s = Settings(_env_file=None)
    assert s.NZBGEEK_API_KEY == "from-env"
    assert s.SABCMD_TIMEOUT_SECONDS == 5.0
    assert s.SABCMD_FAIL_ON_STDERR is False
