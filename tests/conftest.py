# tests/conftest.py
"""Shared test setup for the project."""

import pytest

import crate_bundler.runtime as mod_runtime
from tests.utils import make_trace

TRACE = make_trace("⚡️")


@pytest.fixture(autouse=True)
def _isolated_runtime(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give every test a predictable log level and no ANSI colors."""
    for key in ("LOG_LEVEL", "WATCH_INTERVAL", "COLOR"):
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"CRATE_BUNDLER_{key}", raising=False)
    monkeypatch.setitem(mod_runtime.current_runtime, "log_level", "info")
    monkeypatch.setitem(mod_runtime.current_runtime, "use_color", False)
    TRACE("runtime reset", dict(mod_runtime.current_runtime))
