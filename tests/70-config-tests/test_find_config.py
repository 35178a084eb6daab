# tests/70-config-tests/test_find_config.py

from argparse import Namespace
from pathlib import Path

import pytest

import crate_bundler.config as mod_config
import crate_bundler.meta as mod_meta


def test_find_config_raises_for_directory(tmp_path: Path) -> None:
    """Explicit --config path pointing to a directory should raise ValueError."""
    # --- setup ---
    args = Namespace(config=str(tmp_path))

    # --- execute and verify ---
    with pytest.raises(ValueError, match="directory"):
        mod_config.find_config(args, tmp_path)


def test_find_config_raises_for_missing_explicit_path(tmp_path: Path) -> None:
    args = Namespace(config=str(tmp_path / "nope.json"))

    with pytest.raises(FileNotFoundError, match="not found"):
        mod_config.find_config(args, tmp_path)


def test_find_config_returns_none_when_absent(tmp_path: Path) -> None:
    assert mod_config.find_config(Namespace(config=None), tmp_path) is None


def test_find_config_prefers_jsonc(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    # --- setup ---
    jsonc = tmp_path / f".{mod_meta.PROGRAM_SCRIPT}.jsonc"
    json_ = tmp_path / f".{mod_meta.PROGRAM_SCRIPT}.json"
    jsonc.write_text("{}")
    json_.write_text("{}")

    # --- execute ---
    found = mod_config.find_config(Namespace(config=None), tmp_path)

    # --- verify ---
    assert found == jsonc
    assert "Multiple config files" in capsys.readouterr().err


def test_find_config_explicit_path(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / "bundler.jsonc"
    cfg.write_text("{}")

    # --- execute ---
    found = mod_config.find_config(Namespace(config=str(cfg)), tmp_path / "elsewhere")

    # --- verify ---
    assert found == cfg.resolve()
