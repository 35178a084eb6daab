# tests/70-config-tests/test_config_resolve.py

from pathlib import Path

import pytest

import crate_bundler.config_resolve as mod_resolve
import crate_bundler.runtime as mod_runtime
from tests.utils import make_args


def test_defaults_relative_to_config_dir(tmp_path: Path) -> None:
    # --- setup ---
    crate = tmp_path / "crate"
    crate.mkdir()
    (crate / "Cargo.toml").write_text('[package]\nname = "algo-lib"\n')

    # --- execute ---
    resolved = mod_resolve.resolve_config(None, make_args(), crate, tmp_path)

    # --- verify ---
    assert resolved["entry"] == (crate / "src/main.rs").resolve()
    assert resolved["lib"] == (crate / "src/lib.rs").resolve()
    assert resolved["out"] == (crate / "bundle.rs").resolve()
    assert resolved["crate_name"] == "algo_lib"
    assert resolved["crate_name_origin"] == "cargo"
    assert resolved["exclude_mods"] == []
    assert resolved["minify"] is False
    assert resolved["strip_comments"] is True
    assert resolved["watch_interval"] == 1.0
    assert resolved["__meta__"] == {"cli_base": tmp_path, "config_base": crate}


def test_config_paths_relative_to_config_dir(tmp_path: Path) -> None:
    # --- setup ---
    cfg_dir = tmp_path / "cfg"
    cwd = tmp_path / "cwd"

    # --- execute ---
    resolved = mod_resolve.resolve_config(
        {"entry": "bin/solve.rs", "out": "/abs/out.rs", "crate_name": "x"},
        make_args(),
        cfg_dir,
        cwd,
    )

    # --- verify ---
    assert resolved["entry"] == (cfg_dir / "bin/solve.rs").resolve()
    assert resolved["out"] == Path("/abs/out.rs")
    assert resolved["crate_name_origin"] == "config"


def test_cli_overrides_config(tmp_path: Path) -> None:
    # --- setup ---
    cfg_dir = tmp_path / "cfg"
    cwd = tmp_path / "cwd"
    cfg = {
        "entry": "a.rs",
        "lib": "lib/a.rs",
        "crate_name": "from_cfg",
        "minify": False,
        "strip_comments": True,
        "exclude_mods": ["bench", "fuzz"],
        "watch_interval": 3.0,
    }
    args = make_args(
        entry="b.rs",
        lib="lib/b.rs",
        crate_name="from_cli",
        minify=True,
        strip_comments=False,
        exclude_mod=["fuzz", "extra"],
        watch=0.5,
    )

    # --- execute ---
    resolved = mod_resolve.resolve_config(cfg, args, cfg_dir, cwd)  # type: ignore[arg-type]

    # --- verify ---
    assert resolved["entry"] == (cwd / "b.rs").resolve()
    assert resolved["lib"] == (cwd / "lib/b.rs").resolve()
    assert resolved["crate_name"] == "from_cli"
    assert resolved["crate_name_origin"] == "cli"
    assert resolved["minify"] is True
    assert resolved["strip_comments"] is False
    # CLI exclusions extend the configured ones
    assert resolved["exclude_mods"] == ["bench", "fuzz", "extra"]
    assert resolved["watch_interval"] == 0.5


def test_bare_watch_flag_uses_env_then_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    # --- setup ---
    args = make_args(watch=0.0, crate_name="x")

    # --- execute / verify ---
    resolved = mod_resolve.resolve_config(
        {"watch_interval": 4.0}, args, tmp_path, tmp_path
    )
    assert resolved["watch_interval"] == 4.0

    monkeypatch.setenv("CRATE_BUNDLER_WATCH_INTERVAL", "0.25")
    resolved = mod_resolve.resolve_config(
        {"watch_interval": 4.0}, args, tmp_path, tmp_path
    )
    assert resolved["watch_interval"] == 0.25


def test_invalid_env_watch_interval_is_ignored(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("WATCH_INTERVAL", "soon")

    resolved = mod_resolve.resolve_config(
        None, make_args(crate_name="x"), tmp_path, tmp_path
    )

    assert resolved["watch_interval"] == 1.0
    assert "WATCH_INTERVAL" in capsys.readouterr().err


def test_missing_crate_name_warns(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    # --- execute ---
    resolved = mod_resolve.resolve_config(None, make_args(), tmp_path, tmp_path)

    # --- verify ---
    assert resolved["crate_name"] == ""
    assert resolved["crate_name_origin"] == "default"
    assert "No crate name" in capsys.readouterr().err


def test_log_level_from_config_updates_runtime(tmp_path: Path) -> None:
    # --- execute ---
    resolved = mod_resolve.resolve_config(
        {"log_level": "warning", "crate_name": "x"}, make_args(), tmp_path, tmp_path
    )

    # --- verify ---
    assert resolved["log_level"] == "warning"
    assert mod_runtime.current_runtime["log_level"] == "warning"
