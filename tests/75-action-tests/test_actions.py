# tests/75-action-tests/test_actions.py

import os
from pathlib import Path
from typing import Any

import pytest

import crate_bundler.actions as mod_actions
from crate_bundler.meta import Metadata
from tests.utils import make_crate, make_resolved, read_bundle


def _crate(root: Path) -> None:
    make_crate(
        root,
        {
            "src/main.rs": ["extern crate mylib;", "use mylib::a::f;", "fn main() {}"],
            "src/lib.rs": ["pub mod a;", "pub mod bench;"],
            "src/a.rs": ["    pub fn f() {}   // helper"],
        },
    )


def test_make_bundler_applies_resolved_config(tmp_path: Path) -> None:
    # --- setup ---
    resolved = make_resolved(
        tmp_path, exclude_mods=["bench"], minify=True, strip_comments=False
    )

    # --- execute ---
    bundler = mod_actions.make_bundler(resolved)

    # --- verify ---
    assert bundler.entry_path == resolved["entry"]
    assert bundler.bundle_path == resolved["out"]
    assert bundler.librs_path == resolved["lib"]
    assert bundler.crate_name == "mylib"
    assert bundler.skip_mod == {"tests", "bench"}
    assert bundler.minify_re is not None
    assert bundler.strip_comments is False


def test_run_bundle_writes_and_reports(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    # --- setup ---
    _crate(tmp_path)
    resolved = make_resolved(tmp_path, exclude_mods=["bench"], minify=True)

    # --- execute ---
    summary = mod_actions.run_bundle(resolved)

    # --- verify ---
    assert read_bundle(tmp_path / "bundle.rs") == [
        "pub mod a {",
        "pub fn f() {}   // helper",
        "}",
        "use a::f;",
        "fn main() {}",
    ]
    assert summary.modules == ["a"]
    out = capsys.readouterr().out
    assert "Bundle written to" in out
    assert "1 module," in out


def test_collect_watched_files_skips_output(tmp_path: Path) -> None:
    # --- setup ---
    _crate(tmp_path)
    resolved = make_resolved(tmp_path, out=tmp_path / "src" / "bundle.rs")
    (tmp_path / "src" / "bundle.rs").write_text("old")
    (tmp_path / "src" / "notes.txt").write_text("not rust")

    # --- execute ---
    files = mod_actions._collect_watched_files(resolved)  # noqa: SLF001

    # --- verify ---
    names = sorted(f.name for f in files)
    assert names == ["a.rs", "lib.rs", "main.rs"]


def test_watch_rebuilds_on_change(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Initial build, one rebuild after a touch, then Ctrl+C stops the loop."""
    # --- setup ---
    _crate(tmp_path)
    resolved = make_resolved(tmp_path)
    calls: list[str] = []
    ticks = iter(["touch", "idle", "stop"])

    def fake_sleep(_interval: float) -> None:
        step = next(ticks)
        if step == "touch":
            lib = tmp_path / "src" / "a.rs"
            stat = lib.stat()
            os.utime(lib, (stat.st_atime, stat.st_mtime + 10))
        elif step == "stop":
            raise KeyboardInterrupt

    monkeypatch.setattr(mod_actions.time, "sleep", fake_sleep)

    # --- execute ---
    mod_actions.watch_for_changes(lambda: calls.append("build"), resolved, 0.01)

    # --- verify ---
    assert calls == ["build", "build"]


def test_watch_survives_failed_rebuild(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    _crate(tmp_path)

    def failing() -> None:
        raise RuntimeError("module vanished")

    def fake_sleep(_interval: float) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(mod_actions.time, "sleep", fake_sleep)

    # --- execute ---
    mod_actions.watch_for_changes(failing, make_resolved(tmp_path), 0.01)

    # --- verify ---
    captured = capsys.readouterr()
    assert "Rebuild failed: module vanished" in captured.err
    assert "Watch stopped" in captured.out


def test_watch_tolerates_file_deleted_while_scanning(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A listed file that is gone before its mtime is read counts as removed."""
    # --- setup ---
    _crate(tmp_path)
    resolved = make_resolved(tmp_path)
    ghost = tmp_path / "src" / "ghost.rs"
    real_collect = mod_actions._collect_watched_files  # noqa: SLF001
    calls: list[str] = []
    ticks = iter(["delete", "stop"])

    def collect_with_ghost(res: Any) -> list[Path]:
        return [*real_collect(res), ghost]

    def fake_sleep(_interval: float) -> None:
        if next(ticks) == "delete":
            (tmp_path / "src" / "a.rs").unlink()
        else:
            raise KeyboardInterrupt

    monkeypatch.setattr(mod_actions, "_collect_watched_files", collect_with_ghost)
    monkeypatch.setattr(mod_actions.time, "sleep", fake_sleep)

    # --- execute ---
    mod_actions.watch_for_changes(lambda: calls.append("build"), resolved, 0.01)

    # --- verify ---
    assert calls == ["build", "build"]


def test_snapshot_mtimes_skips_missing(tmp_path: Path) -> None:
    present = tmp_path / "a.rs"
    present.write_text("fn a() {}")

    snapshot = mod_actions._snapshot_mtimes([present, tmp_path / "gone.rs"])  # noqa: SLF001

    assert list(snapshot) == [present]


def test_get_metadata_shape() -> None:
    meta = mod_actions.get_metadata()

    assert isinstance(meta, Metadata)
    assert meta.version
    assert meta.commit


def test_selftest_passes(capsys: pytest.CaptureFixture[str]) -> None:
    assert mod_actions.run_selftest() is True
    assert "Self-test passed" in capsys.readouterr().out
