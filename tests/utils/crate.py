# tests/utils/crate.py
"""Helpers for laying out throwaway Rust crates on disk."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from crate_bundler.bundler import Bundler, BundleSummary


def make_crate(root: Path, files: dict[str, str | Iterable[str]]) -> Path:
    """Write `files` (relative path → text or list of lines) under root."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            text = content
        else:
            text = "".join(f"{line}\n" for line in content)
        path.write_text(text, encoding="utf-8")
    return root


def read_bundle(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def run_bundler(
    root: Path,
    *,
    crate_name: str = "mylib",
    entry: str = "src/main.rs",
    lib: str = "src/lib.rs",
    out: str = "bundle.rs",
    strip_comments: bool = True,
    minify: bool = False,
    exclude: Iterable[str] = (),
) -> tuple[list[str], BundleSummary]:
    """Bundle the crate at root and return (output lines, summary)."""
    bundler = Bundler(root / entry, root / out, root / lib)
    bundler.set_crate_name(crate_name)
    bundler.set_strip_comments(strip_comments)
    bundler.set_minify(minify)
    for name in exclude:
        bundler.exclude_mod(name)
    summary = bundler.run()
    return read_bundle(root / out), summary
