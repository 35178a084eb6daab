# src/crate_bundler/bundler.py

"""Recursive expansion of a Rust crate into one source file.

The entry file (the binary) is copied line by line. Its
`extern crate <name>;` line is replaced by the library root, whose
`mod <m>;` lines are in turn replaced by `pub mod <m> { ... }` blocks
holding the module file contents, recursively.

`use <name>::<path>;` lines in the entry file are rewritten to
`use <path>;`, or dropped when `<path>` is a glob or names a module that
is already inlined (tracked in `skip_use`).
"""

import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .constants import (
    DEFAULT_LIBRS_PATH,
    DEFAULT_SKIP_MOD,
    DEFAULT_SKIP_USE,
    DEFAULT_STRIP_COMMENTS,
    MODULE_DIR_FILE,
    MODULE_FILE_SUFFIX,
    NESTED_TEST_MOD,
)
from .patterns import LineClassifier, LineKind
from .utils_logs import get_logger


# --------------------------------------------------------------------------- #
# errors
# --------------------------------------------------------------------------- #


class BundleError(RuntimeError):
    """Base class for fatal bundling failures."""


class BundleOutputError(BundleError):
    """The bundle file could not be created."""


class BundleTraversalError(BundleError):
    """An input file could not be opened or a module could not be resolved."""


# --------------------------------------------------------------------------- #
# module source resolution
# --------------------------------------------------------------------------- #

# Candidate layouts for `mod <path>;`, tried in order.
ModuleLayout = Callable[[Path, str], Path]

MODULE_LAYOUTS: tuple[ModuleLayout, ...] = (
    lambda src_dir, mod_path: src_dir / f"{mod_path}{MODULE_FILE_SUFFIX}",
    lambda src_dir, mod_path: src_dir / mod_path / MODULE_DIR_FILE,
)


def module_candidates(src_dir: Path, mod_path: str) -> list[Path]:
    return [layout(src_dir, mod_path) for layout in MODULE_LAYOUTS]


@contextmanager
def open_module_source(src_dir: Path, mod_path: str) -> Iterator[TextIO]:
    """Open the first layout candidate for `mod_path` that can be opened."""
    candidates = module_candidates(src_dir, mod_path)
    last_error: OSError | None = None
    for candidate in candidates:
        try:
            fd = candidate.open(encoding="utf-8")
        except OSError as e:
            last_error = e
            continue
        with fd:
            yield fd
        return

    tried = ", ".join(str(c) for c in candidates)
    xmsg = f"Could not find file for module {mod_path!r} (tried: {tried})"
    raise BundleTraversalError(xmsg) from last_error


@contextmanager
def _open_source(path: Path, what: str) -> Iterator[TextIO]:
    try:
        fd = path.open(encoding="utf-8")
    except OSError as e:
        xmsg = f"Could not open {what} {path}: {e.strerror or e}"
        raise BundleTraversalError(xmsg) from e
    with fd:
        yield fd


def _source_lines(fd: TextIO) -> Iterator[str]:
    try:
        for raw in fd:
            yield raw.rstrip()
    except UnicodeDecodeError as e:
        name = getattr(fd, "name", "<source>")
        xmsg = f"Could not read {name}: not valid UTF-8 ({e.reason})"
        raise BundleTraversalError(xmsg) from e


# --------------------------------------------------------------------------- #
# bundler
# --------------------------------------------------------------------------- #


@dataclass
class BundleSummary:
    bundle_path: Path
    modules: list[str] = field(default_factory=list)  # import paths, in order
    lines_written: int = 0
    extern_found: bool = False


class Bundler:
    """Single-run bundler state.

    Configure with the setters, then call `run()` exactly once.
    """

    def __init__(
        self,
        entry_path: Path | str,
        bundle_path: Path | str,
        librs_path: Path | str = DEFAULT_LIBRS_PATH,
    ) -> None:
        self.entry_path = Path(entry_path)
        self.bundle_path = Path(bundle_path)
        self.librs_path = Path(librs_path)

        self.crate_name = ""
        self.skip_use: set[str] = set(DEFAULT_SKIP_USE)
        self.skip_mod: set[str] = set(DEFAULT_SKIP_MOD)
        self.strip_comments = DEFAULT_STRIP_COMMENTS
        self.minify_re: re.Pattern[str] | None = None

        self._classifier = LineClassifier(self.crate_name)
        self._summary = BundleSummary(self.bundle_path)

    # --- configuration ---------------------------------------------------

    def exclude_mod(self, mod_name: str) -> None:
        self.skip_mod.add(mod_name)

    def set_minify(self, enable: bool) -> None:
        self.minify_re = (
            re.compile(r"^\s*(?P<contents>.*?)\s*$") if enable else None
        )

    def set_strip_comments(self, enable: bool) -> None:
        self.strip_comments = enable

    def set_crate_name(self, name: str) -> None:
        self.crate_name = name
        self._classifier = LineClassifier(name)

    @property
    def src_dir(self) -> Path:
        return self.librs_path.parent

    # --- run -------------------------------------------------------------

    def run(self) -> BundleSummary:
        """Write the bundle. Raises BundleError subclasses on failure."""
        logger = get_logger()
        logger.trace(
            "[BUNDLE] use pattern for crate %r: %s",
            self.crate_name,
            self._classifier.use_re.pattern,
        )

        try:
            o = self.bundle_path.open("w", encoding="utf-8", newline="\n")
        except OSError as e:
            xmsg = f"Error creating {self.bundle_path}: {e.strerror or e}"
            raise BundleOutputError(xmsg) from e

        with o:
            try:
                self._walk_entry(o)
            except OSError as e:
                xmsg = (
                    f"Error creating bundle {self.bundle_path}"
                    f" for {self.entry_path}: {e}"
                )
                raise BundleTraversalError(xmsg) from e

        if not self._summary.extern_found:
            logger.warning(
                "No `extern crate %s;` line in %s; the library was not inlined.",
                self.crate_name,
                self.entry_path,
            )
        return self._summary

    # --- walkers ---------------------------------------------------------

    def _skip_line(self, kind: LineKind) -> bool:
        return self.strip_comments and kind.strippable

    def _walk_entry(self, o: TextIO) -> None:
        """Copy the entry file, expanding `extern crate` and rewriting `use`."""
        logger = get_logger()

        with _open_source(self.entry_path, "entry file") as fd:
            for line in _source_lines(fd):
                match = self._classifier.classify(line)
                if self._skip_line(match.kind):
                    continue
                if match.kind is LineKind.EXTERN_CRATE:
                    self._summary.extern_found = True
                    self._walk_library_root(o)
                elif match.kind is LineKind.USE_CRATE:
                    mod_use = match.capture or ""
                    if mod_use in self.skip_use:
                        logger.trace("[USE] skipped: %s", mod_use)
                    else:
                        self._write_raw(o, f"use {mod_use};")
                else:
                    self._write_line(o, line)

    def _walk_library_root(self, o: TextIO) -> None:
        """Copy lib.rs, expanding top-level `mod <m>;` lines."""
        logger = get_logger()
        logger.debug("📚 %s", self.librs_path)

        with _open_source(self.librs_path, "library root") as fd:
            for line in _source_lines(fd):
                match = self._classifier.classify(line)
                if self._skip_line(match.kind):
                    continue
                if match.kind is LineKind.MOD_DECL:
                    mod_name = match.capture or ""
                    if mod_name in self.skip_mod:
                        logger.trace("[MOD] excluded: %s", mod_name)
                        continue
                    self._walk_module(o, mod_name, mod_name, mod_name)
                else:
                    self._write_line(o, line)

    def _walk_module(
        self, o: TextIO, mod_name: str, mod_path: str, mod_import: str
    ) -> None:
        """Inline one module file as `pub mod <name> { ... }`, recursively."""
        logger = get_logger()

        with open_module_source(self.src_dir, mod_path) as fd:
            logger.debug("📄 %s ← %s", mod_import, getattr(fd, "name", mod_path))
            self._write_raw(o, f"pub mod {mod_name} {{")
            # registered before the body so self-imports are elided too
            self.skip_use.add(mod_import)
            self._summary.modules.append(mod_import)

            for line in _source_lines(fd):
                match = self._classifier.classify(line)
                if self._skip_line(match.kind):
                    continue
                if match.kind is LineKind.MOD_DECL:
                    submod_name = match.capture or ""
                    if submod_name == NESTED_TEST_MOD:
                        logger.trace("[MOD] excluded: %s::%s", mod_import, submod_name)
                        continue
                    self._walk_module(
                        o,
                        submod_name,
                        f"{mod_path}/{submod_name}",
                        f"{mod_import}::{submod_name}",
                    )
                else:
                    self._write_line(o, line)

            self._write_raw(o, "}")

    # --- output ----------------------------------------------------------

    def _write_raw(self, o: TextIO, line: str) -> None:
        o.write(f"{line}\n")
        self._summary.lines_written += 1

    def _write_line(self, o: TextIO, line: str) -> None:
        if self.minify_re is not None:
            line = self.minify_re.sub(r"\g<contents>", line)
        self._write_raw(o, line)
