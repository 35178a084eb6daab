# src/crate_bundler/actions.py
import re
import shutil
import subprocess
import tempfile
import time
from collections.abc import Callable
from contextlib import suppress
from pathlib import Path

from .bundler import Bundler, BundleSummary
from .constants import (
    DEFAULT_WATCH_INTERVAL,
    MODULE_FILE_SUFFIX,
)
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT, Metadata
from .types import BundleConfigResolved
from .utils import plural
from .utils_logs import get_logger


def make_bundler(resolved: BundleConfigResolved) -> Bundler:
    """Construct and configure a Bundler from a resolved config."""
    bundler = Bundler(resolved["entry"], resolved["out"], resolved["lib"])
    bundler.set_crate_name(resolved["crate_name"])
    for mod_name in resolved["exclude_mods"]:
        bundler.exclude_mod(mod_name)
    bundler.set_minify(resolved["minify"])
    bundler.set_strip_comments(resolved["strip_comments"])
    return bundler


def run_bundle(resolved: BundleConfigResolved) -> BundleSummary:
    """Run one bundle and report it."""
    logger = get_logger()
    logger.debug(
        "[BUNDLE] entry=%s lib=%s out=%s minify=%s strip_comments=%s exclude=%s",
        resolved["entry"],
        resolved["lib"],
        resolved["out"],
        resolved["minify"],
        resolved["strip_comments"],
        resolved["exclude_mods"],
    )
    started = time.perf_counter()
    summary = make_bundler(resolved).run()
    elapsed = time.perf_counter() - started

    count = len(summary.modules)
    logger.info(
        "✅ Bundle written to %s (%d module%s, %d lines) in %.2fs",
        summary.bundle_path,
        count,
        plural(count),
        summary.lines_written,
        elapsed,
    )
    return summary


def _collect_watched_files(resolved: BundleConfigResolved) -> list[Path]:
    """Entry file plus every Rust source under the library directory."""
    files: set[Path] = set()
    entry = resolved["entry"]
    if entry.exists():
        files.add(entry.resolve())

    src_dir = resolved["lib"].parent
    if src_dir.is_dir():
        for p in src_dir.rglob(f"*{MODULE_FILE_SUFFIX}"):
            if p.is_file():
                files.add(p.resolve())

    # never react to our own output
    files.discard(resolved["out"].resolve())
    return sorted(files)


def _snapshot_mtimes(files: list[Path]) -> dict[Path, float]:
    """mtime per file; files deleted since they were listed are left out."""
    mtimes: dict[Path, float] = {}
    for f in files:
        with suppress(FileNotFoundError):
            mtimes[f] = f.stat().st_mtime
    return mtimes


def watch_for_changes(
    rebuild_func: Callable[[], object],
    resolved: BundleConfigResolved,
    interval: float = DEFAULT_WATCH_INTERVAL,
) -> None:
    """Poll file modification times and rebuild when changes are detected.

    - Skips the bundle output file.
    - Re-scans the source tree every loop to detect new or deleted modules.
    - A failed rebuild is logged and watching continues.
    Stops on KeyboardInterrupt.
    """
    logger = get_logger()
    logger.info(
        "👀 Watching for changes (interval=%.2fs)... Press Ctrl+C to stop.", interval
    )

    mtimes = _snapshot_mtimes(_collect_watched_files(resolved))
    logger.trace("[WATCH] initial files: %s", [str(f) for f in mtimes])

    def _rebuild() -> None:
        try:
            rebuild_func()
        except RuntimeError as e:
            logger.error_if_not_debug("Rebuild failed: %s", e)

    _rebuild()  # initial build

    try:
        while True:
            time.sleep(interval)

            current = _snapshot_mtimes(_collect_watched_files(resolved))
            changed = [
                f for f, m in current.items() if f not in mtimes or m > mtimes[f]
            ]
            changed.extend(f for f in mtimes if f not in current)
            mtimes = current

            if changed:
                logger.info(
                    "\n🔁 Detected %d modified file%s. Rebuilding...",
                    len(changed),
                    plural(changed),
                )
                logger.trace("[WATCH] changed: %s", [str(f) for f in changed])
                _rebuild()
                mtimes = _snapshot_mtimes(_collect_watched_files(resolved))
    except KeyboardInterrupt:
        logger.info("\n🛑 Watch stopped.")


def get_metadata() -> Metadata:
    """Return version and commit for this tool.

    Version comes from pyproject.toml next to the source tree, commit from git.
    """
    logger = get_logger()
    logger.trace("get_metadata ran from: %s", Path(__file__).resolve())

    version = "unknown"
    commit = "unknown"

    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        logger.trace("trying to read metadata from %s", pyproject)
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)

    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip()

    logger.trace("got package version %s with commit %s", version, commit)
    return Metadata(version, commit)


_SELFTEST_FILES = {
    "src/lib.rs": (
        "#![warn(missing_docs)]\n// library root\npub mod shapes;\nmod tests;\n"
    ),
    "src/shapes.rs": "pub mod square;\npub fn unit() -> u32 { 1 }\n",
    "src/shapes/square.rs": "// squares\npub fn area(s: u32) -> u32 { s * s }\n",
    "src/main.rs": (
        "extern crate selftest;\n"
        "use selftest::*;\n"
        "use selftest::shapes;\n"
        "use selftest::shapes::square::area;\n"
        "fn main() { println!(\"{}\", area(shapes::unit())); }\n"
    ),
}

_SELFTEST_EXPECTED = [
    "pub mod shapes {",
    "pub mod square {",
    "pub fn area(s: u32) -> u32 { s * s }",
    "}",
    "pub fn unit() -> u32 { 1 }",
    "}",
    "use shapes::square::area;",
    'fn main() { println!("{}", area(shapes::unit())); }',
]


def run_selftest() -> bool:
    """Bundle a throwaway crate and compare against the known-good output."""
    logger = get_logger()
    logger.info("🧪 Running self-test...")

    tmp_dir: Path | None = None
    try:
        tmp_dir = Path(tempfile.mkdtemp(prefix=f"{PROGRAM_SCRIPT}-selftest-"))
        for rel, text in _SELFTEST_FILES.items():
            path = tmp_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")

        logger.debug("[SELFTEST] using temp dir: %s", tmp_dir)

        out = tmp_dir / "bundle.rs"
        bundler = Bundler(tmp_dir / "src/main.rs", out, tmp_dir / "src/lib.rs")
        bundler.set_crate_name("selftest")
        bundler.run()

        lines = out.read_text(encoding="utf-8").splitlines()
        if lines == _SELFTEST_EXPECTED:
            logger.info(
                "✅ Self-test passed — %s is working correctly.", PROGRAM_DISPLAY
            )
            return True

        logger.error("Self-test failed: unexpected bundle contents.")
        logger.debug("[SELFTEST] got:\n%s", "\n".join(lines))
        return False

    except PermissionError:
        logger.error("Self-test failed: insufficient permissions.")  # noqa: TRY400
        return False
    except RuntimeError as e:
        logger.error("Self-test failed: %s", e)  # noqa: TRY400
        return False
    except Exception:
        # Unexpected bug — show traceback and ask for a bug report
        logger.exception(
            "Unexpected self-test failure. "
            "Please report this issue with the following traceback:"
        )
        return False

    finally:
        if tmp_dir and tmp_dir.exists():
            shutil.rmtree(tmp_dir, ignore_errors=True)
