# src/crate_bundler/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path

from .actions import get_metadata, run_bundle, run_selftest, watch_for_changes
from .config import load_and_validate_config
from .config_resolve import resolve_config
from .constants import (
    DEFAULT_BUNDLE_PATH,
    DEFAULT_ENTRY_PATH,
    DEFAULT_HINT_CUTOFF,
    DEFAULT_LIBRS_PATH,
    DEFAULT_WATCH_INTERVAL,
    MIN_PYTHON,
)
from .meta import (
    DESCRIPTION,
    PROGRAM_DISPLAY,
    PROGRAM_SCRIPT,
)
from .runtime import current_runtime
from .types import BundleConfigInput, BundleConfigResolved
from .utils import get_sys_version_info, safe_log, should_use_color
from .utils_logs import LEVEL_ORDER, LoggerWithTrace, get_logger


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # "unrecognized arguments: --minfy ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(
                    arg, known_opts, n=1, cutoff=DEFAULT_HINT_CUTOFF
                )
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT, description=DESCRIPTION)

    # --- Positional shorthand arguments ---
    parser.add_argument(
        "positional_entry",
        nargs="?",
        metavar="ENTRY",
        help=f"Entry file holding `main()` (default: {DEFAULT_ENTRY_PATH}).",
    )
    parser.add_argument(
        "positional_out",
        nargs="?",
        metavar="OUT",
        help="Positional bundle output file (shorthand for --out).",
    )

    # --- Paths ---
    parser.add_argument(
        "-o", "--out", help=f"Bundle output file (default: {DEFAULT_BUNDLE_PATH})."
    )
    parser.add_argument(
        "--lib", help=f"Library root file (default: {DEFAULT_LIBRS_PATH})."
    )
    parser.add_argument("-c", "--config", help="Path to bundler config file.")

    # --- Crate ---
    parser.add_argument(
        "--crate-name",
        dest="crate_name",
        help="Library crate name used in `extern crate` / `use` lines"
        " (default: from Cargo.toml).",
    )
    parser.add_argument(
        "--exclude-mod",
        dest="exclude_mod",
        nargs="+",
        metavar="MOD",
        help="Top-level modules never inlined. Extends config exclusions.",
    )

    # --- Output shaping ---
    minify = parser.add_mutually_exclusive_group()
    minify.add_argument(
        "--minify",
        dest="minify",
        action="store_const",
        const=True,
        help="Strip leading and trailing whitespace from every line.",
    )
    minify.add_argument(
        "--no-minify",
        dest="minify",
        action="store_const",
        const=False,
        help="Keep indentation (default).",
    )
    minify.set_defaults(minify=None)

    comments = parser.add_mutually_exclusive_group()
    comments.add_argument(
        "--strip-comments",
        dest="strip_comments",
        action="store_const",
        const=True,
        help="Drop blank lines, comment lines and lint attributes (default).",
    )
    comments.add_argument(
        "--keep-comments",
        dest="strip_comments",
        action="store_const",
        const=False,
        help="Keep blank lines, comment lines and lint attributes.",
    )
    comments.set_defaults(strip_comments=None)

    parser.add_argument(
        "--watch",
        nargs="?",
        type=float,
        metavar="SECONDS",
        default=None,
        const=0.0,
        help=(
            "Rebuild automatically on changes. "
            "Optionally specify interval in seconds"
            f" (default config or: {DEFAULT_WATCH_INTERVAL}). "
        ),
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    parser.add_argument(
        "--selftest",
        action="store_true",
        help="Run a built-in sanity test to verify tool correctness.",
    )
    return parser


def _normalize_positional_args(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> None:
    """Fold positional ENTRY / OUT into `entry` / `out`."""
    args.entry = getattr(args, "positional_entry", None)
    out_pos: str | None = getattr(args, "positional_out", None)

    if out_pos and getattr(args, "out", None):
        parser.error("Cannot combine a positional OUT with --out.")

    if out_pos:
        args.out = out_pos


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def _init_runtime(args: argparse.Namespace) -> LoggerWithTrace:
    """Apply --color/--no-color and the CLI log level before anything logs."""
    use_color = args.use_color
    current_runtime["use_color"] = (
        should_use_color() if use_color is None else use_color
    )
    if args.log_level:
        current_runtime["log_level"] = args.log_level

    logger = get_logger()
    logger.trace("[BOOT] log-level initialized: %s", logger.level_name)
    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )
    return logger


def _resolve_from_args(args: argparse.Namespace) -> BundleConfigResolved:
    """Config file (if any) + Cargo.toml + CLI → one resolved bundle config."""
    config_path: Path | None = None
    cfg: BundleConfigInput | None = None
    loaded = load_and_validate_config(args)
    if loaded is not None:
        config_path, cfg = loaded

    cwd = Path.cwd().resolve()
    config_dir = config_path.parent if config_path else cwd
    resolved = resolve_config(cfg, args, config_dir, cwd)

    logger = get_logger()
    if config_path:
        resolved["__meta__"]["config_path"] = config_path
        logger.info("🔧 Using config: %s", config_path.name)
    else:
        logger.debug("🔧 Running in CLI-only mode (no config file).")
    return resolved


def main(argv: list[str] | None = None) -> int:  # noqa: PLR0911
    logger = get_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)
        _normalize_positional_args(args, parser)
        logger = _init_runtime(args)

        if args.version:
            meta = get_metadata()
            logger.info("%s %s", PROGRAM_DISPLAY, meta)
            return 0

        if get_sys_version_info() < MIN_PYTHON:
            logger.error(
                "%s requires Python %s or newer.",
                PROGRAM_DISPLAY,
                ".".join(map(str, MIN_PYTHON)),
            )
            return 1

        if args.selftest:
            return 0 if run_selftest() else 1

        resolved = _resolve_from_args(args)
        logger = get_logger()
        logger.info(
            "📦 Bundling %s (crate %r) → %s",
            resolved["entry"],
            resolved["crate_name"],
            resolved["out"],
        )

        if args.watch is not None:
            watch_for_changes(
                lambda: run_bundle(resolved),
                resolved,
                interval=resolved["watch_interval"],
            )
        else:
            run_bundle(resolved)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination: config problems and bundle errors
        if not getattr(e, "silent", False):
            try:
                logger.error_if_not_debug(str(e))
            except Exception:  # noqa: BLE001
                safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    return 0
