# src/crate_bundler/config.py


import argparse
import tomllib
from pathlib import Path
from typing import Any

from .config_validate import validate_config
from .constants import (
    CARGO_MANIFEST,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
)
from .meta import PROGRAM_SCRIPT
from .runtime import current_runtime
from .types import BundleConfigInput
from .utils import env_setting, load_jsonc
from .utils_logs import log
from .utils_schema import ValidationSummary
from .utils_types import cast_hint


def determine_log_level(
    args: argparse.Namespace,
    config_log_level: str | None = None,
) -> str:
    """Resolve log level from CLI → env → config → default."""
    if getattr(args, "log_level", None):
        return cast_hint(str, args.log_level)

    env_log_level = env_setting(DEFAULT_ENV_LOG_LEVEL)
    if env_log_level:
        return env_log_level

    if config_log_level:
        return config_log_level

    return DEFAULT_LOG_LEVEL


CONFIG_CANDIDATES = (f".{PROGRAM_SCRIPT}.jsonc", f".{PROGRAM_SCRIPT}.json")


def _explicit_config(raw: str) -> Path:
    path = Path(raw).expanduser().resolve()
    if path.is_dir():
        xmsg = f"--config points at a directory, not a file: {path}"
        raise ValueError(xmsg)
    if not path.exists():
        xmsg = f"Specified config file not found: {path}"
        raise FileNotFoundError(xmsg)
    return path


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "debug",
) -> Path | None:
    """Return the `--config` path, else the first of CONFIG_CANDIDATES in cwd.

    A missing explicit path is fatal; a missing default file is not, and is
    logged at `missing_level`.
    """
    explicit = getattr(args, "config", None)
    if explicit:
        return _explicit_config(explicit)

    found = [cwd / name for name in CONFIG_CANDIDATES if (cwd / name).exists()]
    if not found:
        log(missing_level, f"[CONFIG] none of {', '.join(CONFIG_CANDIDATES)} in {cwd}")
        return None

    if len(found) > 1:
        log(
            "warning",
            f"Multiple config files in {cwd} ({', '.join(p.name for p in found)});"
            f" using {found[0].name}.",
        )
    return found[0]


def load_config(config_path: Path) -> dict[str, Any] | list[Any] | None:
    """Load raw configuration data from a JSON/JSONC file.

    Returns None for intentionally empty configs (empty or comment-only files).
    """
    try:
        return load_jsonc(config_path)
    except ValueError as e:
        xmsg = f"Error while loading configuration file '{config_path.name}': {e}"
        raise ValueError(xmsg) from e


def parse_config(
    raw_config: dict[str, Any] | list[Any] | None,
) -> dict[str, Any] | None:
    """Normalize user config into a flat bundle config (no filesystem work).

    Accepted forms:
      - None / {}              → no config
      - {"bundle": {...}}      → nested form, lifted (other root keys kept)
      - {...}                  → flat form

    Unknown keys are preserved for the validation phase.
    """
    if not raw_config:
        return None

    if isinstance(raw_config, list):
        xmsg = "Invalid top-level value: list (expected an object with named keys)"
        raise TypeError(xmsg)

    root = dict(raw_config)
    nested = root.pop("bundle", None)
    if nested is None:
        return root

    if not isinstance(nested, dict):
        xmsg = f"`bundle` must be an object, not {type(nested).__name__}"
        raise TypeError(xmsg)

    conflicts = sorted(set(root) & set(nested))
    if conflicts:
        log(
            "warning",
            f"Keys {', '.join(conflicts)} are set both at the root and in `bundle`;"
            " using the `bundle` values.",
        )
    root.update(cast_hint(dict[str, Any], nested))
    return root


def read_cargo_crate_name(crate_dir: Path) -> str | None:
    """Return the library crate name declared in Cargo.toml, if any.

    `[lib].name` wins over `[package].name`; dashes become underscores
    the same way cargo derives the crate identifier.
    """
    manifest = crate_dir / CARGO_MANIFEST
    if not manifest.is_file():
        log("trace", f"[CARGO] no manifest at {manifest}")
        return None

    try:
        with manifest.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log("warning", f"Could not parse {manifest}: {e}")
        return None

    for table in ("lib", "package"):
        section = data.get(table)
        if isinstance(section, dict):
            name = section.get("name")
            if isinstance(name, str) and name:
                log("trace", f"[CARGO] crate name from [{table}]: {name}")
                return name.replace("-", "_")
    return None


def _report_validation(summary: ValidationSummary, config_path: Path) -> None:
    """Log the validation outcome, then one bulleted block per severity."""
    name = config_path.name
    mode = "strict" if summary.strict else "lenient"

    if not summary.valid:
        log("error", f"Config {name} failed validation ({mode} mode).")
    elif summary.warnings:
        log("warning", f"Config {name} validated with warnings ({mode} mode).")
    else:
        log("debug", f"[CONFIG] {name} validated ({mode} mode).")

    blocks = (
        ("error", "Errors", summary.errors),
        ("error", "Strict warnings (treated as errors)", summary.strict_warnings),
        ("warning", "Warnings (non-fatal)", summary.warnings),
    )
    for level, title, messages in blocks:
        if messages:
            bullets = "".join(f"\n  • {m}" for m in messages)
            log(level, f"{title}, {len(messages)} in {name}:{bullets}")


def load_and_validate_config(
    args: argparse.Namespace,
) -> tuple[Path, BundleConfigInput] | None:
    """Find, load, parse, and validate the user's configuration.

    Also determines the effective log level (from CLI/env/config/default)
    early, so logging can initialize as soon as possible.

    Returns:
        (config_path, config) if a config file was found and valid,
        or None if no config was found.

    """
    current_runtime["log_level"] = determine_log_level(args)

    cwd = Path.cwd().resolve()
    config_path = find_config(args, cwd)
    if config_path is None:
        return None

    raw_config = load_config(config_path)
    if raw_config is None:
        return None

    try:
        parsed_cfg = parse_config(raw_config)
    except TypeError as e:
        xmsg = f"Could not parse config {config_path.name}: {e}"
        raise TypeError(xmsg) from e
    if parsed_cfg is None:
        return None

    # --- Early peek for log_level so validation output respects it ---
    raw_log_level = parsed_cfg.get("log_level")
    if isinstance(raw_log_level, str) and raw_log_level:
        current_runtime["log_level"] = determine_log_level(args, raw_log_level)

    validation_result = validate_config(parsed_cfg)
    _report_validation(validation_result, config_path)
    if not validation_result.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        exception.data = validation_result  # type: ignore[attr-defined]
        raise exception

    return config_path, cast_hint(BundleConfigInput, parsed_cfg)
