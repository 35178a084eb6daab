# src/crate_bundler/config_resolve.py


import argparse
from pathlib import Path

from .config import determine_log_level, read_cargo_crate_name
from .constants import (
    DEFAULT_BUNDLE_PATH,
    DEFAULT_ENTRY_PATH,
    DEFAULT_ENV_WATCH_INTERVAL,
    DEFAULT_LIBRS_PATH,
    DEFAULT_MINIFY,
    DEFAULT_STRIP_COMMENTS,
    DEFAULT_WATCH_INTERVAL,
)
from .runtime import current_runtime
from .types import (
    BundleConfigInput,
    BundleConfigResolved,
    MetaBundleConfig,
    OriginType,
)
from .utils import env_setting
from .utils_logs import log

# --------------------------------------------------------------------------- #
# helpers
# --------------------------------------------------------------------------- #


def _resolve_path(
    cli_value: str | None,
    cfg_value: str | None,
    default: str,
    *,
    cwd: Path,
    config_dir: Path,
    key: str,
) -> Path:
    """CLI paths are relative to cwd; config and default paths to the config dir."""
    if cli_value:
        result = (cwd / cli_value).resolve()
        origin = "cli"
    elif cfg_value:
        result = (config_dir / cfg_value).resolve()
        origin = "config"
    else:
        result = (config_dir / default).resolve()
        origin = "default"
    log("trace", f"[RESOLVE] {key} ({origin}) → {result}")
    return result


def _resolve_flag(cli_value: bool | None, cfg_value: bool | None, default: bool) -> bool:
    if cli_value is not None:
        return cli_value
    if cfg_value is not None:
        return cfg_value
    return default


def _resolve_watch_interval(
    args: argparse.Namespace, cfg: BundleConfigInput
) -> float:
    """CLI --watch SECONDS → env → config → default."""
    cli_watch = getattr(args, "watch", None)
    if cli_watch:
        return float(cli_watch)

    env_watch = env_setting(DEFAULT_ENV_WATCH_INTERVAL)
    if env_watch:
        try:
            return float(env_watch)
        except ValueError:
            log(
                "warning",
                f"Invalid {DEFAULT_ENV_WATCH_INTERVAL}={env_watch!r}, ignoring.",
            )

    return float(cfg.get("watch_interval", DEFAULT_WATCH_INTERVAL))


def _resolve_crate_name(
    args: argparse.Namespace, cfg: BundleConfigInput, config_dir: Path
) -> tuple[str, OriginType]:
    cli_name = getattr(args, "crate_name", None)
    if cli_name:
        return cli_name, "cli"

    cfg_name = cfg.get("crate_name")
    if cfg_name:
        return cfg_name, "config"

    cargo_name = read_cargo_crate_name(config_dir)
    if cargo_name:
        return cargo_name, "cargo"

    log(
        "warning",
        "No crate name given (--crate-name, config or Cargo.toml);"
        " `extern crate` lines will not be recognized.",
    )
    return "", "default"


# --------------------------------------------------------------------------- #
# main resolver
# --------------------------------------------------------------------------- #


def resolve_config(
    cfg: BundleConfigInput | None,
    args: argparse.Namespace,
    config_dir: Path,
    cwd: Path,
) -> BundleConfigResolved:
    """Merge CLI args, the config file, Cargo.toml and defaults.

    Precedence for every key is CLI → config → Cargo.toml → default.
    Module exclusions are additive: CLI names extend the configured ones.
    """
    cfg = cfg or {}

    meta: MetaBundleConfig = {
        "cli_base": cwd,
        "config_base": config_dir,
    }

    # --- paths ---
    entry = _resolve_path(
        getattr(args, "entry", None),
        cfg.get("entry"),
        DEFAULT_ENTRY_PATH,
        cwd=cwd,
        config_dir=config_dir,
        key="entry",
    )
    out = _resolve_path(
        getattr(args, "out", None),
        cfg.get("out"),
        DEFAULT_BUNDLE_PATH,
        cwd=cwd,
        config_dir=config_dir,
        key="out",
    )
    lib = _resolve_path(
        getattr(args, "lib", None),
        cfg.get("lib"),
        DEFAULT_LIBRS_PATH,
        cwd=cwd,
        config_dir=config_dir,
        key="lib",
    )

    # --- module exclusions (unique, order preserved) ---
    exclude_mods: list[str] = []
    cli_excludes: list[str] = getattr(args, "exclude_mod", None) or []
    for name in [*cfg.get("exclude_mods", []), *cli_excludes]:
        if name not in exclude_mods:
            exclude_mods.append(name)

    crate_name, crate_name_origin = _resolve_crate_name(args, cfg, config_dir)

    # --- log level (also updates the live runtime) ---
    log_level = determine_log_level(args, cfg.get("log_level"))
    current_runtime["log_level"] = log_level

    resolved: BundleConfigResolved = {
        "entry": entry,
        "out": out,
        "lib": lib,
        "crate_name": crate_name,
        "exclude_mods": exclude_mods,
        "minify": _resolve_flag(
            getattr(args, "minify", None), cfg.get("minify"), DEFAULT_MINIFY
        ),
        "strip_comments": _resolve_flag(
            getattr(args, "strip_comments", None),
            cfg.get("strip_comments"),
            DEFAULT_STRIP_COMMENTS,
        ),
        "log_level": log_level,
        "watch_interval": _resolve_watch_interval(args, cfg),
        "crate_name_origin": crate_name_origin,
        "__meta__": meta,
    }
    log(
        "debug",
        f"Resolved bundle: {resolved['entry']} → {resolved['out']}"
        f" (crate={crate_name!r} from {crate_name_origin})",
    )
    return resolved
