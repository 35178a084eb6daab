# src/crate_bundler/config_validate.py


from typing import Any

from .constants import DEFAULT_STRICT_CONFIG
from .types import BundleConfigInput
from .utils_logs import LEVEL_ORDER
from .utils_schema import (
    ValidationSummary,
    check_schema_conformance,
    collect_msg,
)
from .utils_types import schema_from_typeddict

# --- constants ------------------------------------------------------

CLI_ONLY_KEYS = {"watch", "selftest", "version", "config"}
CLI_ONLY_MSG = (
    "Ignored config key(s) {keys} {ctx}: these are command-line flags only."
)


# ---------------------------------------------------------------------------
# main validator
# ---------------------------------------------------------------------------


def validate_config(
    parsed_cfg: dict[str, Any], *, strict: bool | None = None
) -> ValidationSummary:
    """Validate a normalized config.

    strict=True  →  warnings become fatal, but still listed separately
    strict=False →  warnings remain non-fatal
    strict=None  →  use the config's own `strict_config` key (default True)

    Returns a ValidationSummary object.
    """
    summary = ValidationSummary(
        valid=True,
        errors=[],
        strict_warnings=[],
        warnings=[],
        strict=DEFAULT_STRICT_CONFIG,
    )

    strict_config = DEFAULT_STRICT_CONFIG
    strict_from_cfg: Any = parsed_cfg.get("strict_config")
    if strict is not None:
        strict_config = strict
    elif isinstance(strict_from_cfg, bool):
        strict_config = strict_from_cfg
    summary.strict = strict_config

    context = "in top-level configuration"

    # --- CLI-only keys get a dedicated message instead of "unknown key" ---
    cli_only = sorted(k for k in parsed_cfg if k.lower() in CLI_ONLY_KEYS)
    if cli_only:
        collect_msg(
            strict_config,
            CLI_ONLY_MSG.format(keys=", ".join(cli_only), ctx=context),
            summary,
        )

    schema = schema_from_typeddict(BundleConfigInput)
    check_schema_conformance(
        strict_config,
        parsed_cfg,
        schema,
        context,
        summary=summary,
        ignore_keys=set(cli_only),
    )

    # --- value checks the schema can't express ---
    log_level = parsed_cfg.get("log_level")
    if isinstance(log_level, str) and log_level.lower() not in LEVEL_ORDER:
        collect_msg(
            strict_config,
            f"{context}: `log_level` must be one of {', '.join(LEVEL_ORDER)},"
            f" got {log_level!r}",
            summary,
            is_error=True,
        )

    interval = parsed_cfg.get("watch_interval")
    if isinstance(interval, (int, float)) and not isinstance(interval, bool):
        if interval <= 0:
            collect_msg(
                strict_config,
                f"{context}: `watch_interval` must be positive, got {interval}",
                summary,
                is_error=True,
            )

    for key in ("entry", "out", "lib"):
        val = parsed_cfg.get(key)
        if isinstance(val, str) and not val.strip():
            collect_msg(
                strict_config,
                f"{context}: `{key}` must not be empty",
                summary,
                is_error=True,
            )

    summary.valid = not summary.errors and not summary.strict_warnings
    return summary
