# src/crate_bundler/utils_schema.py
from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, get_args, get_origin

from .constants import DEFAULT_HINT_CUTOFF
from .utils import plural
from .utils_types import cast_hint, safe_isinstance

# --- dataclasses ------------------------------------------------------


@dataclass
class ValidationSummary:
    valid: bool
    errors: list[str]
    strict_warnings: list[str]
    warnings: list[str]
    strict: bool  # strictness somewhere in our config?


# --- helpers --------------------------------------------------------


def collect_msg(
    strict: bool,
    msg: str,
    summary: ValidationSummary,  # modified in function, not returned
    *,
    is_error: bool = False,
) -> None:
    """
    Route a message to the appropriate bucket.
    Errors are always fatal.
    Warnings may escalate to strict_warnings in strict mode.
    """
    if is_error:
        summary.errors.append(msg)
    elif strict:
        summary.strict_warnings.append(msg)
    else:
        summary.warnings.append(msg)


def _infer_type_label(
    expected_type: Any,
) -> str:
    """Return a readable label for logging (e.g. 'list[str]', 'bool')."""
    origin = get_origin(expected_type)
    args = get_args(expected_type)
    if origin is list and args:
        return f"list[{getattr(args[0], '__name__', repr(args[0]))}]"
    if isinstance(expected_type, type):
        return expected_type.__name__
    return str(expected_type)


# ---------------------------------------------------------------------------
# schema validator
# ---------------------------------------------------------------------------


def check_schema_conformance(
    strict_config: bool,
    cfg: dict[str, Any],
    schema: dict[str, Any],
    context: str,
    *,
    summary: ValidationSummary,  # modified in function, not returned
    ignore_keys: set[str] | None = None,
) -> bool:
    """Validate a flat dict against a {key: type} schema.

    - Wrong value types are always errors.
    - Unknown keys are warnings (strict warnings under strict_config),
      with a close-match hint when one exists.
    """
    ignore = ignore_keys or set()
    valid = True

    for key, expected_type in schema.items():
        if key not in cfg or key in ignore:
            # Optional or missing field → not a failure
            continue

        val = cfg[key]
        if get_origin(expected_type) is list and not isinstance(val, list):
            collect_msg(
                strict_config,
                f"{context}: key `{key}` expected {_infer_type_label(expected_type)},"
                f" got {type(val).__name__}",
                summary,
                is_error=True,
            )
            valid = False
            continue

        if not safe_isinstance(val, expected_type):
            if get_origin(expected_type) is list:
                items = cast_hint(list[Any], val)
                subtype = get_args(expected_type)[0]
                bad = [
                    f"#{i + 1} ({type(item).__name__})"
                    for i, item in enumerate(items)
                    if not safe_isinstance(item, subtype)
                ]
                detail = f"invalid item{plural(bad)} {', '.join(bad)}"
            else:
                detail = f"got {type(val).__name__}"
            collect_msg(
                strict_config,
                f"{context}: key `{key}` expected"
                f" {_infer_type_label(expected_type)}, {detail}",
                summary,
                is_error=True,
            )
            valid = False

    # --- Unknown keys ---
    unknown: list[str] = [k for k in cfg if k not in schema and k not in ignore]
    if unknown:
        joined = ", ".join(f"`{u}`" for u in unknown)
        msg = f"Unknown key{plural(unknown)} {joined} {context}."

        hints: list[str] = []
        for k in unknown:
            close = get_close_matches(k, schema.keys(), n=1, cutoff=DEFAULT_HINT_CUTOFF)
            if close:
                hints.append(f"'{k}' → '{close[0]}'")
        if hints:
            msg += "\nHint: did you mean " + ", ".join(hints) + "?"

        collect_msg(strict_config, msg.strip(), summary)
        if strict_config:
            valid = False

    return valid
