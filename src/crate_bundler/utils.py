# src/crate_bundler/utils.py


import json
import os
import re
import sys
from contextlib import suppress
from pathlib import Path
from typing import Any, TextIO, cast

from .constants import DEFAULT_ENV_COLOR
from .meta import PROGRAM_ENV


# --- environment ----------------------------------------------------------------

_TRUTHY = {"1", "true", "yes", "on", "always"}
_FALSY = {"0", "false", "no", "off", "never"}


def env_setting(key: str) -> str | None:
    """Return `CRATE_BUNDLER_<key>`, falling back to the bare `<key>`."""
    return os.getenv(f"{PROGRAM_ENV}_{key}") or os.getenv(key) or None


def should_use_color() -> bool:
    """Return True if colored output should be enabled.

    `CRATE_BUNDLER_COLOR=always|never` wins; otherwise NO_COLOR / FORCE_COLOR
    are honored and the final answer is whether stdout is a terminal.
    """
    choice = os.getenv(f"{PROGRAM_ENV}_{DEFAULT_ENV_COLOR}", "auto").lower()
    if choice in _TRUTHY:
        return True
    if choice in _FALSY:
        return False

    if "NO_COLOR" in os.environ:
        return False
    if os.getenv("FORCE_COLOR", "").lower() in _TRUTHY:
        return True
    return sys.stdout.isatty()


def get_sys_version_info() -> tuple[int, int, int]:
    return sys.version_info[:3]


# --- JSONC -----------------------------------------------------------------------

# A string literal is matched first and kept; anything else the pattern
# matches outside of a string is dropped.
_JSON_STRING = r'("(?:\\.|[^"\\])*")'
_JSONC_COMMENT_RE = re.compile(
    rf"{_JSON_STRING}|//[^\n]*|#[^\n]*|/\*.*?\*/", flags=re.DOTALL
)
_JSONC_TRAILING_COMMA_RE = re.compile(rf"{_JSON_STRING}|,(?=\s*[}}\]])")


def _keep_strings(match: re.Match[str]) -> str:
    return match.group(1) or ""


def strip_jsonc(text: str) -> str:
    """Turn JSONC text into plain JSON text.

    Removes `//`, `#` and `/* */` comments and trailing commas before `}`
    or `]`. String values are left untouched, so paths like
    `"src//lib.rs"` or `"C#/bundle.rs"` survive.
    """
    text = _JSONC_COMMENT_RE.sub(_keep_strings, text)
    text = _JSONC_TRAILING_COMMA_RE.sub(_keep_strings, text)
    return text.strip()


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load a JSONC file.

    Returns None for a file that is empty or holds only comments. Error
    messages do not repeat the path; callers add the file name.
    """
    if not path.is_file():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)

    text = strip_jsonc(path.read_text(encoding="utf-8"))
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = f"Invalid JSONC syntax: {e.msg} (line {e.lineno}, column {e.colno})"
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    return cast("dict[str, Any] | list[Any]", data)


# --- formatting -----------------------------------------------------------------


def plural(obj: Any) -> str:
    """'s' unless obj (a count or a sized collection) is exactly one."""
    if isinstance(obj, (int, float)):
        count = obj
    else:
        try:
            count = len(obj)
        except TypeError:
            count = 0
    return "" if count == 1 else "s"


def safe_log(msg: str) -> None:
    """Write straight to the original stderr, for when logging itself broke."""
    stream = cast("TextIO", sys.__stderr__)
    with suppress(Exception):
        stream.write(f"{msg}\n")
        stream.flush()
