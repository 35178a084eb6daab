# src/crate_bundler/runtime.py
"""Live settings shared by the logging layer and the CLI.

Seeded at import from `CRATE_BUNDLER_LOG_LEVEL` (or `LOG_LEVEL`) and
`CRATE_BUNDLER_COLOR`; the CLI overwrites both once arguments and the
config file have been read.
"""

from typing import TypedDict

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .utils import env_setting, should_use_color


class Runtime(TypedDict):
    log_level: str
    use_color: bool


current_runtime: Runtime = {
    "log_level": (env_setting(DEFAULT_ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).lower(),
    "use_color": should_use_color(),
}
