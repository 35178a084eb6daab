# src/crate_bundler/constants.py
"""
Central constants used across the project.
"""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_WATCH_INTERVAL: str = "WATCH_INTERVAL"
DEFAULT_ENV_COLOR: str = "COLOR"  # always | never | auto

# --- crate layout ---
DEFAULT_ENTRY_PATH: str = "src/main.rs"
DEFAULT_LIBRS_PATH: str = "src/lib.rs"
DEFAULT_BUNDLE_PATH: str = "bundle.rs"
CARGO_MANIFEST: str = "Cargo.toml"

# module file conventions: `<name>.rs` first, then `<name>/mod.rs`
MODULE_FILE_SUFFIX: str = ".rs"
MODULE_DIR_FILE: str = "mod.rs"

# --- bundler defaults ---
DEFAULT_SKIP_USE: tuple[str, ...] = ("*",)
DEFAULT_SKIP_MOD: tuple[str, ...] = ("tests",)
NESTED_TEST_MOD: str = "tests"
DEFAULT_STRIP_COMMENTS: bool = True
DEFAULT_MINIFY: bool = False

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_WATCH_INTERVAL: float = 1.0  # seconds
DEFAULT_HINT_CUTOFF: float = 0.6
MIN_PYTHON: tuple[int, int] = (3, 11)  # tomllib
