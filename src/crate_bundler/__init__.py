# src/crate_bundler/__init__.py

"""Crate Bundler — inline a multi-file Rust crate into a single source file.

Full developer API
==================
The names below are the supported programmatic surface, e.g. for a
`build.rs`-adjacent script that wants to bundle without going through the CLI.

Highlights:
    - main()              → CLI entrypoint
    - Bundler             → The recursive expansion engine
    - run_bundle()        → Bundle from a resolved configuration
    - resolve_config()    → Merge CLI args with config files
    - get_metadata()      → Retrieve version / commit info
"""

from .actions import (
    get_metadata,
    make_bundler,
    run_bundle,
    run_selftest,
    watch_for_changes,
)
from .bundler import (
    BundleError,
    BundleOutputError,
    Bundler,
    BundleSummary,
    BundleTraversalError,
    module_candidates,
    open_module_source,
)
from .cli import (
    main,
)
from .config import (
    determine_log_level,
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
    read_cargo_crate_name,
)
from .config_resolve import resolve_config
from .config_validate import validate_config
from .constants import (
    DEFAULT_BUNDLE_PATH,
    DEFAULT_ENTRY_PATH,
    DEFAULT_LIBRS_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MINIFY,
    DEFAULT_SKIP_MOD,
    DEFAULT_SKIP_USE,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_STRIP_COMMENTS,
    DEFAULT_WATCH_INTERVAL,
)
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .patterns import (
    LineClassifier,
    LineKind,
    LineMatch,
    source_line_regex,
)
from .runtime import Runtime, current_runtime
from .types import (
    BundleConfigInput,
    BundleConfigResolved,
    MetaBundleConfig,
    OriginType,
)
from .utils import (
    env_setting,
    load_jsonc,
    should_use_color,
    strip_jsonc,
)
from .utils_logs import (
    LEVEL_ORDER,
    get_logger,
    log,
)
from .utils_schema import ValidationSummary


__all__ = [  # noqa: RUF022
    # --- CLI / Actions ---
    "get_metadata",
    "main",
    "make_bundler",
    "run_bundle",
    "run_selftest",
    "watch_for_changes",
    #
    # --- Bundle Engine ---
    "BundleError",
    "BundleOutputError",
    "BundleSummary",
    "BundleTraversalError",
    "Bundler",
    "LineClassifier",
    "LineKind",
    "LineMatch",
    "module_candidates",
    "open_module_source",
    "source_line_regex",
    #
    # --- Config Handling ---
    "determine_log_level",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "parse_config",
    "read_cargo_crate_name",
    "resolve_config",
    "validate_config",
    "ValidationSummary",
    #
    # --- Constants / Metadata / Runtime ---
    "DEFAULT_BUNDLE_PATH",
    "DEFAULT_ENTRY_PATH",
    "DEFAULT_LIBRS_PATH",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MINIFY",
    "DEFAULT_SKIP_MOD",
    "DEFAULT_SKIP_USE",
    "DEFAULT_STRICT_CONFIG",
    "DEFAULT_STRIP_COMMENTS",
    "DEFAULT_WATCH_INTERVAL",
    "Metadata",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "Runtime",
    "current_runtime",
    #
    # --- utils ---
    "LEVEL_ORDER",
    "env_setting",
    "get_logger",
    "load_jsonc",
    "log",
    "should_use_color",
    "strip_jsonc",
    #
    # --- Types ---
    "BundleConfigInput",
    "BundleConfigResolved",
    "MetaBundleConfig",
    "OriginType",
]
