# src/crate_bundler/types.py
from __future__ import annotations

from pathlib import Path
from typing import Literal, TypedDict

from typing_extensions import NotRequired

OriginType = Literal["cli", "config", "cargo", "default", "code", "test"]


class MetaBundleConfig(TypedDict):
    # sources of parameters
    cli_base: Path
    config_base: Path
    config_path: NotRequired[Path]


class BundleConfigInput(TypedDict, total=False):
    entry: str
    out: str
    lib: str
    crate_name: str
    exclude_mods: list[str]

    # output shaping
    minify: bool
    strip_comments: bool

    # runtime behavior
    log_level: str
    strict_config: bool
    watch_interval: float


class BundleConfigResolved(TypedDict):
    entry: Path
    out: Path
    lib: Path
    crate_name: str
    exclude_mods: list[str]

    minify: bool
    strip_comments: bool

    log_level: str
    watch_interval: float

    # provenance of the crate name (audit/debug)
    crate_name_origin: OriginType

    __meta__: MetaBundleConfig
