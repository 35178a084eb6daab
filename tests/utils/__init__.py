# tests/utils/__init__.py

from .bundleconfig import make_args, make_resolved
from .crate import make_crate, read_bundle, run_bundler
from .trace import TRACE, make_trace

__all__ = [
    "TRACE",
    "make_args",
    "make_crate",
    "make_resolved",
    "make_trace",
    "read_bundle",
    "run_bundler",
]
