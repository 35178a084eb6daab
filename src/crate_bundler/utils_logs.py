# src/crate_bundler/utils_logs.py

import logging
import re
import sys
from typing import Any, TextIO, cast

from .meta import PROGRAM_PACKAGE
from .runtime import current_runtime


# --- ANSI Colors -------------------------------------------------------------


RESET = "\033[0m"
CYAN = "\033[36m"
YELLOW = "\033[93m"
GREEN = "\033[92m"
MAGENTA = "\033[95m"
GRAY = "\033[90m"


# --- Levels ------------------------------------------------------------------


LEVEL_ORDER = [
    "trace",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
    "silent",  # disables all logging
]

TRACE_LEVEL = logging.DEBUG - 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LEVEL_MAP = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "silent": logging.CRITICAL + 1,
}
assert list(LEVEL_MAP) == LEVEL_ORDER  # noqa: S101


# --- Tags --------------------------------------------------------------------

# level prefix: (color, text)
LEVEL_TAGS = {
    "TRACE": (GRAY, "[TRACE]"),
    "DEBUG": (CYAN, "[DEBUG]"),
    "WARNING": ("", "⚠️ "),
    "ERROR": ("", "❌ "),
    "CRITICAL": ("", "💥 "),
}

# leading `[TAG]` of a message names the bundler stage that emitted it
STAGE_COLORS = {
    "BUNDLE": GREEN,
    "MOD": GREEN,
    "USE": GREEN,
    "CARGO": MAGENTA,
    "CONFIG": MAGENTA,
    "RESOLVE": MAGENTA,
    "WATCH": YELLOW,
    "SELFTEST": YELLOW,
    "BOOT": GRAY,
}
STAGE_TAG_RE = re.compile(r"^\[(?P<stage>[A-Z]+)\]")


class LoggerWithTrace(logging.Logger):
    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.getEffectiveLevel()).lower()

    def error_if_not_debug(self, msg: str, *args: Any) -> None:
        """Log an error, with the active traceback only when debugging."""
        if self.isEnabledFor(logging.DEBUG):
            self.exception(msg, *args)
        else:
            self.error(msg, *args)

    def critical_if_not_debug(self, msg: str, *args: Any) -> None:
        self.critical(msg, *args, exc_info=self.isEnabledFor(logging.DEBUG))


class TagFormatter(logging.Formatter):
    """Prefix the level tag and color the stage tag when color is on."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        use_color = current_runtime["use_color"]

        if use_color:
            m = STAGE_TAG_RE.match(msg)
            color = STAGE_COLORS.get(m.group("stage")) if m else None
            if m and color:
                msg = f"{color}{m.group(0)}{RESET}{msg[m.end():]}"

        color, tag = LEVEL_TAGS.get(record.levelname, ("", ""))
        if not tag:
            return msg
        if use_color and color:
            tag = f"{color}{tag}{RESET}"
        return f"{tag} {msg}"


class DualStreamHandler(logging.StreamHandler[TextIO]):
    """Send info/debug/trace to stdout, everything else to stderr."""

    def __init__(self) -> None:
        super().__init__(stream=sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        # looked up per record so pytest capture and redirection keep working
        self.stream = sys.stderr if record.levelno >= logging.WARNING else sys.stdout
        super().emit(record)


# --- Logger ------------------------------------------------------------------


def _make_logger() -> LoggerWithTrace:
    """Create the package logger without touching the global logger class."""
    previous = logging.getLoggerClass()
    logging.setLoggerClass(LoggerWithTrace)
    try:
        logger = logging.getLogger(PROGRAM_PACKAGE)
    finally:
        logging.setLoggerClass(previous)

    if not any(isinstance(h, DualStreamHandler) for h in logger.handlers):
        handler = DualStreamHandler()
        handler.setFormatter(TagFormatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return cast("LoggerWithTrace", logger)


_logger = _make_logger()


def get_logger() -> LoggerWithTrace:
    """Return the crate_bundler logger, synced to `current_runtime`."""
    level_name = str(current_runtime["log_level"]).lower()
    _logger.setLevel(LEVEL_MAP.get(level_name, logging.INFO))
    return _logger


def log(level: str, message: str) -> None:
    """Log a message at a dynamic level name (e.g. 'info', 'error', 'trace')."""
    logger = get_logger()
    method = getattr(logger, level.lower(), None)
    if level.lower() in LEVEL_MAP and callable(method):
        method(message)
    else:
        logger.error("Unknown log level: %r", level)
