# src/crate_bundler/patterns.py

"""Line classification for Rust sources.

Every recognized statement shape is a one-line regex built from a small
template language where a double space stands for `\\s+` and a single space
for `\\s*`. Each pattern is anchored at both ends and tolerates a trailing
`//` comment, so

    " extern  crate  foo ; "

matches `extern crate foo;` as well as `  extern   crate foo ;  // dep`.
"""

import re
from dataclasses import dataclass
from enum import Enum


class LineKind(Enum):
    BLANK_OR_COMMENT = "blank_or_comment"
    LINT_DIRECTIVE = "lint_directive"
    EXTERN_CRATE = "extern_crate"
    USE_CRATE = "use_crate"
    MOD_DECL = "mod_decl"
    PLAIN = "plain"

    @property
    def strippable(self) -> bool:
        """True for lines dropped when comment stripping is on."""
        return self in (LineKind.BLANK_OR_COMMENT, LineKind.LINT_DIRECTIVE)


@dataclass(frozen=True)
class LineMatch:
    kind: LineKind
    capture: str | None = None


def source_line_regex(source_regex: str) -> re.Pattern[str]:
    """Compile a line template (see module docstring) into an anchored regex."""
    body = source_regex.replace("  ", r"\s+").replace(" ", r"\s*")
    return re.compile(f"^{body}(?://.*)?$")


COMMENT_RE = source_line_regex(" ")
LINT_RE = source_line_regex(r" #!\[(?:allow|warn|deny|forbid)\(.*")

# `pub`, `pub(crate)`, `pub(super)`, `pub(in some::path)`
_VISIBILITY = r"(?:pub(?: \([^)]*\))?  )?"
MOD_RE = source_line_regex(rf" {_VISIBILITY}mod  (?P<m>\w+) ; ")


class LineClassifier:
    """Classify single source lines against the recognized statement shapes.

    Patterns depending on the crate name are compiled once, at construction.
    Classification has no side effects: the same line always yields the same
    result for a given crate name.
    """

    def __init__(self, crate_name: str = "") -> None:
        self.crate_name = crate_name
        name = re.escape(crate_name)
        self.extern_re = source_line_regex(rf" extern  crate  {name} ; ")
        self.use_re = source_line_regex(rf" use  {name} :: (?P<path>.*) ; ")

    def classify(self, line: str) -> LineMatch:
        if COMMENT_RE.match(line):
            return LineMatch(LineKind.BLANK_OR_COMMENT)
        if LINT_RE.match(line):
            return LineMatch(LineKind.LINT_DIRECTIVE)
        if self.extern_re.match(line):
            return LineMatch(LineKind.EXTERN_CRATE)
        if m := self.use_re.match(line):
            return LineMatch(LineKind.USE_CRATE, m.group("path").strip())
        if m := MOD_RE.match(line):
            return LineMatch(LineKind.MOD_DECL, m.group("m"))
        return LineMatch(LineKind.PLAIN)
