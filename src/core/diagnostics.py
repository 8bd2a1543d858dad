"""
Diagnostics: lint levels, findings, and the sink lints report into.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, TYPE_CHECKING

from hir.ir import Span

if TYPE_CHECKING:
    from lints.base import Lint


class Level(Enum):
    """Lint levels, ordered from lowest to highest."""

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"
    FORBID = "forbid"

    @classmethod
    def from_string(cls, s: str) -> "Level":
        """Parse level from string."""
        s_lower = s.lower().strip()
        for level in cls:
            if level.value == s_lower:
                return level
        raise ValueError(f"Unknown lint level: {s}")

    @property
    def rank(self) -> int:
        """Numeric rank for comparison (higher = stricter)."""
        ranks = {
            Level.ALLOW: 0,
            Level.WARN: 1,
            Level.DENY: 2,
            Level.FORBID: 3,
        }
        return ranks[self]

    def __ge__(self, other: "Level") -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: "Level") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "Level") -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: "Level") -> bool:
        return self.rank < other.rank


@dataclass
class Finding:
    """One diagnostic: a lint fired at a span inside a function."""

    lint: str
    level: Level
    span: Span
    message: str
    function: str = ""
    snippet: str = ""

    def to_dict(self) -> dict:
        return {
            "lint": self.lint,
            "level": self.level.value,
            "file": self.span.file,
            "line": self.span.line,
            "column": self.span.column,
            "end_line": self.span.end_line,
            "end_column": self.span.end_column,
            "message": self.message,
            "function": self.function,
            "snippet": self.snippet,
        }


@dataclass
class DiagnosticSink:
    """Collects findings in emission order."""

    findings: List[Finding] = field(default_factory=list)

    def emit(self, finding: Finding) -> None:
        self.findings.append(finding)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.findings)

    def __len__(self) -> int:
        return len(self.findings)


def span_lint(
    sink: DiagnosticSink,
    lint: "Lint",
    span: Span,
    message: str,
    function: str = "",
    snippet: str = "",
    level: Optional[Level] = None,
) -> None:
    """Emit a finding for `lint` at `span` unless its level is `allow`."""
    level = level or lint.level
    if level == Level.ALLOW:
        return
    sink.emit(Finding(lint.name, level, span, message, function, snippet))
