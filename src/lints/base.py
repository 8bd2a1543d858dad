"""
Lint declarations, registry and the late lint pass interface.

A lint is declared once at import time with `declare_lint`. Its pass class
implements `check_fn`, which the pipeline calls for every function body.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.diagnostics import DiagnosticSink, Level, span_lint
from hir.ir import Body, Crate, Function, Span


@dataclass
class Lint:
    """
    Lint declaration.

    description is the one-line summary; the remaining fields make up the
    long explanation shown by `--explain`.
    """

    name: str
    level: Level
    description: str
    what_it_does: str = ""
    why_is_this_bad: str = ""
    known_problems: str = ""
    example: str = ""
    use_instead: str = ""


# The registry - lint name -> declaration
LINT_REGISTRY: Dict[str, Lint] = {}


def declare_lint(
    name: str,
    level: Level,
    description: str,
    **explanation: str,
) -> Lint:
    if name in LINT_REGISTRY:
        raise ValueError(f"Lint '{name}' already declared")
    lint = Lint(name, level, description, **explanation)
    LINT_REGISTRY[name] = lint
    return lint


def get_lint(name: str) -> Optional[Lint]:
    return LINT_REGISTRY.get(name)


@dataclass
class LateContext:
    """
    What a lint can see while checking one function.

    Holds no state carried between functions: the pipeline builds a new one
    for every function.
    """

    crate: Crate
    function: Function
    sink: DiagnosticSink
    levels: Dict[str, Level] = field(default_factory=dict)  # command-line overrides

    @property
    def body(self) -> Body:
        return self.function.body

    def level_of(self, lint: Lint) -> Level:
        return self.levels.get(lint.name, lint.level)

    def span_lint(self, lint: Lint, span: Span, message: str, snippet: str = "") -> None:
        """Report `lint` at `span` in the current function."""
        span_lint(self.sink, lint, span, message, self.function.name, snippet, level=self.level_of(lint))


class LateLintPass:
    """Base class for lint passes run over typed function bodies."""

    lints: List[Lint] = []

    def check_fn(self, cx: LateContext, function: Function) -> None:
        pass

    @property
    def name(self) -> str:
        return self.lints[0].name if self.lints else type(self).__name__
