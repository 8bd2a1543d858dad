from core.context import ProjectContext, SourceFileContext
from core.diagnostics import Level, Finding, DiagnosticSink, span_lint
from core.utils import debug, info, warn, error

__all__ = [
    "ProjectContext",
    "SourceFileContext",
    "Level",
    "Finding",
    "DiagnosticSink",
    "span_lint",
    "debug",
    "info",
    "warn",
    "error",
]
