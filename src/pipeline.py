"""
Lint pass scheduling.

Every function of every loaded document is checked by every enabled pass.
Functions are independent: a fresh LateContext is built per function and a
pass that raises on one function does not stop the others.
"""

import traceback
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.context import ProjectContext
from core.diagnostics import DiagnosticSink, Level
from core.utils import debug, error
from lints.base import LateContext, LateLintPass


@dataclass
class PipelineResult:
    """Counters for one run."""

    analyzed: int = 0
    skipped: int = 0
    # (function name, pass name, error message)
    failures: List[Tuple[str, str, str]] = field(default_factory=list)


def run_lints(
    ctx: ProjectContext,
    passes: List[LateLintPass],
    sink: DiagnosticSink,
    levels: Optional[Dict[str, Level]] = None,
) -> PipelineResult:
    """
    Run `passes` over every function in `ctx`, reporting into `sink`.

    Functions generated by macro expansion (e.g. `#[derive(Accounts)]`) are skipped.
    """
    result = PipelineResult()

    for crate, function in ctx.iter_functions():
        if function.span.from_expansion:
            debug(f"Skipping {function.name}: from macro expansion")
            result.skipped += 1
            continue

        result.analyzed += 1
        for lint_pass in passes:
            cx = LateContext(crate=crate, function=function, sink=sink, levels=levels or {})
            try:
                lint_pass.check_fn(cx, function)
            except Exception as e:
                error(f"Lint '{lint_pass.name}' failed on {function.name}: {e}")
                debug(traceback.format_exc())
                result.failures.append((function.name, lint_pass.name, str(e)))

    debug(f"Analyzed {result.analyzed} function(s), skipped {result.skipped}, {len(result.failures)} failure(s)")
    return result
