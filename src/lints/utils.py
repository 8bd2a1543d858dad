"""
Expression and type matching helpers shared by lints.

All helpers are total: unresolved types or method paths simply do not match.
"""

from typing import Iterable, Optional

from hir.ir import Expr, MethodCall, is_local_path
from hir.types import adt_path, is_resolved, strip_references


def match_def_path(def_path: Optional[str], path: str) -> bool:
    return def_path is not None and def_path == path


def match_any_def_paths(def_path: Optional[str], paths: Iterable[str]) -> Optional[int]:
    """Index of the first path in `paths` equal to `def_path`, or None."""
    if def_path is None:
        return None
    for i, path in enumerate(paths):
        if def_path == path:
            return i
    return None


def match_type(ty: Optional[str], path: str) -> bool:
    """True iff `ty` is exactly the ADT at `path` (any generic arguments, no reference)."""
    return match_def_path(adt_path(ty), path)


def peel_refs_adt_path(ty: Optional[str]) -> Optional[str]:
    """ADT path of `ty` after removing references: "&Program<'info, T>" -> "...::Program"."""
    if not is_resolved(ty):
        return None
    return adt_path(strip_references(ty))


def is_expr_method_call(expr: Expr, def_path: str) -> Optional[Expr]:
    """If `expr` is a method call resolving to `def_path`, return its receiver, else None."""
    if isinstance(expr, MethodCall) and match_def_path(expr.def_path, def_path):
        return expr.receiver
    return None


def is_expr_local_variable(expr: Expr) -> bool:
    """A bare single-segment path such as `x`."""
    return is_local_path(expr)
