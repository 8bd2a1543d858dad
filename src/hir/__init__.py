"""
Typed HIR consumed by the lints: data model, type strings, traversal,
structural equality, and the JSON document loader.
"""

from hir.ir import Span, Expr, Body, Function, Crate
from hir.loader import IRLoadError, load_crate, build_crate
from hir.spanless import SpanlessEq, ExprSet
from hir.visit import walk_expr, visit_expr_no_bodies

__all__ = [
    "Span",
    "Expr",
    "Body",
    "Function",
    "Crate",
    "IRLoadError",
    "load_crate",
    "build_crate",
    "SpanlessEq",
    "ExprSet",
    "walk_expr",
    "visit_expr_no_bodies",
]
