"""
Debug and development CLI commands: IR dump and IR document check.
"""

from typing import List

from core.context import ProjectContext
from core.utils import error
from hir.ir import Crate, Expr, Path, Field, MethodCall, Binary, Unary, Lit, Closure, MacroCall, expr_text
from hir.loader import IRLoadError, load_crate
from hir.visit import children


def _node_label(expr: Expr) -> str:
    name = type(expr).__name__
    if isinstance(expr, Path):
        detail = expr_text(expr) + (f" res={expr.res}" if expr.res else "")
    elif isinstance(expr, Field):
        detail = f".{expr.name}"
    elif isinstance(expr, MethodCall):
        detail = f".{expr.method}() -> {expr.def_path or '?'}"
    elif isinstance(expr, (Binary, Unary)):
        detail = expr.op
    elif isinstance(expr, Lit):
        detail = repr(expr.value)
    elif isinstance(expr, Closure):
        detail = f"body={expr.body_id}"
    elif isinstance(expr, MacroCall):
        detail = f"{expr.name}!"
    else:
        detail = ""
    return f"{name} {detail}".rstrip()


def dump_ir_tree(root: Expr, max_depth: int = 30) -> None:
    """Print an expression tree, one node per line with its span and type."""

    def print_node(expr: Expr, depth: int = 0):
        if depth > max_depth:
            return

        indent = "  " * depth
        ty = expr.ty or "?"
        if expr.adjusted_ty and expr.adjusted_ty != expr.ty:
            ty = f"{ty} => {expr.adjusted_ty}"
        expansion = " [expansion]" if expr.span.from_expansion else ""
        print(f"{indent}{_node_label(expr)} [{expr.span.line}:{expr.span.column}]{expansion} : {ty}")

        for child in children(expr):
            print_node(child, depth + 1)

    print_node(root)


def dump_crate(crate: Crate) -> None:
    for function in crate.functions:
        expansion = " [expansion]" if function.span.from_expansion else ""
        print(f"fn {function.name} (body {function.body.id}){expansion}")
        dump_ir_tree(function.body.value, max_depth=30)
    nested = [body for body in crate.bodies.values() if all(f.body is not body for f in crate.functions)]
    for body in nested:
        print(f"body {body.id}")
        dump_ir_tree(body.value)


def dump_ir_impl(ctx: ProjectContext) -> None:
    """Dump the IR of all loaded documents."""
    for path, file_ctx in ctx.source_files.items():
        if file_ctx.crate is None:
            continue
        print(f"\n=== IR for {path} (crate {file_ctx.crate.name}) ===")
        dump_crate(file_ctx.crate)
        print("=== End IR ===\n")


def check_ir_impl(source_files: List[str]) -> int:
    """Validate that all documents load."""
    print("IR check mode: Validating documents...")
    has_errors = False
    for source_file in source_files:
        try:
            crate = load_crate(source_file)
        except IRLoadError as e:
            error(str(e))
            has_errors = True
            continue
        print(f"  {source_file}: {len(crate.functions)} function(s), {len(crate.bodies)} body(ies)")
    if has_errors:
        error("IR validation FAILED")
        return 1
    else:
        print("✓ IR validation PASSED")
        return 0
