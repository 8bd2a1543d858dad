"""
Expression traversal that stays within one body.

Closures and nested items are separate analysis units. Walking stops at them:
a `Closure` node is yielded itself but its body is never entered, and an
`ItemStmt` contributes no expressions.
"""

from typing import Callable, Iterator, List, Optional

from .ir import (
    Expr,
    Path,
    Field,
    MethodCall,
    Call,
    Binary,
    Unary,
    AddrOf,
    Lit,
    Block,
    If,
    Match,
    Loop,
    Let,
    Closure,
    StructLit,
    Tup,
    Array,
    Index,
    Cast,
    Assign,
    AssignOp,
    Return,
    Break,
    Continue,
    MacroCall,
    Unknown,
    Stmt,
    LetStmt,
    ExprStmt,
    ItemStmt,
)


def _present(*exprs: Optional[Expr]) -> List[Expr]:
    return [e for e in exprs if e is not None]


def stmt_children(stmt: Stmt) -> List[Expr]:
    """Expressions directly under a statement, in source order."""
    if isinstance(stmt, LetStmt):
        return _present(stmt.init, stmt.els)
    elif isinstance(stmt, ExprStmt):
        return [stmt.expr]
    elif isinstance(stmt, ItemStmt):
        return []
    return []


def children(expr: Expr) -> List[Expr]:
    """Direct sub-expressions of `expr`, in source order."""
    if isinstance(expr, Field):
        return _present(expr.base)
    elif isinstance(expr, MethodCall):
        return _present(expr.receiver) + list(expr.args)
    elif isinstance(expr, Call):
        return _present(expr.func) + list(expr.args)
    elif isinstance(expr, (Binary, Assign, AssignOp)):
        return _present(expr.lhs, expr.rhs)
    elif isinstance(expr, Unary):
        return _present(expr.operand)
    elif isinstance(expr, AddrOf):
        return _present(expr.inner)
    elif isinstance(expr, Block):
        result: List[Expr] = []
        for stmt in expr.stmts:
            result.extend(stmt_children(stmt))
        if expr.expr is not None:
            result.append(expr.expr)
        return result
    elif isinstance(expr, If):
        return _present(expr.cond, expr.then, expr.els)
    elif isinstance(expr, Match):
        result = _present(expr.scrutinee)
        for arm in expr.arms:
            if arm.guard is not None:
                result.append(arm.guard)
            result.append(arm.body)
        return result
    elif isinstance(expr, Loop):
        return _present(expr.body)
    elif isinstance(expr, Let):
        return _present(expr.init)
    elif isinstance(expr, StructLit):
        return [value for _, value in expr.fields] + _present(expr.base)
    elif isinstance(expr, (Tup, Array)):
        return list(expr.elements)
    elif isinstance(expr, Index):
        return _present(expr.base, expr.index)
    elif isinstance(expr, Cast):
        return _present(expr.inner)
    elif isinstance(expr, (Return, Break)):
        return _present(expr.value)
    elif isinstance(expr, MacroCall):
        return list(expr.args)
    elif isinstance(expr, (Path, Lit, Closure, Continue, Unknown)):
        return []
    return []


def walk_expr(expr: Expr) -> Iterator[Expr]:
    """Pre-order walk over `expr` and everything under it in the same body."""
    stack = [expr]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def visit_expr_no_bodies(expr: Expr, predicate: Callable[[Expr], bool]) -> bool:
    """True iff `predicate` holds for some expression under `expr` (nested bodies excluded)."""
    return any(predicate(e) for e in walk_expr(expr))
