"""
Span-insensitive structural equality of expressions.

Two expressions are equal when they have the same shape: same node kinds,
operators, field and method names, path segments with the same resolution,
and literal values, recursively. Spans, node ids and types are ignored.

Closures are compared through their bodies when the comparer is given the
crate's body map, and by body id otherwise.

This is a syntactic comparison, not an alias analysis: `ctx.accounts.vault`
and a local bound to it are different expressions.
"""

from typing import Dict, Iterator, List, Optional

from .ir import (
    Body,
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
    Pat,
    Stmt,
    LetStmt,
    ExprStmt,
    ItemStmt,
)


class SpanlessEq:
    """
    Structural comparison of expressions, statements and patterns.

    Holds no comparison state: an instance can be reused for any number of comparisons.
    """

    def __init__(self, bodies: Optional[Dict[int, Body]] = None):
        self.bodies = bodies or {}

    def eq_expr(self, left: Optional[Expr], right: Optional[Expr]) -> bool:
        if left is None or right is None:
            return left is None and right is None
        if left is right:
            return True
        if type(left) is not type(right):
            return False

        if isinstance(left, Path):
            return (
                left.res == right.res
                and left.segments == right.segments
                and left.qself == right.qself
            )
        elif isinstance(left, Field):
            return left.name == right.name and self.eq_expr(left.base, right.base)
        elif isinstance(left, MethodCall):
            return (
                left.method == right.method
                and left.type_args == right.type_args
                and self.eq_expr(left.receiver, right.receiver)
                and self.eq_exprs(left.args, right.args)
            )
        elif isinstance(left, Call):
            return self.eq_expr(left.func, right.func) and self.eq_exprs(left.args, right.args)
        elif isinstance(left, (Binary, AssignOp)):
            return left.op == right.op and self.eq_expr(left.lhs, right.lhs) and self.eq_expr(left.rhs, right.rhs)
        elif isinstance(left, Assign):
            return self.eq_expr(left.lhs, right.lhs) and self.eq_expr(left.rhs, right.rhs)
        elif isinstance(left, Unary):
            return left.op == right.op and self.eq_expr(left.operand, right.operand)
        elif isinstance(left, AddrOf):
            return left.mutable == right.mutable and self.eq_expr(left.inner, right.inner)
        elif isinstance(left, Lit):
            return left.kind == right.kind and left.value == right.value
        elif isinstance(left, Block):
            return left.label == right.label and self.eq_block(left, right)
        elif isinstance(left, If):
            return (
                self.eq_expr(left.cond, right.cond)
                and self.eq_expr(left.then, right.then)
                and self.eq_expr(left.els, right.els)
            )
        elif isinstance(left, Match):
            if left.source != right.source or len(left.arms) != len(right.arms):
                return False
            if not self.eq_expr(left.scrutinee, right.scrutinee):
                return False
            return all(
                self.eq_pat(la.pat, ra.pat) and self.eq_expr(la.guard, ra.guard) and self.eq_expr(la.body, ra.body)
                for la, ra in zip(left.arms, right.arms)
            )
        elif isinstance(left, Loop):
            return left.label == right.label and left.source == right.source and self.eq_expr(left.body, right.body)
        elif isinstance(left, Let):
            return (
                left.type_ann == right.type_ann
                and self.eq_pat(left.pat, right.pat)
                and self.eq_expr(left.init, right.init)
            )
        elif isinstance(left, Closure):
            return left.capture_by_move == right.capture_by_move and self.eq_body(left.body_id, right.body_id)
        elif isinstance(left, StructLit):
            if left.path != right.path or len(left.fields) != len(right.fields):
                return False
            return all(
                ln == rn and self.eq_expr(lv, rv) for (ln, lv), (rn, rv) in zip(left.fields, right.fields)
            ) and self.eq_expr(left.base, right.base)
        elif isinstance(left, (Tup, Array)):
            return self.eq_exprs(left.elements, right.elements)
        elif isinstance(left, Index):
            return self.eq_expr(left.base, right.base) and self.eq_expr(left.index, right.index)
        elif isinstance(left, Cast):
            return left.target_type == right.target_type and self.eq_expr(left.inner, right.inner)
        elif isinstance(left, Return):
            return self.eq_expr(left.value, right.value)
        elif isinstance(left, Break):
            return left.label == right.label and self.eq_expr(left.value, right.value)
        elif isinstance(left, Continue):
            return left.label == right.label
        elif isinstance(left, MacroCall):
            return left.name == right.name and self.eq_exprs(left.args, right.args)
        # Unknown and anything unlisted never compare equal
        return False

    def eq_body(self, left_id: int, right_id: int) -> bool:
        if left_id == right_id:
            return True
        left, right = self.bodies.get(left_id), self.bodies.get(right_id)
        if left is None or right is None:
            return False
        if len(left.params) != len(right.params):
            return False
        return all(self.eq_pat(a, b) for a, b in zip(left.params, right.params)) and self.eq_expr(
            left.value, right.value
        )

    def eq_exprs(self, left: List[Expr], right: List[Expr]) -> bool:
        return len(left) == len(right) and all(self.eq_expr(a, b) for a, b in zip(left, right))

    def eq_block(self, left: Block, right: Block) -> bool:
        if len(left.stmts) != len(right.stmts):
            return False
        return all(self.eq_stmt(a, b) for a, b in zip(left.stmts, right.stmts)) and self.eq_expr(
            left.expr, right.expr
        )

    def eq_stmt(self, left: Stmt, right: Stmt) -> bool:
        if type(left) is not type(right):
            return False
        if isinstance(left, LetStmt):
            return (
                left.type_ann == right.type_ann
                and self.eq_pat(left.pat, right.pat)
                and self.eq_expr(left.init, right.init)
                and self.eq_expr(left.els, right.els)
            )
        elif isinstance(left, ExprStmt):
            return left.semi == right.semi and self.eq_expr(left.expr, right.expr)
        elif isinstance(left, ItemStmt):
            return left.item == right.item
        return False

    def eq_pat(self, left: Optional[Pat], right: Optional[Pat]) -> bool:
        if left is None or right is None:
            return left is None and right is None
        if left.kind != right.kind or left.mutable != right.mutable:
            return False
        if left.name != right.name or left.path != right.path:
            return False
        return len(left.subpats) == len(right.subpats) and all(
            self.eq_pat(a, b) for a, b in zip(left.subpats, right.subpats)
        )


class ExprSet:
    """
    Insertion-ordered set of expressions under structural equality.

    Create one per body: nothing is shared between bodies.
    """

    def __init__(self, eq: Optional[SpanlessEq] = None):
        self._eq = eq or SpanlessEq()
        self._items: List[Expr] = []

    def contains(self, expr: Expr) -> bool:
        return any(self._eq.eq_expr(e, expr) for e in self._items)

    def add(self, expr: Expr) -> bool:
        """Insert `expr` unless an equal expression is present. Returns True if inserted."""
        if self.contains(expr):
            return False
        self._items.append(expr)
        return True

    def __iter__(self) -> Iterator[Expr]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[Expr]:
        return list(self._items)
