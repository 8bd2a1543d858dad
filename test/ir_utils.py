"""
Compact HIR constructors for tests.

Every call creates fresh nodes with their own ids and spans, so two calls with
the same arguments build structurally equal but distinct expressions.
"""

import itertools
from typing import List, Optional

from hir.ir import (
    Span,
    Pat,
    Expr,
    Path,
    Field,
    MethodCall,
    Binary,
    Unary,
    AddrOf,
    Lit,
    Block,
    If,
    Return,
    Closure,
    MacroCall,
    LetStmt,
    ExprStmt,
    Body,
    Function,
    Crate,
)
from lints import paths


ACCOUNT_INFO = f"{paths.SOLANA_PROGRAM_ACCOUNT_INFO}<'info>"
PUBKEY = "solana_program::pubkey::Pubkey"
CONTEXT = f"{paths.ANCHOR_LANG_CONTEXT}<'_, '_, '_, 'info, LogMessage<'info>>"


def account_of(wrapper: str, inner: str = "TokenAccount") -> str:
    """Anchor wrapper type: account_of(paths.ANCHOR_LANG_ACCOUNT) -> "...Account<'info, TokenAccount>"."""
    return f"{wrapper}<'info, {inner}>"


_ids = itertools.count()
_lines = itertools.count(1)


def span(line: Optional[int] = None, col: int = 5, file: str = "lib.rs", expansion: bool = False) -> Span:
    if line is None:
        line = next(_lines)
    return Span(file, line, col, line, col + 10, expansion)


def _common(ty: Optional[str], line: Optional[int] = None, adjusted_ty: Optional[str] = None):
    return {"id": f"e{next(_ids)}", "span": span(line), "ty": ty, "adjusted_ty": adjusted_ty}


def local(name: str, ty: Optional[str] = None, res: Optional[str] = None) -> Path:
    return Path(**_common(ty), segments=[name], res=res or f"local:{name}")


def path(fqn: str, ty: Optional[str] = None, res: Optional[str] = None) -> Path:
    return Path(**_common(ty), segments=fqn.split("::"), res=res or fqn)


def field(base: Expr, name: str, ty: Optional[str] = None, line: Optional[int] = None) -> Field:
    return Field(**_common(ty, line), base=base, name=name)


def ctx_account(name: str, ty: str = ACCOUNT_INFO, line: Optional[int] = None) -> Field:
    """`ctx.accounts.<name>`"""
    accounts = field(local("ctx", CONTEXT), "accounts", "&mut LogMessage<'info>")
    return field(accounts, name, ty, line)


def method(
    receiver: Expr,
    name: str,
    def_path: Optional[str] = None,
    args: Optional[List[Expr]] = None,
    ty: Optional[str] = None,
    line: Optional[int] = None,
) -> MethodCall:
    return MethodCall(**_common(ty, line), method=name, receiver=receiver, args=args or [], def_path=def_path)


def to_account_info(receiver: Expr) -> MethodCall:
    return method(receiver, "to_account_info", paths.ANCHOR_LANG_TO_ACCOUNT_INFO, ty=ACCOUNT_INFO)


def clone(receiver: Expr) -> MethodCall:
    return method(receiver, "clone", paths.CORE_CLONE, ty=receiver.ty)


def key(receiver: Expr) -> MethodCall:
    return method(receiver, "key", paths.ANCHOR_LANG_KEY, ty=PUBKEY)


def binary(op: str, lhs: Expr, rhs: Expr) -> Binary:
    return Binary(**_common("bool"), op=op, lhs=lhs, rhs=rhs)


def ref(inner: Expr) -> AddrOf:
    return AddrOf(**_common(f"&{inner.ty}" if inner.ty else None), inner=inner)


def deref(operand: Expr) -> Unary:
    return Unary(**_common(None), op="*", operand=operand)


def lit(value, kind: str = "int") -> Lit:
    return Lit(**_common(None), value=value, kind=kind)


def block(*stmts, expr: Optional[Expr] = None) -> Block:
    return Block(**_common("()"), stmts=list(stmts), expr=expr)


def if_(cond: Expr, then: Expr, els: Optional[Expr] = None) -> If:
    return If(**_common("()"), cond=cond, then=then, els=els)


def ret(value: Optional[Expr] = None) -> Return:
    return Return(**_common("!"), value=value)


def closure(body_id: int) -> Closure:
    return Closure(**_common("{closure}"), body_id=body_id)


def macro(name: str, *args: Expr) -> MacroCall:
    return MacroCall(**_common("()"), name=name, args=list(args))


def let(name: str, init: Expr) -> LetStmt:
    return LetStmt(span=span(), pat=Pat(kind="binding", name=name, res=f"local:{name}"), init=init)


def semi(expr: Expr) -> ExprStmt:
    return ExprStmt(span=span(), expr=expr)


def body(value: Expr, body_id: int = 0) -> Body:
    return Body(id=body_id, params=[Pat(kind="binding", name="ctx", res="local:ctx")], value=value)


def function(name: str, value: Expr, body_id: int = 0, expansion: bool = False) -> Function:
    return Function(name=name, span=span(expansion=expansion), body=body(value, body_id))


def crate(*functions: Function, extra_bodies: Optional[List[Body]] = None) -> Crate:
    bodies = {f.body.id: f.body for f in functions}
    for b in extra_bodies or []:
        bodies[b.id] = b
    return Crate(name="owner_checks", file="lib.rs", functions=list(functions), bodies=bodies)


def owner_guard(account: Expr) -> If:
    """`if <account>.owner != &spl_token::ID { return Err(..) }`"""
    cond = binary("!=", field(account, "owner", f"&'info {PUBKEY}"), ref(path("spl_token::ID", PUBKEY)))
    return if_(cond, block(semi(ret(lit("Err", "str")))))
