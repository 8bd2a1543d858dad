"""
missing_owner_check: accounts used without checking their owner.

For every `AccountInfo` expression in a function body, require that the same
function either reads the account's `owner` field or compares its key with
`==`/`!=`. Expressions converted from Anchor wrappers that already validate
the owner are exempt.

Per function:
1. Collect candidate account expressions (deduplicated structurally)
2. For each candidate, look for an owner use or a key comparison on an
   equal expression anywhere in the body
3. Report candidates with neither
"""

from typing import List, Optional

from core.diagnostics import Level
from core.utils import debug
from hir.ir import Binary, Body, Expr, Field, Function, expr_text
from hir.spanless import ExprSet, SpanlessEq
from hir.visit import visit_expr_no_bodies, walk_expr
from lints import paths
from lints.base import LateContext, LateLintPass, declare_lint
from lints.utils import (
    is_expr_local_variable,
    is_expr_method_call,
    match_any_def_paths,
    match_type,
    peel_refs_adt_path,
)


MISSING_OWNER_CHECK = declare_lint(
    "missing_owner_check",
    Level.WARN,
    "using an account without checking if its owner is as expected",
    what_it_does=(
        "Checks that every account referenced in a function has a corresponding owner check: "
        "the account's `owner` field is read, or its key is compared against an expected value."
    ),
    why_is_this_bad=(
        "If a program uses an account without checking which program owns it, a caller can pass "
        "an account owned by program X where an account owned by program Y was expected. For example, "
        "a function expecting an SPL Token account may then act on an account whose data was forged "
        "by an attacker-controlled program."
    ),
    known_problems=(
        "The check is syntactic. Reading `owner` anywhere in the function counts, on any branch, and "
        "the same account reached through a differently written expression (a renamed local, a "
        "different field path) is treated as a different account."
    ),
    example="https://github.com/coral-xyz/sealevel-attacks/blob/master/programs/2-owner-checks/insecure/src/lib.rs",
    use_instead="https://github.com/coral-xyz/sealevel-attacks/blob/master/programs/2-owner-checks/secure/src/lib.rs",
)

MESSAGE = "this account is used but there is no check on its owner field"

# Receiver types of `to_account_info()` whose construction already pins the owner:
# - `Account` requires its type argument to implement `anchor_lang::Owner`
# - `Program` checks the account's program id when it is built
# - `SystemAccount` checks that the owner is the System Program
# - `AccountLoader` requires its type argument to implement `anchor_lang::Owner`
# - `Signer` accounts hold a private key and are, almost always, owned by the System Program
# - `Sysvar` checks the account key
# - `AccountInfo`: the receiver itself is collected, so `x.to_account_info()` would duplicate it
SAFE_TO_ACCOUNT_INFO_TYPES = (
    paths.ANCHOR_LANG_ACCOUNT,
    paths.ANCHOR_LANG_PROGRAM,
    paths.ANCHOR_LANG_SYSTEM_ACCOUNT,
    paths.ANCHOR_LANG_ACCOUNT_LOADER,
    paths.ANCHOR_LANG_SIGNER,
    paths.ANCHOR_LANG_SYSVAR,
    paths.SOLANA_PROGRAM_ACCOUNT_INFO,
)


class MissingOwnerCheck(LateLintPass):
    lints = [MISSING_OWNER_CHECK]

    def check_fn(self, cx: LateContext, function: Function) -> None:
        body = cx.body
        eq = SpanlessEq(cx.crate.bodies)
        accounts = get_referenced_accounts(body, eq)
        debug(f"[{MISSING_OWNER_CHECK.name}] {function.name}: {len(accounts)} candidate account(s)")
        for account_expr in accounts:
            if not contains_owner_use(body, account_expr, eq) and not contains_key_check(body, account_expr, eq):
                cx.span_lint(MISSING_OWNER_CHECK, account_expr.span, MESSAGE, snippet=expr_text(account_expr))


# =============================================================================
# Candidate collection
# =============================================================================


class AccountUses:
    """Collects the distinct `AccountInfo` expressions of one body."""

    def __init__(self, eq: Optional[SpanlessEq] = None):
        self.uses = ExprSet(eq)

    def visit_body(self, body: Body) -> None:
        for expr in walk_expr(body.value):
            self.visit_expr(expr)

    def visit_expr(self, expr: Expr) -> None:
        # `x.clone()` would be reported next to `x`
        if is_expr_method_call(expr, paths.CORE_CLONE) is not None:
            return
        if not match_type(expr.ty, paths.SOLANA_PROGRAM_ACCOUNT_INFO):
            return
        # A local's initializer is visited on its own; reporting every read of the local adds nothing.
        # This also keeps `let x = account.to_account_info()` from being reported through `x`.
        if is_expr_local_variable(expr):
            return
        if is_safe_to_account_info(expr):
            return
        self.uses.add(expr)


def get_referenced_accounts(body: Body, eq: Optional[SpanlessEq] = None) -> List[Expr]:
    accounts = AccountUses(eq)
    accounts.visit_body(body)
    return accounts.uses.to_list()


def is_safe_to_account_info(expr: Expr) -> bool:
    """`w.to_account_info()` where `w` is one of SAFE_TO_ACCOUNT_INFO_TYPES."""
    recv = is_expr_method_call(expr, paths.ANCHOR_LANG_TO_ACCOUNT_INFO)
    if recv is None:
        return False
    recv_path = peel_refs_adt_path(recv.ty_adjusted)
    return match_any_def_paths(recv_path, SAFE_TO_ACCOUNT_INFO_TYPES) is not None


# =============================================================================
# Coverage
# =============================================================================


def contains_owner_use(body: Body, account_expr: Expr, eq: SpanlessEq) -> bool:
    return visit_expr_no_bodies(body.value, lambda expr: uses_given_field(expr, account_expr, "owner", eq))


def uses_given_field(expr: Expr, account_expr: Expr, field: str, eq: SpanlessEq) -> bool:
    """True if `expr` is `<account_expr>.<field>`."""
    if not isinstance(expr, Field) or expr.name != field:
        return False
    return eq.eq_expr(account_expr, expr.base)


def calls_method_on_expr(expr: Expr, account_expr: Expr, def_path: str, eq: SpanlessEq) -> bool:
    """True if `expr` is a call of `def_path` with `account_expr` as receiver."""
    recv = is_expr_method_call(expr, def_path)
    if recv is None:
        return False
    return eq.eq_expr(account_expr, recv)


def expr_accesses_key(expr: Expr, account_expr: Expr, eq: SpanlessEq) -> bool:
    # Anchor: `.key()`; solana_program: `.key` field
    return calls_method_on_expr(expr, account_expr, paths.ANCHOR_LANG_KEY, eq) or uses_given_field(
        expr, account_expr, "key", eq
    )


def contains_key_check(body: Body, account_expr: Expr, eq: SpanlessEq) -> bool:
    return visit_expr_no_bodies(body.value, lambda expr: compares_key(expr, account_expr, eq))


def compares_key(expr: Expr, account_expr: Expr, eq: SpanlessEq) -> bool:
    """True if `expr` is `==`/`!=` with a key access of `account_expr` on either side."""
    if not isinstance(expr, Binary) or expr.op not in ("==", "!="):
        return False
    return expr_accesses_key(expr.lhs, account_expr, eq) or expr_accesses_key(expr.rhs, account_expr, eq)
