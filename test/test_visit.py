"""Tests for body traversal."""

from hir.ir import LetStmt, ItemStmt, Pat
from hir.visit import children, visit_expr_no_bodies, walk_expr
from ir_utils import block, closure, ctx_account, field, if_, let, lit, local, macro, semi, span


def test_walk_is_preorder_in_source_order():
    a, b, c = local("a"), local("b"), local("c")
    root = block(semi(a), semi(if_(b, block(semi(c)))))
    visited = [e for e in walk_expr(root) if e in (a, b, c)]
    assert [e.segments[0] for e in visited] == ["a", "b", "c"]


def test_walk_yields_root_first():
    root = field(local("ctx"), "accounts")
    walked = list(walk_expr(root))
    assert walked[0] is root
    assert walked[1] is root.base


def test_closure_yielded_but_not_entered():
    clo = closure(7)
    root = block(let("f", clo))
    walked = list(walk_expr(root))
    assert clo in walked
    assert children(clo) == []


def test_item_statement_contributes_nothing():
    root = block(ItemStmt(span=span(), item="fn helper() {}"))
    assert list(walk_expr(root)) == [root]


def test_let_initializer_and_else_visited():
    init = local("maybe")
    els_inner = lit(1)
    els = block(semi(els_inner))
    stmt = LetStmt(span=span(), pat=Pat(kind="wild"), init=init, els=els)
    walked = list(walk_expr(block(stmt)))
    assert init in walked
    assert els_inner in walked


def test_macro_arguments_visited():
    account = ctx_account("a")
    assert account in list(walk_expr(macro("msg", lit("{}", "str"), account)))


def test_visit_expr_no_bodies_short_circuits_on_match():
    seen = []

    def pred(expr):
        seen.append(expr)
        return expr.ty == "needle"

    needle = local("n", "needle")
    after = local("after")
    root = block(semi(needle), semi(after))
    assert visit_expr_no_bodies(root, pred)
    assert all(e is not after for e in seen)
    assert seen[-1] is needle


def test_visit_expr_no_bodies_false_when_absent():
    assert not visit_expr_no_bodies(block(semi(local("a"))), lambda e: e.ty == "needle")
