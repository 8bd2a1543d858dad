"""Tests for the missing_owner_check lint."""

from core.diagnostics import DiagnosticSink, Level
from hir.ir import Function, LetStmt, Pat
from lints import paths
from lints.base import LateContext
from lints.missing_owner_check import (
    MESSAGE,
    MISSING_OWNER_CHECK,
    MissingOwnerCheck,
    get_referenced_accounts,
    is_safe_to_account_info,
)
from ir_utils import (
    ACCOUNT_INFO,
    PUBKEY,
    account_of,
    binary,
    block,
    body,
    clone,
    closure,
    crate,
    ctx_account,
    field,
    function,
    if_,
    key,
    let,
    local,
    macro,
    method,
    owner_guard,
    path,
    ref,
    semi,
    span,
    to_account_info,
)


def check(fn: Function, c=None, levels=None):
    """Run the lint on one function and return its findings."""
    sink = DiagnosticSink()
    cx = LateContext(crate=c or crate(fn), function=fn, sink=sink, levels=levels or {})
    MissingOwnerCheck().check_fn(cx, fn)
    return sink.findings


def use(expr):
    """`msg!("{}", expr)`"""
    return semi(macro("msg", expr))


class TestScenarios:
    """Behaviour on small bodies, one per documented scenario."""

    def test_owner_field_check_covers_account(self):
        """`let a = ctx.accounts.a.clone(); if ctx.accounts.a.owner != ID {..}` -> no findings."""
        fn = function(
            "prog::owner_checked",
            block(
                let("a", clone(ctx_account("a"))),
                semi(owner_guard(ctx_account("a"))),
                use(local("a", ACCOUNT_INFO)),
            ),
        )
        assert check(fn) == []

    def test_unchecked_account_reported_once_at_initializer(self):
        account = ctx_account("a", line=42)
        fn = function("prog::unchecked", block(let("a", clone(account)), use(local("a", ACCOUNT_INFO))))

        findings = check(fn)

        assert len(findings) == 1
        assert findings[0].span == account.span
        assert findings[0].message == MESSAGE
        assert findings[0].level == Level.WARN
        assert findings[0].lint == "missing_owner_check"
        assert findings[0].function == "prog::unchecked"
        assert findings[0].snippet == "ctx.accounts.a"

    def test_program_to_account_info_is_safe(self):
        program_ty = account_of(paths.ANCHOR_LANG_PROGRAM, "System")
        fn = function(
            "prog::program_id",
            block(
                let("p", ctx_account("system_program", program_ty)),
                let("a", to_account_info(local("p", program_ty))),
                use(local("a", ACCOUNT_INFO)),
            ),
        )
        assert check(fn) == []

    def test_clone_collapses_onto_receiver(self):
        fn = function(
            "prog::cloned",
            block(
                use(ctx_account("x")),
                use(clone(ctx_account("x"))),
            ),
        )
        findings = check(fn)
        assert len(findings) == 1
        assert findings[0].snippet == "ctx.accounts.x"

    def test_key_method_comparison_covers_account(self):
        expected = local("expected_key", PUBKEY)
        fn = function(
            "prog::key_checked",
            block(
                semi(if_(binary("==", key(ctx_account("a")), expected), block())),
                use(ctx_account("a")),
            ),
        )
        assert check(fn) == []

    def test_key_field_comparison_covers_account(self):
        fn = function(
            "prog::key_field_checked",
            block(
                semi(
                    if_(
                        binary("!=", ref(path("spl_token::ID", PUBKEY)), field(ctx_account("a"), "key", f"&{PUBKEY}")),
                        block(),
                    )
                ),
                use(ctx_account("a")),
            ),
        )
        assert check(fn) == []

    def test_differently_written_receivers_are_distinct(self):
        """An owner check through a local does not cover the expression it was bound from."""
        fn = function(
            "prog::renamed",
            block(
                let("a", clone(ctx_account("a"))),
                semi(owner_guard(local("a", ACCOUNT_INFO))),
            ),
        )
        findings = check(fn)
        assert len(findings) == 1
        assert findings[0].snippet == "ctx.accounts.a"


class TestCandidateCollection:
    """Which expressions become candidates."""

    def test_structurally_equal_expressions_deduplicated(self):
        fn_body = body(block(use(ctx_account("a")), use(ctx_account("a")), use(ctx_account("b"))))
        accounts = get_referenced_accounts(fn_body)
        assert [a.name for a in accounts] == ["a", "b"]

    def test_first_occurrence_is_kept(self):
        first = ctx_account("a", line=10)
        second = ctx_account("a", line=20)
        accounts = get_referenced_accounts(body(block(use(first), use(second))))
        assert len(accounts) == 1
        assert accounts[0] is first

    def test_collection_is_deterministic(self):
        fn_body = body(block(use(ctx_account("b")), use(ctx_account("a")), use(ctx_account("c"))))
        first = [a.name for a in get_referenced_accounts(fn_body)]
        second = [a.name for a in get_referenced_accounts(fn_body)]
        assert first == second == ["b", "a", "c"]

    def test_reference_typed_expression_not_collected(self):
        fn_body = body(block(use(ctx_account("a", f"&{ACCOUNT_INFO}"))))
        assert get_referenced_accounts(fn_body) == []

    def test_other_types_not_collected(self):
        fn_body = body(block(use(ctx_account("a", account_of(paths.ANCHOR_LANG_ACCOUNT)))))
        assert get_referenced_accounts(fn_body) == []

    def test_unresolved_type_not_collected(self):
        fn_body = body(block(use(ctx_account("a", None)), use(ctx_account("b", "{unknown}"))))
        assert get_referenced_accounts(fn_body) == []

    def test_local_reads_not_collected(self):
        fn_body = body(block(use(local("a", ACCOUNT_INFO))))
        assert get_referenced_accounts(fn_body) == []

    def test_qualified_single_segment_path_is_collected(self):
        """`<T as Trait>::ACCOUNT` is not a local even with one segment."""
        qualified = path("ACCOUNT", ACCOUNT_INFO)
        qualified.qself = "Registry"
        accounts = get_referenced_accounts(body(block(use(qualified))))
        assert accounts == [qualified]

    def test_to_account_info_on_account_info_collects_receiver_only(self):
        account = ctx_account("a")
        accounts = get_referenced_accounts(body(block(use(to_account_info(account)))))
        assert accounts == [account]

    def test_children_of_skipped_expression_still_visited(self):
        account = ctx_account("a")
        accounts = get_referenced_accounts(body(block(use(clone(account)))))
        assert accounts == [account]

    def test_closure_body_not_traversed(self):
        inner = body(block(use(ctx_account("inner"))), body_id=1)
        fn = function("prog::with_closure", block(let("f", closure(1)), use(ctx_account("outer"))))
        c = crate(fn, extra_bodies=[inner])

        findings = check(fn, c)

        assert [f.snippet for f in findings] == ["ctx.accounts.outer"]

    def test_let_else_block_traversed(self):
        stmt = LetStmt(
            span=span(),
            pat=Pat(kind="tuple_struct", path="Some", subpats=[Pat(kind="binding", name="v")]),
            init=local("maybe", "core::option::Option<u64>"),
            els=block(use(ctx_account("in_else"))),
        )
        accounts = get_referenced_accounts(body(block(stmt)))
        assert [a.name for a in accounts] == ["in_else"]


class TestSafetyClassifier:
    """to_account_info conversions from owner-checked wrappers."""

    def _conversion(self, wrapper: str, adjusted: bool = True):
        ty = account_of(wrapper)
        recv = ctx_account("w", ty)
        if adjusted:
            recv.adjusted_ty = f"&{ty}"
        return to_account_info(recv)

    def test_all_witness_types_safe(self):
        for wrapper in (
            paths.ANCHOR_LANG_ACCOUNT,
            paths.ANCHOR_LANG_PROGRAM,
            paths.ANCHOR_LANG_SYSTEM_ACCOUNT,
            paths.ANCHOR_LANG_ACCOUNT_LOADER,
            paths.ANCHOR_LANG_SIGNER,
            paths.ANCHOR_LANG_SYSVAR,
        ):
            assert is_safe_to_account_info(self._conversion(wrapper)), wrapper

    def test_unadjusted_receiver_type_used_as_fallback(self):
        assert is_safe_to_account_info(self._conversion(paths.ANCHOR_LANG_SIGNER, adjusted=False))

    def test_unknown_wrapper_not_safe(self):
        assert not is_safe_to_account_info(self._conversion("anchor_lang::accounts::unchecked::UncheckedAccount"))

    def test_other_method_not_safe(self):
        recv = ctx_account("w", account_of(paths.ANCHOR_LANG_ACCOUNT))
        call = method(recv, "to_account_info", "my_crate::ToInfo::to_account_info", ty=ACCOUNT_INFO)
        assert not is_safe_to_account_info(call)

    def test_unresolved_method_not_safe(self):
        recv = ctx_account("w", account_of(paths.ANCHOR_LANG_ACCOUNT))
        call = method(recv, "to_account_info", None, ty=ACCOUNT_INFO)
        assert not is_safe_to_account_info(call)

    def test_unsafe_conversion_is_reported(self):
        recv = ctx_account("w", account_of("anchor_lang::accounts::unchecked::UncheckedAccount"))
        fn = function("prog::unchecked_conversion", block(use(to_account_info(recv))))
        findings = check(fn)
        assert len(findings) == 1
        assert findings[0].snippet == "ctx.accounts.w.to_account_info()"


class TestCoverage:
    """Owner-field and key-comparison strategies."""

    def test_owner_check_anywhere_in_body_counts(self):
        """The check may appear after the use."""
        fn = function("prog::late_check", block(use(ctx_account("a")), semi(owner_guard(ctx_account("a")))))
        assert check(fn) == []

    def test_removing_owner_check_restores_finding(self):
        with_check = function("prog::f", block(use(ctx_account("a")), semi(owner_guard(ctx_account("a")))))
        without_check = function("prog::f", block(use(ctx_account("a"))))
        assert check(with_check) == []
        assert len(check(without_check)) == 1

    def test_owner_check_on_other_account_does_not_cover(self):
        fn = function("prog::wrong_account", block(use(ctx_account("a")), semi(owner_guard(ctx_account("b")))))
        findings = check(fn)
        assert [f.snippet for f in findings] == ["ctx.accounts.a"]

    def test_key_access_outside_comparison_does_not_cover(self):
        fn = function("prog::key_read", block(let("k", key(ctx_account("a")))))
        assert len(check(fn)) == 1

    def test_key_ordering_comparison_does_not_cover(self):
        fn = function(
            "prog::key_lt",
            block(semi(if_(binary("<", key(ctx_account("a")), local("k", PUBKEY)), block()))),
        )
        assert len(check(fn)) == 1

    def test_owner_check_inside_closure_does_not_cover(self):
        inner = body(block(semi(owner_guard(ctx_account("a")))), body_id=1)
        fn = function("prog::closure_check", block(let("f", closure(1)), use(ctx_account("a"))))
        assert len(check(fn, crate(fn, extra_bodies=[inner]))) == 1

    def _found(self, body_id: int):
        """`accounts.find(|a| ..)` through the closure with `body_id`"""
        accounts = local("accounts", f"alloc::vec::Vec<{ACCOUNT_INFO}>")
        return method(accounts, "find", "core::iter::Iterator::find", args=[closure(body_id)], ty=ACCOUNT_INFO)

    def _predicate(self, body_id: int, expected: str):
        return body(binary("==", key(local("a", ACCOUNT_INFO)), path(expected, PUBKEY)), body_id=body_id)

    def test_owner_check_through_equal_closure_covers(self):
        fn = function("prog::found", block(use(self._found(1)), semi(owner_guard(self._found(2)))))
        c = crate(fn, extra_bodies=[self._predicate(1, "prog::VAULT"), self._predicate(2, "prog::VAULT")])
        assert check(fn, c) == []

    def test_owner_check_through_different_closure_does_not_cover(self):
        unchecked = self._found(1)
        fn = function("prog::found", block(use(unchecked), semi(owner_guard(self._found(2)))))
        c = crate(fn, extra_bodies=[self._predicate(1, "prog::VAULT"), self._predicate(2, "prog::MINT")])
        findings = check(fn, c)
        assert [f.span for f in findings] == [unchecked.span]

    def test_each_uncovered_candidate_reported(self):
        fn = function("prog::two", block(use(ctx_account("a")), use(ctx_account("b"))))
        findings = check(fn)
        assert [f.snippet for f in findings] == ["ctx.accounts.a", "ctx.accounts.b"]


class TestLevels:
    def test_declared_at_warn(self):
        assert MISSING_OWNER_CHECK.level == Level.WARN

    def test_allow_suppresses(self):
        fn = function("prog::f", block(use(ctx_account("a"))))
        assert check(fn, levels={"missing_owner_check": Level.ALLOW}) == []

    def test_deny_raises_level(self):
        fn = function("prog::f", block(use(ctx_account("a"))))
        findings = check(fn, levels={"missing_owner_check": Level.DENY})
        assert findings[0].level == Level.DENY
