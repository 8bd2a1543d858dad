"""
IR document loader - converts front-end JSON output to HIR.

A document describes one crate (or one source file of it):

    {
      "crate": "owner_checks",
      "file": "programs/owner_checks/src/lib.rs",
      "functions": [
        {"name": "owner_checks::log_message", "span": [12, 5, 20, 6], "body": 0}
      ],
      "bodies": [
        {"id": 0, "params": [{"kind": "binding", "name": "ctx", "res": "local:0"}], "value": {...}}
      ]
    }

Expressions are objects with a "kind" plus kind-specific fields, the resolved
type in "ty" (optional "adjusted_ty"), and a span `[line, col, end_line, end_col]`
(optional "expansion": true for macro-generated code):

    {"kind": "field", "name": "owner", "ty": "&'info Pubkey", "span": [14, 12, 14, 37],
     "base": {"kind": "path", "segments": ["token"], "res": "local:3", "ty": "..."}}

Statements are objects with a "stmt" of "let", "expr", "semi" or "item".
Patterns are objects with a "kind", or a bare string: "_" is a wildcard,
anything else a binding of that name.
"""

import json
from pathlib import Path as FsPath
from typing import Any, Dict, List, Optional

from core.utils import debug
from .ir import (
    Span,
    Pat,
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
    Arm,
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
    Body,
    Function,
    Crate,
)


class IRLoadError(ValueError):
    """Raised when an IR document is malformed."""

    pass


BINARY_OPS = {"+", "-", "*", "/", "%", "&&", "||", "^", "&", "|", "<<", ">>", "==", "<", "<=", "!=", ">=", ">"}
UNARY_OPS = {"!", "-", "*"}
ASSIGN_OPS = {"+=", "-=", "*=", "/=", "%=", "^=", "&=", "|=", "<<=", ">>="}

EXPR_KINDS = {
    "path", "field", "method_call", "call", "binary", "unary", "addr_of", "lit", "block", "if", "match", "loop",
    "let", "closure", "struct", "tuple", "array", "index", "cast", "assign", "assign_op", "return", "break",
    "continue", "macro", "unknown",
}  # fmt: skip


class IRBuilder:
    """
    Builds HIR from a parsed IR document.

    Usage:
        builder = IRBuilder("lib.json")
        crate = builder.build_crate(data)
    """

    def __init__(self, doc_path: str):
        self.doc_path = doc_path
        self.file = doc_path
        self._expr_counter = 0

    def _next_expr_id(self) -> str:
        self._expr_counter += 1
        return f"expr_{self._expr_counter}"

    def _fail(self, msg: str) -> IRLoadError:
        return IRLoadError(f"{self.doc_path}: {msg}")

    def _require(self, node: Dict[str, Any], key: str, what: str) -> Any:
        if not isinstance(node, dict):
            raise self._fail(f"{what} must be an object, got {node!r}")
        if key not in node or node[key] is None:
            raise self._fail(f"{what} is missing required field '{key}'")
        return node[key]

    def _require_str(self, node: Dict[str, Any], key: str, what: str) -> str:
        value = self._require(node, key, what)
        if not isinstance(value, str):
            raise self._fail(f"{what}: '{key}' must be a string, got {value!r}")
        return value

    def _require_int(self, node: Dict[str, Any], key: str, what: str) -> int:
        value = self._require(node, key, what)
        if not isinstance(value, int) or isinstance(value, bool):
            raise self._fail(f"{what}: '{key}' must be an integer, got {value!r}")
        return value

    def _opt_str(self, node: Dict[str, Any], key: str) -> Optional[str]:
        value = node.get(key)
        if value is not None and not isinstance(value, str):
            raise self._fail(f"'{key}' must be a string, got {value!r}")
        return value

    def _list(self, node: Dict[str, Any], key: str) -> List[Any]:
        values = node.get(key, [])
        if not isinstance(values, list):
            raise self._fail(f"'{key}' must be a list, got {values!r}")
        return values

    def _span(self, node: Dict[str, Any]) -> Span:
        raw = node.get("span")
        expansion = bool(node.get("expansion", False))
        if raw is None:
            return Span(self.file, 0, 0, from_expansion=expansion)
        if not isinstance(raw, list) or len(raw) not in (2, 4) or not all(isinstance(x, int) for x in raw):
            raise self._fail(f"invalid span {raw!r} (expected [line, col] or [line, col, end_line, end_col])")
        if len(raw) == 2:
            return Span(self.file, raw[0], raw[1], raw[0], raw[1], expansion)
        return Span(self.file, raw[0], raw[1], raw[2], raw[3], expansion)

    # =========================================================================
    # Crate, functions and bodies
    # =========================================================================

    def build_crate(self, data: Dict[str, Any]) -> Crate:
        if not isinstance(data, dict):
            raise self._fail("document root must be an object")
        name = self._require_str(data, "crate", "document")
        file = data.get("file")
        if file is not None and not isinstance(file, str):
            raise self._fail(f"document: 'file' must be a string, got {file!r}")
        self.file = file or self.doc_path

        bodies: Dict[int, Body] = {}
        for raw_body in self._list(data, "bodies"):
            body = self._build_body(raw_body)
            if body.id in bodies:
                raise self._fail(f"duplicate body id {body.id}")
            bodies[body.id] = body

        functions: List[Function] = []
        for raw_fn in self._list(data, "functions"):
            fn_name = self._require_str(raw_fn, "name", "function")
            body_id = self._require_int(raw_fn, "body", f"function '{fn_name}'")
            if body_id not in bodies:
                raise self._fail(f"function '{fn_name}' refers to unknown body {body_id}")
            functions.append(
                Function(
                    name=fn_name,
                    span=self._span(raw_fn),
                    body=bodies[body_id],
                    is_closure=bool(raw_fn.get("closure", False)),
                )
            )

        debug(f"Loaded {len(functions)} function(s), {len(bodies)} body(ies) from {self.doc_path}")
        return Crate(name=name, file=self.file, functions=functions, bodies=bodies)

    def _build_body(self, node: Dict[str, Any]) -> Body:
        body_id = self._require_int(node, "id", "body")
        params = [self.build_pat(p) for p in self._list(node, "params")]
        value = self.build_expr(self._require(node, "value", f"body {body_id}"))
        return Body(id=body_id, params=params, value=value)

    # =========================================================================
    # Patterns and statements
    # =========================================================================

    def build_pat(self, node: Any) -> Pat:
        if isinstance(node, str):
            if node == "_":
                return Pat(kind="wild")
            return Pat(kind="binding", name=node)
        if not isinstance(node, dict):
            raise self._fail(f"invalid pattern {node!r}")
        return Pat(
            kind=self._require_str(node, "kind", "pattern"),
            name=node.get("name"),
            path=node.get("path"),
            res=node.get("res"),
            subpats=[self.build_pat(p) for p in self._list(node, "subpats")],
            mutable=bool(node.get("mutable", False)),
        )

    def build_stmt(self, node: Dict[str, Any]) -> Stmt:
        if not isinstance(node, dict):
            raise self._fail(f"invalid statement {node!r}")
        kind = self._require_str(node, "stmt", "statement")
        span = self._span(node)
        if kind == "let":
            els = node.get("else")
            els_block = self.build_expr(els) if els is not None else None
            if els_block is not None and not isinstance(els_block, Block):
                raise self._fail("let-else branch must be a block")
            return LetStmt(
                span=span,
                pat=self.build_pat(self._require(node, "pat", "let statement")),
                type_ann=node.get("type"),
                init=self._opt_expr(node, "init"),
                els=els_block,
            )
        elif kind in ("expr", "semi"):
            return ExprStmt(span=span, expr=self.build_expr(self._require(node, "expr", "statement")), semi=kind == "semi")
        elif kind == "item":
            return ItemStmt(span=span, item=self._require_str(node, "item", "item statement"))
        raise self._fail(f"unknown statement kind '{kind}'")

    # =========================================================================
    # Expressions
    # =========================================================================

    def _opt_expr(self, node: Dict[str, Any], key: str) -> Optional[Expr]:
        value = node.get(key)
        return self.build_expr(value) if value is not None else None

    def _exprs(self, node: Dict[str, Any], key: str) -> List[Expr]:
        return [self.build_expr(v) for v in self._list(node, key)]

    def build_expr(self, node: Any) -> Expr:
        if not isinstance(node, dict):
            raise self._fail(f"invalid expression {node!r}")
        kind = self._require_str(node, "kind", "expression")
        if kind not in EXPR_KINDS:
            raise self._fail(f"unknown expression kind '{kind}'")
        builder = getattr(self, f"_build_{kind}")
        common = {
            "id": self._next_expr_id(),
            "span": self._span(node),
            "ty": self._opt_str(node, "ty"),
            "adjusted_ty": self._opt_str(node, "adjusted_ty"),
        }
        return builder(node, common)

    def _build_path(self, node, common) -> Path:
        segments = self._require(node, "segments", "path expression")
        if isinstance(segments, str):
            segments = segments.split("::")
        if not isinstance(segments, list) or not all(isinstance(s, str) for s in segments):
            raise self._fail(f"path expression: 'segments' must be a string or a list of strings, got {segments!r}")
        return Path(**common, segments=segments, res=self._opt_str(node, "res"), qself=self._opt_str(node, "qself"))

    def _build_field(self, node, common) -> Field:
        return Field(
            **common,
            base=self.build_expr(self._require(node, "base", "field expression")),
            name=self._require_str(node, "name", "field expression"),
        )

    def _build_method_call(self, node, common) -> MethodCall:
        return MethodCall(
            **common,
            method=self._require_str(node, "method", "method call"),
            receiver=self.build_expr(self._require(node, "receiver", "method call")),
            args=self._exprs(node, "args"),
            def_path=self._opt_str(node, "def_path"),
            type_args=list(self._list(node, "type_args")),
        )

    def _build_call(self, node, common) -> Call:
        return Call(**common, func=self.build_expr(self._require(node, "func", "call")), args=self._exprs(node, "args"))

    def _build_binary(self, node, common) -> Binary:
        op = self._require_str(node, "op", "binary expression")
        if op not in BINARY_OPS:
            raise self._fail(f"unknown binary operator '{op}'")
        return Binary(
            **common,
            op=op,
            lhs=self.build_expr(self._require(node, "lhs", "binary expression")),
            rhs=self.build_expr(self._require(node, "rhs", "binary expression")),
        )

    def _build_unary(self, node, common) -> Unary:
        op = self._require_str(node, "op", "unary expression")
        if op not in UNARY_OPS:
            raise self._fail(f"unknown unary operator '{op}'")
        return Unary(**common, op=op, operand=self.build_expr(self._require(node, "operand", "unary expression")))

    def _build_addr_of(self, node, common) -> AddrOf:
        return AddrOf(
            **common,
            inner=self.build_expr(self._require(node, "inner", "borrow")),
            mutable=bool(node.get("mutable", False)),
        )

    def _build_lit(self, node, common) -> Lit:
        return Lit(**common, value=node.get("value"), kind=node.get("lit_kind", "int"))

    def _build_block(self, node, common) -> Block:
        return Block(
            **common,
            stmts=[self.build_stmt(s) for s in self._list(node, "stmts")],
            expr=self._opt_expr(node, "expr"),
            label=node.get("label"),
        )

    def _build_if(self, node, common) -> If:
        return If(
            **common,
            cond=self.build_expr(self._require(node, "cond", "if expression")),
            then=self.build_expr(self._require(node, "then", "if expression")),
            els=self._opt_expr(node, "else"),
        )

    def _build_match(self, node, common) -> Match:
        arms = []
        for raw_arm in self._list(node, "arms"):
            arms.append(
                Arm(
                    pat=self.build_pat(self._require(raw_arm, "pat", "match arm")),
                    guard=self._opt_expr(raw_arm, "guard"),
                    body=self.build_expr(self._require(raw_arm, "body", "match arm")),
                )
            )
        return Match(
            **common,
            scrutinee=self.build_expr(self._require(node, "scrutinee", "match expression")),
            arms=arms,
            source=node.get("source", "normal"),
        )

    def _build_loop(self, node, common) -> Loop:
        body = self.build_expr(self._require(node, "body", "loop"))
        if not isinstance(body, Block):
            raise self._fail("loop body must be a block")
        return Loop(**common, body=body, label=node.get("label"), source=node.get("source", "loop"))

    def _build_let(self, node, common) -> Let:
        return Let(
            **common,
            pat=self.build_pat(self._require(node, "pat", "let expression")),
            init=self.build_expr(self._require(node, "init", "let expression")),
            type_ann=node.get("type"),
        )

    def _build_closure(self, node, common) -> Closure:
        body_id = self._require_int(node, "body", "closure")
        return Closure(
            **common,
            body_id=body_id,
            params=[self.build_pat(p) for p in self._list(node, "params")],
            capture_by_move=bool(node.get("move", False)),
        )

    def _build_struct(self, node, common) -> StructLit:
        fields = []
        for raw_field in self._list(node, "fields"):
            if isinstance(raw_field, list) and len(raw_field) == 2:
                name, value = raw_field
            elif isinstance(raw_field, dict):
                name = self._require_str(raw_field, "name", "struct field")
                value = self._require(raw_field, "expr", "struct field")
            else:
                raise self._fail(f"invalid struct field {raw_field!r}")
            fields.append((name, self.build_expr(value)))
        return StructLit(
            **common,
            path=self._require_str(node, "path", "struct literal"),
            fields=fields,
            base=self._opt_expr(node, "base"),
        )

    def _build_tuple(self, node, common) -> Tup:
        return Tup(**common, elements=self._exprs(node, "elements"))

    def _build_array(self, node, common) -> Array:
        return Array(**common, elements=self._exprs(node, "elements"))

    def _build_index(self, node, common) -> Index:
        return Index(
            **common,
            base=self.build_expr(self._require(node, "base", "index expression")),
            index=self.build_expr(self._require(node, "index", "index expression")),
        )

    def _build_cast(self, node, common) -> Cast:
        return Cast(
            **common,
            inner=self.build_expr(self._require(node, "expr", "cast")),
            target_type=self._require_str(node, "type", "cast"),
        )

    def _build_assign(self, node, common) -> Assign:
        return Assign(
            **common,
            lhs=self.build_expr(self._require(node, "lhs", "assignment")),
            rhs=self.build_expr(self._require(node, "rhs", "assignment")),
        )

    def _build_assign_op(self, node, common) -> AssignOp:
        op = self._require_str(node, "op", "compound assignment")
        if op not in ASSIGN_OPS:
            raise self._fail(f"unknown compound assignment operator '{op}'")
        return AssignOp(
            **common,
            op=op,
            lhs=self.build_expr(self._require(node, "lhs", "compound assignment")),
            rhs=self.build_expr(self._require(node, "rhs", "compound assignment")),
        )

    def _build_return(self, node, common) -> Return:
        return Return(**common, value=self._opt_expr(node, "value"))

    def _build_break(self, node, common) -> Break:
        return Break(**common, label=node.get("label"), value=self._opt_expr(node, "value"))

    def _build_continue(self, node, common) -> Continue:
        return Continue(**common, label=node.get("label"))

    def _build_macro(self, node, common) -> MacroCall:
        return MacroCall(**common, name=self._require_str(node, "name", "macro call"), args=self._exprs(node, "args"))

    def _build_unknown(self, node, common) -> Unknown:
        return Unknown(**common, raw=node.get("raw", ""))


def build_crate(data: Dict[str, Any], doc_path: str = "<memory>") -> Crate:
    """Build a Crate from an already parsed IR document."""
    try:
        return IRBuilder(doc_path).build_crate(data)
    except RecursionError as e:
        raise IRLoadError(f"{doc_path}: document is nested too deeply") from e


def load_crate(path: str) -> Crate:
    """Read and build an IR document from disk."""
    try:
        text = FsPath(path).read_text(encoding="utf-8")
    except OSError as e:
        raise IRLoadError(f"{path}: cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise IRLoadError(f"{path}: not valid UTF-8 at byte {e.start}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise IRLoadError(f"{path}: invalid JSON at line {e.lineno}: {e.msg}") from e
    except RecursionError as e:
        raise IRLoadError(f"{path}: document is nested too deeply") from e
    return build_crate(data, path)
