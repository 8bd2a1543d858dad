"""
HIR - typed expression tree of a Rust function body.

This IR mirrors the shape of rustc's HIR closely enough for lints that reason
about expressions:
- Every expression carries the type recorded for it by the type checker
  (`ty`) and, when the checker applied auto-ref/auto-deref, the adjusted type
  (`adjusted_ty`)
- Paths carry their resolution (`res`) so that two `a`s bound by different
  `let`s are distinguishable
- Method calls carry the fully qualified path of the method they resolve to

Closures and nested items are separate bodies. They are referenced by id and
are never inlined into the body that contains them.

Types and paths are plain strings: "anchor_lang::accounts::program::Program<'info, System>".
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Span:
    """Source range (1-indexed). `from_expansion` marks macro-generated code."""

    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0
    from_expansion: bool = False

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


# =============================================================================
# Patterns
# =============================================================================


@dataclass
class Pat:
    """
    Pattern: `x`, `mut x`, `_`, `Some(x)`, `Foo { a, .. }`, `(a, b)`, literal.

    kind is one of "binding", "wild", "tuple", "tuple_struct", "struct", "path", "lit", "ref", "or", "other"
    """

    kind: str
    name: Optional[str] = None  # binding name or literal text
    path: Optional[str] = None  # resolved path for struct/tuple_struct/path patterns
    res: Optional[str] = None  # binding resolution for "binding" patterns
    subpats: List["Pat"] = field(default_factory=list)
    mutable: bool = False


# =============================================================================
# Expressions
# =============================================================================


@dataclass
class Expr:
    """Base expression. `id` is unique within a body."""

    id: str
    span: Span
    ty: Optional[str]  # None when the type could not be resolved
    adjusted_ty: Optional[str] = None

    @property
    def ty_adjusted(self) -> Optional[str]:
        """Type after adjustments, falling back to the unadjusted type."""
        return self.adjusted_ty if self.adjusted_ty is not None else self.ty


@dataclass
class Path(Expr):
    """
    Path expression: `x`, `ctx`, `spl_token::ID`, `<T as Trait>::CONST`

    res is the resolution: "local:<n>" for local bindings, a def path otherwise.
    qself is the qualified self type (`<T as Trait>::` form), None for plain paths.
    """

    segments: List[str] = field(default_factory=list)
    res: Optional[str] = None
    qself: Optional[str] = None


@dataclass
class Field(Expr):
    """Field access: `ctx.accounts`, `token.owner`"""

    base: Optional[Expr] = None
    name: str = ""


@dataclass
class MethodCall(Expr):
    """
    Method call: `recv.method::<T>(a, b)`

    def_path is the resolved method: "anchor_lang::Key::key". None when unresolved.
    """

    method: str = ""
    receiver: Optional[Expr] = None
    args: List[Expr] = field(default_factory=list)
    def_path: Optional[str] = None
    type_args: List[str] = field(default_factory=list)


@dataclass
class Call(Expr):
    """Call of a function value: `foo(a)`, `Pubkey::new(b)`"""

    func: Optional[Expr] = None
    args: List[Expr] = field(default_factory=list)


@dataclass
class Binary(Expr):
    """Binary operation. op is the Rust token: "==", "!=", "&&", "+", ..."""

    op: str = ""
    lhs: Optional[Expr] = None
    rhs: Optional[Expr] = None


@dataclass
class Unary(Expr):
    """Unary operation: `!x` (op "!"), `-x` (op "-"), `*x` (op "*")"""

    op: str = ""
    operand: Optional[Expr] = None


@dataclass
class AddrOf(Expr):
    """Borrow: `&x`, `&mut x`"""

    inner: Optional[Expr] = None
    mutable: bool = False


@dataclass
class Lit(Expr):
    """Literal: `42`, `"hi"`, `true`, `b"seed"`. kind is "int", "str", "bool", "bytes", "char", "float"."""

    value: Any = None
    kind: str = "int"


@dataclass
class Block(Expr):
    """Block: `{ stmt; stmt; expr }`"""

    stmts: List["Stmt"] = field(default_factory=list)
    expr: Optional[Expr] = None  # trailing expression, if any
    label: Optional[str] = None


@dataclass
class If(Expr):
    """`if cond { then } else { els }`"""

    cond: Optional[Expr] = None
    then: Optional[Expr] = None
    els: Optional[Expr] = None


@dataclass
class Arm:
    pat: Pat
    guard: Optional[Expr]
    body: Expr


@dataclass
class Match(Expr):
    """`match scrutinee { arms }`. Desugared `?` also lowers to a Match."""

    scrutinee: Optional[Expr] = None
    arms: List[Arm] = field(default_factory=list)
    source: str = "normal"  # "normal", "try", "for_loop"


@dataclass
class Loop(Expr):
    """`loop { body }`. `while` and `for` lower to a Loop."""

    body: Optional[Block] = None
    label: Optional[str] = None
    source: str = "loop"  # "loop", "while", "for"


@dataclass
class Let(Expr):
    """Let expression inside a condition: `if let Some(x) = init`"""

    pat: Optional[Pat] = None
    init: Optional[Expr] = None
    type_ann: Optional[str] = None


@dataclass
class Closure(Expr):
    """Closure `|a| body`. The body is a separate analysis unit, referenced by id."""

    body_id: int = -1
    params: List[Pat] = field(default_factory=list)
    capture_by_move: bool = False


@dataclass
class StructLit(Expr):
    """Struct literal: `Foo { a: x, ..base }`"""

    path: str = ""
    fields: List[Tuple[str, Expr]] = field(default_factory=list)
    base: Optional[Expr] = None


@dataclass
class Tup(Expr):
    """Tuple: `(a, b)`"""

    elements: List[Expr] = field(default_factory=list)


@dataclass
class Array(Expr):
    """Array: `[a, b]`"""

    elements: List[Expr] = field(default_factory=list)


@dataclass
class Index(Expr):
    """Index: `accounts[0]`"""

    base: Optional[Expr] = None
    index: Optional[Expr] = None


@dataclass
class Cast(Expr):
    """Cast: `x as u64`"""

    inner: Optional[Expr] = None
    target_type: str = ""


@dataclass
class Assign(Expr):
    """Assignment: `a = b`"""

    lhs: Optional[Expr] = None
    rhs: Optional[Expr] = None


@dataclass
class AssignOp(Expr):
    """Compound assignment: `a += b` (op "+=")"""

    op: str = ""
    lhs: Optional[Expr] = None
    rhs: Optional[Expr] = None


@dataclass
class Return(Expr):
    """`return`, `return value`"""

    value: Optional[Expr] = None


@dataclass
class Break(Expr):
    """`break`, `break 'label value`"""

    label: Optional[str] = None
    value: Optional[Expr] = None


@dataclass
class Continue(Expr):
    """`continue`"""

    label: Optional[str] = None


@dataclass
class MacroCall(Expr):
    """
    Macro invocation the front-end did not expand: `msg!(...)`, `require!(...)`

    args holds the argument expressions it could still type.
    """

    name: str = ""
    args: List[Expr] = field(default_factory=list)


@dataclass
class Unknown(Expr):
    """Placeholder for expressions the front-end could not lower."""

    raw: str = ""


# =============================================================================
# Statements
# =============================================================================


@dataclass
class Stmt:
    span: Span


@dataclass
class LetStmt(Stmt):
    """`let pat: ty = init else { els };`"""

    pat: Pat
    type_ann: Optional[str] = None
    init: Optional[Expr] = None
    els: Optional[Block] = None


@dataclass
class ExprStmt(Stmt):
    """Expression statement. semi is True for `expr;`"""

    expr: Expr
    semi: bool = True


@dataclass
class ItemStmt(Stmt):
    """Nested item (`fn`, `const`, ...). Its body, if any, is analyzed separately."""

    item: str


# =============================================================================
# Bodies, functions, crates
# =============================================================================


@dataclass
class Body:
    id: int
    params: List[Pat]
    value: Expr


@dataclass
class Function:
    """
    A function (or closure) definition and its body.

    This is the unit of analysis - each lint checks each function independently.
    """

    name: str  # fully qualified: "crate::module::func"
    span: Span
    body: Body
    is_closure: bool = False


@dataclass
class Crate:
    """One IR document: a crate's (or a file's) functions and all their bodies."""

    name: str
    file: str
    functions: List[Function]
    bodies: Dict[int, Body] = field(default_factory=dict)


# =============================================================================
# Helpers
# =============================================================================


def is_local_path(expr: Expr) -> bool:
    """True for a bare, unqualified single-segment path: `x`, `account`."""
    return isinstance(expr, Path) and expr.qself is None and len(expr.segments) == 1


def path_text(expr: Path) -> str:
    return "::".join(expr.segments)


def expr_text(expr: Optional[Expr]) -> str:
    """
    Approximate Rust rendering of an expression, used for messages and dumps.

    Not used for comparisons.
    """
    if expr is None:
        return ""
    if isinstance(expr, Path):
        text = path_text(expr)
        return f"<{expr.qself}>::{text}" if expr.qself else text
    elif isinstance(expr, Field):
        return f"{expr_text(expr.base)}.{expr.name}"
    elif isinstance(expr, MethodCall):
        args = ", ".join(expr_text(a) for a in expr.args)
        return f"{expr_text(expr.receiver)}.{expr.method}({args})"
    elif isinstance(expr, Call):
        args = ", ".join(expr_text(a) for a in expr.args)
        return f"{expr_text(expr.func)}({args})"
    elif isinstance(expr, Binary):
        return f"{expr_text(expr.lhs)} {expr.op} {expr_text(expr.rhs)}"
    elif isinstance(expr, Unary):
        return f"{expr.op}{expr_text(expr.operand)}"
    elif isinstance(expr, AddrOf):
        return f"&{'mut ' if expr.mutable else ''}{expr_text(expr.inner)}"
    elif isinstance(expr, Lit):
        return repr(expr.value) if expr.kind == "str" else str(expr.value)
    elif isinstance(expr, MacroCall):
        return f"{expr.name}!({', '.join(expr_text(a) for a in expr.args)})"
    elif isinstance(expr, Index):
        return f"{expr_text(expr.base)}[{expr_text(expr.index)}]"
    elif isinstance(expr, Cast):
        return f"{expr_text(expr.inner)} as {expr.target_type}"
    elif isinstance(expr, Tup):
        return f"({', '.join(expr_text(e) for e in expr.elements)})"
    elif isinstance(expr, Array):
        return f"[{', '.join(expr_text(e) for e in expr.elements)}]"
    elif isinstance(expr, Unknown):
        return expr.raw
    return f"<{type(expr).__name__.lower().rstrip('_')}>"
