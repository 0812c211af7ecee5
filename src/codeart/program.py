import json
import math
from dataclasses import dataclass, field
from typing import Union

INDENT = "  "


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class BinOp:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Fn:
    name: str
    args: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class Str:
    value: str


Expr = Union[int, float, Var, BinOp, Fn, Str]


def add(left: Expr, right: Expr) -> BinOp:
    return BinOp("+", left, right)


def sub(left: Expr, right: Expr) -> BinOp:
    return BinOp("-", left, right)


def mul(left: Expr, right: Expr) -> BinOp:
    return BinOp("*", left, right)


def div(left: Expr, right: Expr) -> BinOp:
    return BinOp("/", left, right)


def mod(left: Expr, right: Expr) -> BinOp:
    return BinOp("%", left, right)


def sin(arg: Expr) -> Fn:
    return Fn("sin", (arg,))


def cos(arg: Expr) -> Fn:
    return Fn("cos", (arg,))


@dataclass(frozen=True)
class Call:
    """A drawing API call used as a statement, e.g. ``rect(0, 0, 4, 4);``."""

    name: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Declare:
    name: str
    value: Expr


@dataclass(frozen=True)
class Increment:
    name: str
    amount: Expr


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Function:
    name: str
    params: tuple[str, ...]
    body: tuple["Statement", ...]


Statement = Union[Call, Declare, Increment, Return, Function]


@dataclass
class Program:
    """A complete drawing program.

    Rendered as global declarations, ``setup()``, then ``draw()`` holding
    the prologue, one group of statements per accepted sample and the
    epilogue, followed by helper functions.
    """

    globals: list[Statement] = field(default_factory=list)
    setup: list[Statement] = field(default_factory=list)
    prologue: list[Statement] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)
    epilogue: list[Statement] = field(default_factory=list)
    helpers: list[Function] = field(default_factory=list)


def format_number(value: int | float) -> str:
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric literals")
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot render non-finite number {value!r}")
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def render_expr(expr: Expr) -> str:
    if isinstance(expr, (int, float)):
        return format_number(expr)
    if isinstance(expr, Var):
        return expr.name
    if isinstance(expr, Str):
        return json.dumps(expr.value)
    if isinstance(expr, Fn):
        return f"{expr.name}({', '.join(render_expr(a) for a in expr.args)})"
    if isinstance(expr, BinOp):
        return f"{_operand(expr.left)} {expr.op} {_operand(expr.right)}"
    raise TypeError(f"Unknown expression node: {expr!r}")


def _operand(expr: Expr) -> str:
    text = render_expr(expr)
    if isinstance(expr, BinOp) or (isinstance(expr, (int, float)) and expr < 0):
        return f"({text})"
    return text


def render_statement(statement: Statement, depth: int = 0) -> list[str]:
    pad = INDENT * depth
    if isinstance(statement, Call):
        return [f"{pad}{statement.name}({', '.join(render_expr(a) for a in statement.args)});"]
    if isinstance(statement, Declare):
        return [f"{pad}let {statement.name} = {render_expr(statement.value)};"]
    if isinstance(statement, Increment):
        return [f"{pad}{statement.name} += {render_expr(statement.amount)};"]
    if isinstance(statement, Return):
        return [f"{pad}return {render_expr(statement.value)};"]
    if isinstance(statement, Function):
        return _render_block(f"function {statement.name}({', '.join(statement.params)})", statement.body, depth)
    raise TypeError(f"Unknown statement: {statement!r}")


def _render_block(header: str, body, depth: int) -> list[str]:
    pad = INDENT * depth
    lines = [f"{pad}{header} {{"]
    for statement in body:
        lines.extend(render_statement(statement, depth + 1))
    lines.append(f"{pad}}}")
    return lines


def render_preamble(program: Program) -> str:
    lines = []
    for statement in program.globals:
        lines.extend(render_statement(statement))
    if program.globals:
        lines.append("")
    lines.extend(_render_block("function setup()", program.setup, 0))
    lines.append("")
    lines.append("function draw() {")
    for statement in program.prologue:
        lines.extend(render_statement(statement, 1))
    return "\n".join(lines) + "\n"


def render_body(program: Program) -> str:
    lines = []
    for statement in program.statements:
        lines.extend(render_statement(statement, 1))
    return "".join(line + "\n" for line in lines)


def render_epilogue(program: Program) -> str:
    lines = []
    for statement in program.epilogue:
        lines.extend(render_statement(statement, 1))
    lines.append("}")
    for helper in program.helpers:
        lines.append("")
        lines.extend(render_statement(helper))
    return "\n".join(lines) + "\n"


def render(program: Program) -> str:
    """Serialize a program to source text: preamble, body, epilogue."""
    return render_preamble(program) + render_body(program) + render_epilogue(program)
