"""Expression tree for JEXL programs.

Every reserved JSON shape has its own frozen dataclass, so the evaluator and
the macro expander dispatch on node type instead of inspecting object keys.
Trees are never mutated: rewriting passes build new nodes with
`dataclasses.replace` (see `map_subexpressions`).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional, Union

from jexl import JsonValue


@dataclass(frozen=True)
class Literal:
    value: str | int | float | bool | None


@dataclass(frozen=True)
class VarRef:
    name: str


@dataclass(frozen=True)
class Let:
    name: str
    value: Expression


@dataclass(frozen=True)
class Do:
    body: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class If:
    condition: Expression
    then_branch: Optional[Expression] = None
    else_branch: Optional[Expression] = None


@dataclass(frozen=True)
class Param:
    """A formal parameter; `type_name` is advisory and never checked at runtime."""
    name: str
    type_name: Optional[str] = None


@dataclass(frozen=True)
class FunctionDef:
    name: str
    params: tuple[Param, ...]
    body: Expression


@dataclass(frozen=True)
class MacroDef:
    name: str
    params: tuple[Param, ...]
    body: Expression


@dataclass(frozen=True)
class Import:
    module: str
    symbols: tuple[str, ...]


@dataclass(frozen=True)
class Call:
    target: str
    args: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class SpecialForm:
    """Single-key object mapped to a record, e.g. a keyword-style macro invocation.

    Field values stay raw JSON until a macro binds them, because the record
    is free-form and only the macro knows which entries are expressions.
    """
    target: str
    fields: Mapping[str, JsonValue] = field(default_factory=dict)


Expression = Union[
    Literal, VarRef, Let, Do, If, FunctionDef, MacroDef, Import, Call, SpecialForm
]


@dataclass(frozen=True)
class Module:
    name: str
    exports: tuple[Expression, ...]
    types: Mapping[str, JsonValue] = field(default_factory=dict)


@dataclass(frozen=True)
class Program:
    version: str
    name: str
    body: tuple[Expression, ...]
    types: Mapping[str, JsonValue] = field(default_factory=dict)
    modules: Mapping[str, Module] = field(default_factory=dict)


def map_subexpressions(expr: Expression, fn: Callable[[Expression], Expression]) -> Expression:
    """Rebuild `expr` with `fn` applied to each direct sub-expression.

    Scalar fields (names, params, import symbols) and SpecialForm records are
    left untouched. Leaves are returned as-is.
    """
    match expr:
        case Let(value=value):
            return replace(expr, value=fn(value))
        case Do(body=body):
            return replace(expr, body=tuple(fn(e) for e in body))
        case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
            return replace(
                expr,
                condition=fn(condition),
                then_branch=None if then_branch is None else fn(then_branch),
                else_branch=None if else_branch is None else fn(else_branch),
            )
        case FunctionDef(body=body) | MacroDef(body=body):
            return replace(expr, body=fn(body))
        case Call(args=args):
            return replace(expr, args=tuple(fn(a) for a in args))
        case _:
            return expr


def param_names(params: tuple[Param, ...]) -> list[str]:
    return [p.name for p in params]


def describe(value: Any) -> str:
    """Short human-readable description of a JSON value, used in error messages."""
    if isinstance(value, dict):
        return f"object with keys {sorted(value)}"
    if isinstance(value, list):
        return f"array of length {len(value)}"
    if isinstance(value, bool):
        return "boolean"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__
