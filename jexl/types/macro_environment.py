from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from jexl import JsonValue
from jexl.config import get_max_expansion_depth
from jexl.reader.grammar import pointer, read_expression, to_json
from jexl.types.errors import ArityMismatch, GrammarViolation, RecursionDepthExceeded
from jexl.types.expression import (
    Call,
    Expression,
    MacroDef,
    SpecialForm,
    VarRef,
    map_subexpressions,
    param_names,
)

logger = logging.getLogger(__name__)


# Expansion is plain syntactic substitution: arguments are bound unevaluated to
# the macro's parameter names and spliced into the body wherever a {"ref": name}
# appears. There is no renaming, so an argument that mentions a name also used
# inside the macro body is captured by it.

class MacroEnvironment:
    """
    Macro environment mapping macro names to their MacroDef.

    Features:
    - Positional invocation: {"m": [arg, ...]}
    - Keyword invocation: {"m": {"param": arg, ...}}
    - Recursive re-expansion of the substituted body (top-down)
    - Bounded expansion depth
    """

    def __init__(self, max_depth: int | None = None):
        self.macros: dict[str, MacroDef] = {}
        self.max_depth: int = max_depth if max_depth is not None else get_max_expansion_depth()

    def define_macro(self, macro: MacroDef) -> None:
        if macro.name in self.macros:
            logger.debug("Redefining macro %s", macro.name)
        self.macros[macro.name] = macro

    def is_macro(self, name: str) -> bool:
        return name in self.macros

    def collect(self, expressions: Iterable[Expression]) -> list[Expression]:
        """Register top-level macro definitions and return the remaining expressions."""
        remaining: list[Expression] = []
        for expr in expressions:
            if isinstance(expr, MacroDef):
                self.define_macro(expr)
                logger.debug("Collected macro %s(%s)", expr.name, ", ".join(param_names(expr.params)))
            else:
                remaining.append(expr)
        return remaining

    def bind_arguments(self, form: Call | SpecialForm) -> dict[str, Expression]:
        """Map each parameter of the invoked macro to its unevaluated argument.

        Expressions carry no source position, so a GrammarViolation raised for
        a record-style argument has a path relative to the invocation itself
        (`/<macro>/<param>`), wherever the invocation sits in the program.
        """
        macro = self.macros[form.target]
        names = param_names(macro.params)

        if isinstance(form, Call):
            if len(form.args) != len(names):
                raise ArityMismatch(macro.name, len(names), len(form.args))
            return dict(zip(names, form.args))

        fields: Mapping = form.fields
        base = pointer("", form.target)
        for key in fields:
            if key not in names:
                raise GrammarViolation(pointer(base, key), f"macro '{macro.name}' has no parameter '{key}'", fields[key])
        for name in names:
            if name not in fields:
                raise GrammarViolation(base, f"macro '{macro.name}' is missing argument '{name}'", dict(fields))
        return {name: read_expression(fields[name], pointer(base, name)) for name in names}

    # Single-step head expansion
    def expand_1(self, expr: Expression) -> Expression:
        """Expand `expr` once if it is a macro invocation, else return it unchanged."""
        if isinstance(expr, (Call, SpecialForm)) and self.is_macro(expr.target):
            macro = self.macros[expr.target]
            return substitute(macro.body, self.bind_arguments(expr))
        return expr

    # Full expansion
    def expand(self, expr: Expression, depth: int = 0) -> Expression:
        """Eliminate every invocation of a known macro from `expr`."""
        if depth > self.max_depth:
            raise RecursionDepthExceeded(self.max_depth, "macro expansion")

        if isinstance(expr, (Call, SpecialForm)) and self.is_macro(expr.target):
            logger.debug("Expanding macro %s (depth %d)", expr.target, depth)
            return self.expand(self.expand_1(expr), depth + 1)

        return map_subexpressions(expr, lambda e: self.expand(e, depth))

    def expand_all(self, expressions: Iterable[Expression]) -> list[Expression]:
        return [self.expand(e) for e in expressions]


def substitute(expr: Expression, bindings: Mapping[str, Expression]) -> Expression:
    """Replace every VarRef bound in `bindings` with its argument expression.

    Substituted arguments are spliced in as-is and not substituted again.
    Record-style invocations are substituted inside their raw fields.
    """
    if isinstance(expr, VarRef) and expr.name in bindings:
        return bindings[expr.name]
    if isinstance(expr, SpecialForm):
        return replace(expr, fields={k: _substitute_json(v, bindings) for k, v in expr.fields.items()})
    return map_subexpressions(expr, lambda e: substitute(e, bindings))


def _substitute_json(value: JsonValue, bindings: Mapping[str, Expression]) -> JsonValue:
    if isinstance(value, dict):
        if len(value) == 1 and isinstance(value.get("ref"), str) and value["ref"] in bindings:
            return to_json(bindings[value["ref"]])
        return {k: _substitute_json(v, bindings) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_json(v, bindings) for v in value]
    return value
