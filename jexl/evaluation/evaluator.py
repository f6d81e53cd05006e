"""Core evaluator for JEXL.

Walks a macro-expanded expression tree against an Environment. Literals and
variable references are handled inline, calls go through the application
engine, and every other node type is dispatched through SPECIAL_FORMS.
"""

from __future__ import annotations

from jexl import JexlValue
from jexl.evaluation.apply import apply
from jexl.evaluation.special_forms import SPECIAL_FORMS
from jexl.types.environment import Environment
from jexl.types.errors import UnsupportedOperation
from jexl.types.expression import Call, Expression, Literal, VarRef


def evaluate(expr: Expression, env: Environment) -> JexlValue:
    match expr:
        case Literal(value=value):
            return value
        case VarRef(name=name):
            return env.get_var(name)
        case Call(target=target, args=args):
            # Arguments are evaluated left to right before the target is resolved
            values = [evaluate(arg, env) for arg in args]
            fn = env.get_function(target)
            return apply(fn, values, env, evaluate)

    handler = SPECIAL_FORMS.get(type(expr))
    if handler is None:
        raise UnsupportedOperation(f"Cannot evaluate {expr!r}")
    return handler(expr, env, evaluate)
