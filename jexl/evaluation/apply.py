"""Application engine for JEXL.

Centralizes function application so the evaluator, special forms, and
builtin helpers share one set of rules:
- Builtins are Python callables invoked as fn(env, args).
- User functions get a fresh frame, child of their defining environment,
  with parameters bound positionally.
- Nesting of user-function activations is bounded by the root frame's
  `max_call_depth`.
"""

from __future__ import annotations

from jexl import EvaluatorFn, JexlValue
from jexl.types.environment import Environment, FunctionValue
from jexl.types.errors import RecursionDepthExceeded, UnsupportedOperation
from jexl.types.function import UserFunction


def apply_function(
    fn: UserFunction,
    args: list[JexlValue],
    caller_env: Environment,
    evaluate_fn: EvaluatorFn,
) -> JexlValue:
    """Apply a user function.

    Raises ArityMismatch when the argument count differs from the parameter
    count, and RecursionDepthExceeded past the configured call depth.
    """
    depth = caller_env.depth + 1
    limit = caller_env.max_call_depth
    if limit is not None and depth > limit:
        raise RecursionDepthExceeded(limit)
    frame = fn.extend_env(args, depth)
    return evaluate_fn(fn.body, frame)


def apply(
    head: FunctionValue,
    args: list[JexlValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> JexlValue:
    """Apply either a UserFunction or a builtin Python callable."""
    if isinstance(head, UserFunction):
        return apply_function(head, args, env, evaluate_fn)
    elif callable(head):
        return head(env, args)
    else:
        raise UnsupportedOperation(f"Cannot apply non-function {head!r}")
