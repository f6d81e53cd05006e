from jexl import EvaluatorFn, JexlValue
from jexl.types.environment import Environment
from jexl.types.expression import Let


def let_form(expr: Let, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    """
    {"let": {"name": n, "value": v}}
    Binds in the current frame and yields the bound value.
    """
    value = evaluate_fn(expr.value, env)
    env.set_var(expr.name, value)
    return value
