from jexl import EvaluatorFn, JexlValue
from jexl.builtin.env_builtin import is_truthy
from jexl.types.environment import Environment
from jexl.types.expression import If


def if_form(expr: If, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    cond = evaluate_fn(expr.condition, env)
    branch = expr.then_branch if is_truthy(cond) else expr.else_branch
    if branch is None:
        return None
    return evaluate_fn(branch, env)
