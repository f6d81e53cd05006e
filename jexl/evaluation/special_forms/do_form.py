from jexl import EvaluatorFn, JexlValue
from jexl.types.environment import Environment
from jexl.types.expression import Do


def do_form(expr: Do, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    result: JexlValue = None
    for e in expr.body:
        result = evaluate_fn(e, env)
    return result
