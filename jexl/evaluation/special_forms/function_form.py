import logging

from jexl import EvaluatorFn, JexlValue
from jexl.types.environment import Environment
from jexl.types.expression import FunctionDef
from jexl.types.function import UserFunction

logger = logging.getLogger(__name__)


def function_form(expr: FunctionDef, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    """
    {"function": {"name": f, "params": [...], "body": b}}
    Defines `f` in the current frame, closing over that frame.
    """
    fn = UserFunction(expr.name, expr.params, expr.body, env)
    env.define_function(expr.name, fn)
    logger.debug("Defined function %s/%d", fn.name, fn.arity)
    return None
