from __future__ import annotations

import logging

from jexl import EvaluatorFn, JexlValue
from jexl.modules.module_loader import load_module
from jexl.types.environment import Environment
from jexl.types.expression import Import

logger = logging.getLogger(__name__)


def import_form(expr: Import, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    """
    {"import": {"module": m, "symbols": [s, ...]}}
    Loads module `m` (once per program) and binds each named export into the
    current frame.
    """
    module = load_module(env, expr.module, evaluate_fn)
    for symbol in expr.symbols:
        module.bind_export(symbol, env)
    logger.debug("Imported %s from %s", ", ".join(expr.symbols), expr.module)
    return None
