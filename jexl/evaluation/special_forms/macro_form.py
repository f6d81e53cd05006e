from jexl import EvaluatorFn, JexlValue
from jexl.types.environment import Environment
from jexl.types.errors import MacroNotExpanded, UnsupportedOperation
from jexl.types.expression import MacroDef, SpecialForm


def macro_form(expr: MacroDef, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    """Macro definitions are consumed by the expander; reaching here is an error."""
    raise MacroNotExpanded(expr.name)


def special_form(expr: SpecialForm, env: Environment, evaluate_fn: EvaluatorFn) -> JexlValue:
    """A record-shaped invocation that no macro claimed."""
    raise UnsupportedOperation(
        f"'{expr.target}' is not a macro; record-style arguments are only accepted by macros"
    )
