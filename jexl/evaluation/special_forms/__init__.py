"""Registry of special forms for the JEXL evaluator.

Maps expression node types to handler functions that implement their
evaluation rules. The evaluator consults this table for every node that is
not a literal, variable reference, or function call.
"""

from jexl.types.expression import Do, FunctionDef, If, Import, Let, MacroDef, SpecialForm
from jexl.evaluation.special_forms.let_form import let_form
from jexl.evaluation.special_forms.do_form import do_form
from jexl.evaluation.special_forms.if_form import if_form
from jexl.evaluation.special_forms.function_form import function_form
from jexl.evaluation.special_forms.macro_form import macro_form, special_form
from jexl.evaluation.special_forms.import_form import import_form

SPECIAL_FORMS = {
    Let: let_form,
    Do: do_form,
    If: if_form,
    FunctionDef: function_form,
    MacroDef: macro_form,
    Import: import_form,
    SpecialForm: special_form,
}
