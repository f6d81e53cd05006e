from __future__ import annotations

from typing import Any


class JexlError(Exception):
    """ Base class for all JEXL errors"""
    pass


class GrammarViolation(JexlError):
    """ Raised when a JSON value does not have the shape of a program or expression"""

    def __init__(self, path: str, reason: str, value: Any = None):
        super().__init__(f"{path or '/'}: {reason}")
        self.path = path
        self.reason = reason
        self.value = value


class UnsupportedVersion(GrammarViolation):
    """ Raised when jexl_version is not the supported grammar version"""

    def __init__(self, found: Any, supported: str):
        super().__init__(
            "/jexl_version",
            f"unsupported jexl_version {found!r}, expected {supported!r}",
            found,
        )
        self.found = found
        self.supported = supported


class InvalidTypeSchema(JexlError):
    """ Raised when a declared type is not a well-formed JSON Schema document"""

    def __init__(self, type_name: str, module: str | None = None, reason: str = ""):
        where = f"type '{type_name}'" if module is None else f"type '{type_name}' in module '{module}'"
        message = f"Invalid JSON Schema for {where}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.type_name = type_name
        self.module = module
        self.reason = reason


class UnboundName(JexlError):
    """ Raised when a name cannot be resolved through the environment chain"""

    kind = "name"

    def __init__(self, name: str):
        super().__init__(f"Unbound {self.kind}: {name}")
        self.name = name


class UnboundVariable(UnboundName):
    """ Raised when a variable is referenced before it is bound"""
    kind = "variable"


class UnboundFunction(UnboundName):
    """ Raised when a function is called before it is defined"""
    kind = "function"


class ArityMismatch(JexlError):
    """ Raised when the number of arguments passed to a function is incorrect"""

    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f"'{name}' expected {expected} arguments but got {actual}")
        self.name = name
        self.expected = expected
        self.actual = actual


class MacroNotExpanded(JexlError):
    """ Raised when a macro definition reaches the evaluator"""

    def __init__(self, name: str):
        super().__init__(f"Macro '{name}' reached the evaluator unexpanded")
        self.name = name


class UnsupportedOperation(JexlError):
    """ Raised when a form is used where it is not allowed"""


class JexlTypeError(JexlError):
    """ Raised when the types of arguments passed to a builtin are incorrect"""


class RecursionDepthExceeded(JexlError):
    """ Raised when function calls or macro expansions nest too deeply"""

    def __init__(self, limit: int | None, what: str = "call"):
        if limit is None:
            message = f"Maximum {what} depth exceeded"
        else:
            message = f"Maximum {what} depth of {limit} exceeded"
        super().__init__(message)
        self.limit = limit
        self.what = what


class JexlImportError(JexlError):
    """ Base class for import failures"""


class UnknownModule(JexlImportError):
    """ Raised when an import names an undeclared module"""

    def __init__(self, module: str):
        super().__init__(f"Module '{module}' not found")
        self.module = module


class UnknownSymbol(JexlImportError):
    """ Raised when an import names a symbol the module does not export"""

    def __init__(self, module: str, symbol: str):
        super().__init__(f"Module '{module}' has no export '{symbol}'")
        self.module = module
        self.symbol = symbol
