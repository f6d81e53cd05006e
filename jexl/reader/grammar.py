"""
  JEXL reader: shape validation and expression-tree construction.

- Input is an already-parsed JSON tree (dict / list / str / int / float / bool / None).
- Output is a tree of frozen dataclasses from jexl.types.expression:

    - "s", 1, 1.5, true, null            -> Literal
    - {"ref": name}                      -> VarRef
    - {"let": {name, value}}             -> Let
    - {"do": [...]}                      -> Do
    - {"if": {condition, true?, false?}} -> If
    - {"function": {name, params, body}} -> FunctionDef
    - {"macro": {name, params, body}}    -> MacroDef
    - {"import": {module, symbols}}      -> Import
    - {name: [...]}                      -> Call
    - {name: {...}}                      -> SpecialForm

Reserved keys must match their dedicated shape; they never fall back to the
generic call or special-form shapes. Every rejection carries a JSON-pointer
path to the offending value.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from jexl import JsonValue
from jexl.config import SUPPORTED_VERSION
from jexl.types.errors import GrammarViolation, UnsupportedVersion
from jexl.types.expression import (
    Call,
    Do,
    Expression,
    FunctionDef,
    If,
    Import,
    Let,
    Literal,
    MacroDef,
    Module,
    Param,
    Program,
    SpecialForm,
    VarRef,
    describe,
)

logger = logging.getLogger(__name__)

EXPRESSION_SHAPES = (
    "Literal",
    "VarReference",
    "LetBinding",
    "DoDef",
    "IfDef",
    "FunctionDef",
    "MacroDef",
    "Import",
    "FunctionCall",
    "SpecialForm",
)


def pointer(path: str, token: str | int) -> str:
    """Append one reference token to a JSON pointer."""
    escaped = str(token).replace("~", "~0").replace("/", "~1")
    return f"{path}/{escaped}"


def _is_literal(value: Any) -> bool:
    return value is None or isinstance(value, (str, bool, int, float))


def _record(
    value: Any,
    path: str,
    shape: str,
    required: tuple[str, ...],
    optional: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Check that `value` is an object with exactly the allowed keys."""
    if not isinstance(value, dict):
        raise GrammarViolation(path, f"{shape} expects an object, found {describe(value)}", value)
    for key in required:
        if key not in value:
            raise GrammarViolation(path, f"{shape} is missing required property '{key}'", value)
    allowed = set(required) | set(optional)
    for key in value:
        if key not in allowed:
            raise GrammarViolation(pointer(path, key), f"{shape} does not accept property '{key}'", value)
    return value


def _string(value: Any, path: str, what: str) -> str:
    if not isinstance(value, str):
        raise GrammarViolation(path, f"{what} must be a string, found {describe(value)}", value)
    return value


def _array(value: Any, path: str, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise GrammarViolation(path, f"{what} must be an array, found {describe(value)}", value)
    return value


# --- Reserved forms ---

def _read_ref(body: Any, path: str) -> Expression:
    return VarRef(_string(body, path, "VarReference name"))


def _read_let(body: Any, path: str) -> Expression:
    rec = _record(body, path, "LetBinding", ("name", "value"))
    return Let(
        name=_string(rec["name"], pointer(path, "name"), "LetBinding name"),
        value=read_expression(rec["value"], pointer(path, "value")),
    )


def _read_do(body: Any, path: str) -> Expression:
    items = _array(body, path, "DoDef body")
    return Do(tuple(read_expression(e, pointer(path, i)) for i, e in enumerate(items)))


def _read_if(body: Any, path: str) -> Expression:
    rec = _record(body, path, "IfDef", ("condition",), ("true", "false"))
    then_branch = else_branch = None
    if "true" in rec:
        then_branch = read_expression(rec["true"], pointer(path, "true"))
    if "false" in rec:
        else_branch = read_expression(rec["false"], pointer(path, "false"))
    return If(
        condition=read_expression(rec["condition"], pointer(path, "condition")),
        then_branch=then_branch,
        else_branch=else_branch,
    )


def read_param(value: Any, path: str = "") -> Param:
    """A parameter is a bare name or a single-entry mapping of name to type name."""
    if isinstance(value, str):
        return Param(value)
    if isinstance(value, dict) and len(value) == 1:
        (name, type_name), = value.items()
        if isinstance(name, str) and isinstance(type_name, str):
            return Param(name, type_name)
    raise GrammarViolation(
        path,
        f"Param must be a name or a single-entry mapping of name to type name, found {describe(value)}",
        value,
    )


def _read_params(value: Any, path: str) -> tuple[Param, ...]:
    items = _array(value, path, "params")
    return tuple(read_param(p, pointer(path, i)) for i, p in enumerate(items))


def _read_definition(shape: str, node: type) -> Callable[[Any, str], Expression]:
    def reader(body: Any, path: str) -> Expression:
        rec = _record(body, path, shape, ("name", "params", "body"))
        return node(
            name=_string(rec["name"], pointer(path, "name"), f"{shape} name"),
            params=_read_params(rec["params"], pointer(path, "params")),
            body=read_expression(rec["body"], pointer(path, "body")),
        )
    return reader


def _read_import(body: Any, path: str) -> Expression:
    rec = _record(body, path, "Import", ("module", "symbols"))
    symbols_path = pointer(path, "symbols")
    symbols = _array(rec["symbols"], symbols_path, "Import symbols")
    return Import(
        module=_string(rec["module"], pointer(path, "module"), "Import module"),
        symbols=tuple(_string(s, pointer(symbols_path, i), "Import symbol") for i, s in enumerate(symbols)),
    )


SPECIAL_READERS: dict[str, Callable[[Any, str], Expression]] = {
    "ref": _read_ref,
    "let": _read_let,
    "do": _read_do,
    "if": _read_if,
    "function": _read_definition("FunctionDef", FunctionDef),
    "macro": _read_definition("MacroDef", MacroDef),
    "import": _read_import,
}


def read_expression(value: JsonValue, path: str = "") -> Expression:
    """Validate one JSON value as an Expression and build its node."""
    if _is_literal(value):
        return Literal(value)

    if isinstance(value, dict) and len(value) == 1:
        (key, body), = value.items()
        if isinstance(key, str):
            reader = SPECIAL_READERS.get(key)
            if reader is not None:
                return reader(body, pointer(path, key))
            if isinstance(body, list):
                return Call(key, tuple(read_expression(a, pointer(pointer(path, key), i)) for i, a in enumerate(body)))
            if isinstance(body, dict) and all(isinstance(k, str) for k in body):
                return SpecialForm(key, dict(body))

    raise GrammarViolation(
        path,
        f"expected one of {{{', '.join(EXPRESSION_SHAPES)}}}, found {describe(value)}",
        value,
    )


def _read_types(value: Any, path: str) -> dict[str, JsonValue]:
    if not isinstance(value, dict):
        raise GrammarViolation(path, f"types must be an object, found {describe(value)}", value)
    for type_name, document in value.items():
        if not isinstance(document, dict):
            raise GrammarViolation(
                pointer(path, type_name),
                f"type '{type_name}' must be a JSON Schema object, found {describe(document)}",
                document,
            )
    return dict(value)


def _read_module(name: str, value: Any, path: str) -> Module:
    rec = _record(value, path, "Module", ("exports",), ("types",))
    exports_path = pointer(path, "exports")
    exports = _array(rec["exports"], exports_path, "Module exports")
    types = _read_types(rec["types"], pointer(path, "types")) if "types" in rec else {}
    return Module(
        name=name,
        exports=tuple(read_expression(e, pointer(exports_path, i)) for i, e in enumerate(exports)),
        types=types,
    )


def read_program(doc: JsonValue) -> Program:
    """Validate a whole program document and build its tree.

    Raises UnsupportedVersion if `jexl_version` is not the supported literal,
    and GrammarViolation for any other shape mismatch.
    """
    if not isinstance(doc, dict):
        raise GrammarViolation("", f"Program must be an object, found {describe(doc)}", doc)
    for key in ("jexl_version", "name", "program"):
        if key not in doc:
            raise GrammarViolation(pointer("", key), f"Program is missing required property '{key}'", doc)

    version = doc["jexl_version"]
    if version != SUPPORTED_VERSION:
        raise UnsupportedVersion(version, SUPPORTED_VERSION)

    name = _string(doc["name"], "/name", "Program name")
    body = _array(doc["program"], "/program", "Program body")
    types = _read_types(doc["types"], "/types") if "types" in doc else {}

    modules: dict[str, Module] = {}
    if "modules" in doc:
        raw_modules = doc["modules"]
        if not isinstance(raw_modules, dict):
            raise GrammarViolation("/modules", f"modules must be an object, found {describe(raw_modules)}", raw_modules)
        for module_name, module in raw_modules.items():
            modules[module_name] = _read_module(module_name, module, pointer("/modules", module_name))

    program = Program(
        version=version,
        name=name,
        body=tuple(read_expression(e, pointer("/program", i)) for i, e in enumerate(body)),
        types=types,
        modules=modules,
    )
    logger.debug("Read program %r: %d expressions, %d modules", name, len(program.body), len(modules))
    return program


def check_program(doc: JsonValue) -> list[GrammarViolation]:
    """Return the grammar violations for `doc` (empty when it is a valid program)."""
    try:
        read_program(doc)
    except GrammarViolation as e:
        return [e]
    return []


def is_program(doc: JsonValue) -> bool:
    return not check_program(doc)


# --- Writer ---

def _param_to_json(param: Param) -> JsonValue:
    return param.name if param.type_name is None else {param.name: param.type_name}


def to_json(expr: Expression) -> JsonValue:
    """Render an Expression back to its JSON surface form."""
    match expr:
        case Literal(value=value):
            return value
        case VarRef(name=name):
            return {"ref": name}
        case Let(name=name, value=value):
            return {"let": {"name": name, "value": to_json(value)}}
        case Do(body=body):
            return {"do": [to_json(e) for e in body]}
        case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
            rec: dict[str, JsonValue] = {"condition": to_json(condition)}
            if then_branch is not None:
                rec["true"] = to_json(then_branch)
            if else_branch is not None:
                rec["false"] = to_json(else_branch)
            return {"if": rec}
        case FunctionDef(name=name, params=params, body=body):
            return {"function": {"name": name, "params": [_param_to_json(p) for p in params], "body": to_json(body)}}
        case MacroDef(name=name, params=params, body=body):
            return {"macro": {"name": name, "params": [_param_to_json(p) for p in params], "body": to_json(body)}}
        case Import(module=module, symbols=symbols):
            return {"import": {"module": module, "symbols": list(symbols)}}
        case Call(target=target, args=args):
            return {target: [to_json(a) for a in args]}
        case SpecialForm(target=target, fields=fields):
            return {target: dict(fields)}
    raise TypeError(f"Not an expression node: {expr!r}")
