"""Built-in functions for the JEXL root environment.

This module defines arithmetic, comparison, structural equality, string
concatenation, output, and a few value constructors. Every builtin takes the
calling environment and the list of already-evaluated arguments.
"""
from __future__ import annotations

import json
import logging
import math
from types import MappingProxyType
from typing import Mapping

from jexl import JexlValue
from jexl.types.environment import BuiltinFn, Environment
from jexl.types.errors import ArityMismatch, JexlTypeError

logger = logging.getLogger(__name__)


def _expect_arity(name: str, args: list[JexlValue], n: int) -> None:
    if len(args) != n:
        raise ArityMismatch(name, n, len(args))


def is_number(x: JexlValue) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def is_truthy(x: JexlValue) -> bool:
    """Only boolean false and null are falsy; 0, "" and [] are truthy."""
    return x is not None and x is not False


def _numbers(name: str, args: list[JexlValue]) -> tuple[JexlValue, JexlValue]:
    _expect_arity(name, args, 2)
    a, b = args
    if not (is_number(a) and is_number(b)):
        raise JexlTypeError(f"{name} expects two numbers, got {_to_string(a)} and {_to_string(b)}")
    return a, b


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[JexlValue]) -> JexlValue:
    a, b = _numbers("add", args)
    return a + b


def subtract(env: Environment, args: list[JexlValue]) -> JexlValue:
    a, b = _numbers("subtract", args)
    return a - b


def multiply(env: Environment, args: list[JexlValue]) -> JexlValue:
    a, b = _numbers("multiply", args)
    return a * b


def divide(env: Environment, args: list[JexlValue]) -> JexlValue:
    a, b = _numbers("divide", args)
    if b == 0:
        raise JexlTypeError("divide by zero")
    return a / b


# -------------------------------
# Comparison
# -------------------------------
def less(env: Environment, args: list[JexlValue]) -> bool:
    a, b = _numbers("less", args)
    return a < b


def greater(env: Environment, args: list[JexlValue]) -> bool:
    a, b = _numbers("greater", args)
    return a > b


def is_equal(a: JexlValue, b: JexlValue) -> bool:
    """Structural equality for JSON values; booleans never equal numbers."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(is_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(is_equal(a[k], b[k]) for k in a)
    if type(a) != type(b):
        return False
    return a == b


def equals(env: Environment, args: list[JexlValue]) -> bool:
    _expect_arity("equals", args, 2)
    return is_equal(args[0], args[1])


def logical_not(env: Environment, args: list[JexlValue]) -> bool:
    _expect_arity("not", args, 1)
    return not is_truthy(args[0])


# -------------------------------
# Strings and output
# -------------------------------
def _to_string(x: JexlValue) -> str:
    """Render a value the way JSON spells it; strings are left bare."""
    if isinstance(x, str):
        return x
    if x is None:
        return "null"
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, float) and math.isfinite(x) and x.is_integer():
        return str(int(x))
    if isinstance(x, (int, float)):
        return str(x)
    if isinstance(x, (list, tuple, dict)):
        return json.dumps(x, separators=(",", ":"), default=str)
    return str(x)


def concat(env: Environment, args: list[JexlValue]) -> str:
    return "".join(_to_string(a) for a in args)


def print_builtin(env: Environment, args: list[JexlValue]) -> None:
    """Print space-separated renderings of args followed by newline; returns null."""
    print(" ".join(_to_string(a) for a in args))
    return None


# -------------------------------
# Value constructors
# -------------------------------
def list_builtin(env: Environment, args: list[JexlValue]) -> list[JexlValue]:
    return list(args)


def tuple_builtin(env: Environment, args: list[JexlValue]) -> list[JexlValue]:
    """(tuple key value) -> a two-element sequence, as consumed by `object`."""
    _expect_arity("tuple", args, 2)
    return [args[0], args[1]]


def object_builtin(env: Environment, args: list[JexlValue]) -> dict[str, JexlValue]:
    """Build a mapping from [key, value] pairs; later keys win."""
    result: dict[str, JexlValue] = {}
    for pair in args:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2 or not isinstance(pair[0], str):
            raise JexlTypeError(f"object expects [string, value] pairs, got {_to_string(pair)}")
        result[pair[0]] = pair[1]
    return result


BUILTINS: Mapping[str, BuiltinFn] = MappingProxyType(
    {
        "add": add,
        "subtract": subtract,
        "multiply": multiply,
        "divide": divide,
        "less": less,
        "greater": greater,
        "equals": equals,
        "not": logical_not,
        "print": print_builtin,
        "concat": concat,
        "list": list_builtin,
        "tuple": tuple_builtin,
        "object": object_builtin,
    }
)


def make_registry(extra: Mapping[str, BuiltinFn] | None = None) -> Mapping[str, BuiltinFn]:
    """Return a read-only registry of the standard builtins plus `extra`."""
    table = dict(BUILTINS)
    if extra:
        table.update(extra)
    return MappingProxyType(table)


def register(env: Environment, builtins: Mapping[str, BuiltinFn] = BUILTINS) -> None:
    """Install the builtin registry into the given (root) environment."""
    env.update(builtins)
    env.root().builtins = builtins
    logger.debug("Registered %d builtins", len(builtins))
