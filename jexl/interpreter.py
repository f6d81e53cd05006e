from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Mapping

from jexl import JexlValue, JsonValue
from jexl.builtin.env_builtin import BUILTINS, register
from jexl.config import get_max_call_depth
from jexl.evaluation.evaluator import evaluate
from jexl.reader.grammar import read_expression, read_program, to_json
from jexl.schema.type_checker import iter_invalid_types
from jexl.types.environment import BuiltinFn, Environment
from jexl.types.errors import InvalidTypeSchema, RecursionDepthExceeded
from jexl.types.expression import Expression, Program
from jexl.types.macro_environment import MacroEnvironment

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Runs JEXL program documents.

    A run validates the grammar, then the declared type schemas, and only then
    installs the builtins into a fresh root Environment, expands macros and
    evaluates each top-level expression in order. The first error halts the
    run. The Environment and MacroEnvironment of the last run stay available
    to `eval` and `macroexpand`.
    """

    def __init__(
        self,
        builtins: Mapping[str, BuiltinFn] = BUILTINS,
        *,
        max_call_depth: int | None = None,
        max_expansion_depth: int | None = None,
    ):
        self.builtins = builtins
        self.max_call_depth = max_call_depth if max_call_depth is not None else get_max_call_depth()
        self.max_expansion_depth = max_expansion_depth
        self.env: Environment = self._root_env()
        self.macros: MacroEnvironment = MacroEnvironment(max_expansion_depth)

    def _root_env(self, program: Program | None = None) -> Environment:
        env = Environment(max_call_depth=self.max_call_depth)
        register(env, self.builtins)
        if program is not None:
            for module in program.modules.values():
                env.declare_module(module)
        return env

    def load(self, doc: JsonValue) -> Program:
        """Read a program document and check its declared types; evaluates nothing."""
        with host_recursion("nesting"):
            program = read_program(doc)
            invalid = next(iter_invalid_types(program), None)
        if invalid is not None:
            module, type_name, reason = invalid
            raise InvalidTypeSchema(type_name, module, reason)
        return program

    def run(self, doc: JsonValue) -> list[JexlValue]:
        """Run a whole program document; returns the value of each top-level expression."""
        program = self.load(doc)
        logger.debug("Running program %r", program.name)

        self.env = self._root_env(program)
        self.macros = MacroEnvironment(self.max_expansion_depth)
        with host_recursion("nesting"):
            body = self.macros.expand_all(self.macros.collect(program.body))

        results = [self._evaluate(expr) for expr in body]
        logger.debug("Program %r finished: %d expressions evaluated", program.name, len(results))
        return results

    def eval(self, expr: JsonValue) -> JexlValue:
        """Read, expand and evaluate one expression in the persistent root environment.

        A macro definition is registered for later calls and yields null.
        """
        with host_recursion("nesting"):
            remaining = self.macros.collect([read_expression(expr)])
            if not remaining:
                return None
            node = self.macros.expand(remaining[0])
        return self._evaluate(node)

    def macroexpand(self, expr: JsonValue) -> JsonValue:
        """Return the JSON form of `expr` after full macro expansion."""
        with host_recursion("nesting"):
            return to_json(self.macros.expand(read_expression(expr)))

    def _evaluate(self, expr: Expression) -> JexlValue:
        with host_recursion():
            return evaluate(expr, self.env)


@contextmanager
def host_recursion(what: str = "call"):
    """Report Python stack exhaustion as RecursionDepthExceeded."""
    try:
        yield
    except RecursionError as e:
        raise RecursionDepthExceeded(None, what) from e
