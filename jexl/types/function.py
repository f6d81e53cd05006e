"""User-defined function representation for JEXL."""

from __future__ import annotations

from io import StringIO

from jexl import JexlValue
from jexl.types.environment import Environment
from jexl.types.errors import ArityMismatch
from jexl.types.expression import Expression, Param


class UserFunction:
    """A named function with formal parameters, body, and defining environment."""

    __slots__ = ("name", "params", "body", "env")

    def __init__(self, name: str, params: tuple[Param, ...], body: Expression, env: Environment):
        self.name = name
        self.params: tuple[Param, ...] = tuple(params)
        self.body: Expression = body
        self.env: Environment = env

    @property
    def arity(self) -> int:
        return len(self.params)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write(f"<function {self.name}(")
            buffer.write(", ".join(p.name for p in self.params))
            buffer.write(")>")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)

    def extend_env(self, args: list[JexlValue], depth: int) -> Environment:
        """
        Bind the given argument values positionally to this function's
        parameters and return a fresh frame, child of the defining
        environment, for evaluating the body.
        """
        if len(args) != len(self.params):
            raise ArityMismatch(self.name, len(self.params), len(args))
        frame = Environment(self.env, depth=depth)
        for param, value in zip(self.params, args):
            frame.set_var(param.name, value)
        return frame
