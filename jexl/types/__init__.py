"""Runtime data types for JEXL: expression nodes, environments, functions, errors."""

from jexl.types.environment import Environment
from jexl.types.function import UserFunction
from jexl.types import expression, errors

__all__ = ["Environment", "UserFunction", "expression", "errors"]
