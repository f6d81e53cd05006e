import pytest

from jexl.builtin import env_builtin
from jexl.interpreter import Interpreter
from jexl.types.environment import Environment


# Shared fixtures: a root environment holding the standard builtins, a fresh
# interpreter, and a helper wrapping top-level expressions into a program
# document of the supported version.


@pytest.fixture
def env():
    e = Environment(max_call_depth=100)
    env_builtin.register(e)
    return e


@pytest.fixture
def interp():
    return Interpreter()


def make_program(*body, **extra):
    doc = {"jexl_version": "v0.1", "name": "test", "program": list(body)}
    doc.update(extra)
    return doc


@pytest.fixture
def program():
    return make_program
