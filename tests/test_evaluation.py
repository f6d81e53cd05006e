import pytest

from jexl.evaluation.evaluator import evaluate
from jexl.reader import read_expression
from jexl.types.errors import (
    ArityMismatch,
    MacroNotExpanded,
    RecursionDepthExceeded,
    UnboundFunction,
    UnboundVariable,
    UnsupportedOperation,
)
from jexl.types.function import UserFunction


def run(doc, env):
    return evaluate(read_expression(doc), env)


# -----------------------------------------------------
# Tests
# -----------------------------------------------------

@pytest.mark.parametrize("value", [1, 3.14, "hello", True, False, None])
def test_self_evaluating_literals(env, value):
    assert run(value, env) == value


def test_let_returns_and_binds(env):
    assert run({"let": {"name": "x", "value": 5}}, env) == 5
    assert run({"ref": "x"}, env) == 5


def test_let_evaluates_its_value(env):
    assert run({"let": {"name": "y", "value": {"add": [2, 3]}}}, env) == 5


def test_unbound_variable(env):
    with pytest.raises(UnboundVariable):
        run({"ref": "z"}, env)


def test_do_returns_last_value(env):
    doc = {"do": [{"let": {"name": "a", "value": 10}}, {"let": {"name": "b", "value": 20}}, {"add": [{"ref": "a"}, {"ref": "b"}]}]}
    assert run(doc, env) == 30


def test_empty_do_is_null(env):
    assert run({"do": []}, env) is None


@pytest.mark.parametrize("condition", [0, "", True, 1, {"list": []}])
def test_if_truthy_values(env, condition):
    assert run({"if": {"condition": condition, "true": "a", "false": "b"}}, env) == "a"


@pytest.mark.parametrize("condition", [False, None])
def test_if_falsy_values(env, condition):
    assert run({"if": {"condition": condition, "true": "a", "false": "b"}}, env) == "b"


def test_if_missing_branch_is_null(env):
    assert run({"if": {"condition": True, "false": "b"}}, env) is None
    assert run({"if": {"condition": False, "true": "a"}}, env) is None


def test_if_only_evaluates_selected_branch(env, capsys):
    run({"if": {"condition": True, "true": 1, "false": {"print": ["never"]}}}, env)
    assert capsys.readouterr().out == ""


def test_function_definition_returns_null_and_defines(env):
    doc = {"function": {"name": "double", "params": ["x"], "body": {"multiply": [{"ref": "x"}, 2]}}}
    assert run(doc, env) is None
    assert isinstance(env.get_function("double"), UserFunction)
    assert run({"double": [21]}, env) == 42


def test_arity_mismatch_names_function_and_counts(env):
    run({"function": {"name": "pair", "params": ["a", "b"], "body": {"ref": "a"}}}, env)
    with pytest.raises(ArityMismatch) as exc:
        run({"pair": [1]}, env)
    assert exc.value.name == "pair"
    assert exc.value.expected == 2
    assert exc.value.actual == 1


def test_unbound_function(env):
    with pytest.raises(UnboundFunction) as exc:
        run({"nope": []}, env)
    assert exc.value.name == "nope"


def test_parameters_do_not_leak_into_caller(env):
    run({"function": {"name": "id", "params": ["p"], "body": {"ref": "p"}}}, env)
    assert run({"id": [3]}, env) == 3
    assert not env.has_var("p")


def test_functions_close_over_defining_scope(env):
    doc = {"do": [
        {"let": {"name": "base", "value": 100}},
        {"function": {"name": "offset", "params": ["n"], "body": {"add": [{"ref": "base"}, {"ref": "n"}]}}},
        {"offset": [1]},
    ]}
    assert run(doc, env) == 101


def test_free_names_do_not_resolve_in_caller_scope(env):
    run({"function": {"name": "peek", "params": [], "body": {"ref": "secret"}}}, env)
    run({"function": {"name": "caller", "params": ["secret"], "body": {"peek": []}}}, env)
    with pytest.raises(UnboundVariable):
        run({"caller": [1]}, env)


def test_let_inside_function_is_local(env):
    run({"function": {"name": "f", "params": [], "body": {"let": {"name": "tmp", "value": 9}}}}, env)
    assert run({"f": []}, env) == 9
    assert not env.has_var("tmp")


def test_arguments_evaluated_left_to_right(env, capsys):
    run({"concat": [{"print": ["first"]}, {"print": ["second"]}]}, env)
    assert capsys.readouterr().out == "first\nsecond\n"


def test_recursive_fibonacci(env):
    run({"function": {"name": "fib", "params": ["n"], "body": {"if": {
        "condition": {"less": [{"ref": "n"}, 2]},
        "true": {"ref": "n"},
        "false": {"add": [
            {"fib": [{"subtract": [{"ref": "n"}, 1]}]},
            {"fib": [{"subtract": [{"ref": "n"}, 2]}]},
        ]},
    }}}}, env)
    assert run({"fib": [7]}, env) == 13


def test_call_depth_is_bounded(env):
    run({"function": {"name": "loop", "params": ["n"], "body": {"loop": [{"ref": "n"}]}}}, env)
    with pytest.raises(RecursionDepthExceeded) as exc:
        run({"loop": [1]}, env)
    assert exc.value.limit == 100


def test_unexpanded_macro_definition_fails(env):
    with pytest.raises(MacroNotExpanded) as exc:
        run({"macro": {"name": "m", "params": [], "body": 1}}, env)
    assert exc.value.name == "m"


def test_record_invocation_without_macro_is_unsupported(env):
    with pytest.raises(UnsupportedOperation):
        run({"unless": {"condition": True}}, env)
