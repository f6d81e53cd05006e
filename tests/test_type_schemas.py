import pytest

from jexl.reader import read_program
from jexl.schema import check_schema, iter_invalid_types, validate_program_types
from jexl.types.errors import InvalidTypeSchema


POINT = {
    "type": "object",
    "properties": {
        "x": {"type": "number"},
        "y": {"type": "number"},
    },
    "required": ["x", "y"],
}

INVALID = {
    "type": "not_a_valid_type",
    "properties": 123,
}


def test_check_schema_accepts_valid_documents():
    assert check_schema(POINT)
    assert check_schema({})


def test_check_schema_rejects_malformed_documents():
    assert not check_schema(INVALID)
    assert not check_schema({"properties": 123})


def test_check_schema_requires_an_object():
    assert not check_schema(True)
    assert not check_schema("string")


def test_program_without_types_passes(program):
    assert validate_program_types(read_program(program()))


def test_program_with_valid_types(program):
    doc = program(
        {"function": {"name": "makePoint", "params": ["x", "y"], "body": {
            "object": [{"tuple": ["x", {"ref": "x"}]}, {"tuple": ["y", {"ref": "y"}]}]
        }}},
        types={"Point": POINT},
    )
    assert validate_program_types(read_program(doc))
    assert validate_program_types(doc)


def test_invalid_program_level_type_is_reported(program):
    # The program shape is valid; only the schema declaration is malformed
    doc = program(types={"Invalid": INVALID})
    prog = read_program(doc)
    assert not validate_program_types(prog)
    assert not validate_program_types(doc)
    [(module, type_name, reason)] = list(iter_invalid_types(prog))
    assert module is None
    assert type_name == "Invalid"
    assert reason


def test_invalid_module_type_is_reported(program):
    doc = program(modules={"geo": {"types": {"Bad": {"required": "x"}}, "exports": []}})
    [(module, type_name, _)] = list(iter_invalid_types(read_program(doc)))
    assert (module, type_name) == ("geo", "Bad")


def test_runner_rejects_invalid_schema_before_evaluation(interp, program, capsys):
    doc = program({"print": ["should not run"]}, types={"Invalid": INVALID})
    with pytest.raises(InvalidTypeSchema) as exc:
        interp.run(doc)
    assert exc.value.type_name == "Invalid"
    assert capsys.readouterr().out == ""


def test_schema_draft_follows_dollar_schema():
    doc = {"$schema": "https://json-schema.org/draft/2020-12/schema", "prefixItems": [{"type": "string"}]}
    assert check_schema(doc)
    assert not check_schema({"$schema": "https://json-schema.org/draft/2020-12/schema", "prefixItems": 1})


@pytest.mark.parametrize("dialect", [5, None, ["draft-07"], {"uri": "x"}])
def test_non_string_dollar_schema_is_rejected(dialect):
    assert not check_schema({"$schema": dialect})


def test_runner_rejects_non_string_dollar_schema(interp, program, capsys):
    doc = program({"print": ["should not run"]}, types={"Odd": {"$schema": 5, "type": "object"}})
    with pytest.raises(InvalidTypeSchema) as exc:
        interp.run(doc)
    assert exc.value.type_name == "Odd"
    assert capsys.readouterr().out == ""
