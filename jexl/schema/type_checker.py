"""Well-formedness checks for the JSON Schema documents a program declares in `types`.

The checks are purely syntactic: a declared type is never compared against a
runtime value. Meta-schema validation is delegated to the `jsonschema`
library; the draft is chosen from the document's `$schema` and defaults to
Draft 7.
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from jexl import JsonValue
from jexl.types.expression import Program

logger = logging.getLogger(__name__)


def schema_error(document: JsonValue) -> str | None:
    """Return why `document` is not a valid JSON Schema, or None if it is."""
    if not isinstance(document, dict):
        return f"expected a JSON Schema object, found {type(document).__name__}"
    if "$schema" in document and not isinstance(document["$schema"], str):
        return f"\"$schema\" must be a string, found {type(document['$schema']).__name__}"
    validator = validator_for(document, default=Draft7Validator)
    try:
        validator.check_schema(document)
    except SchemaError as e:
        location = "/".join(str(p) for p in e.path)
        return f"{e.message} (at /{location})" if location else e.message
    return None


def check_schema(document: JsonValue) -> bool:
    """True iff `document` is a well-formed JSON Schema object."""
    return schema_error(document) is None


def _declared_types(program: Program) -> Iterator[tuple[str | None, str, JsonValue]]:
    for type_name, document in program.types.items():
        yield None, type_name, document
    for module_name, module in program.modules.items():
        for type_name, document in module.types.items():
            yield module_name, type_name, document


def iter_invalid_types(program: Program) -> Iterator[tuple[str | None, str, str]]:
    """Yield (module, type_name, reason) for every malformed declared type.

    `module` is None for program-level declarations.
    """
    for module_name, type_name, document in _declared_types(program):
        reason = schema_error(document)
        if reason is not None:
            logger.debug("Type %r (module %r) is not a valid schema: %s", type_name, module_name, reason)
            yield module_name, type_name, reason


def validate_program_types(program: Program | Mapping) -> bool:
    """True iff every declared type at program and module level is a valid schema.

    Accepts either a read Program or a raw program document.
    """
    if not isinstance(program, Program):
        return _validate_raw_types(program)
    return next(iter_invalid_types(program), None) is None


def _validate_raw_types(doc: Mapping) -> bool:
    if not isinstance(doc, Mapping):
        return False
    for document in (doc.get("types") or {}).values():
        if not check_schema(document):
            return False
    for module in (doc.get("modules") or {}).values():
        if not isinstance(module, Mapping):
            continue
        for document in (module.get("types") or {}).values():
            if not check_schema(document):
                return False
    return True
