from jexl.reader.grammar import (
    check_program,
    is_program,
    read_expression,
    read_param,
    read_program,
    to_json,
)

__all__ = ["check_program", "is_program", "read_expression", "read_param", "read_program", "to_json"]
