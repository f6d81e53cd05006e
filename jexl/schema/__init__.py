from jexl.schema.type_checker import check_schema, iter_invalid_types, validate_program_types

__all__ = ["check_schema", "iter_invalid_types", "validate_program_types"]
