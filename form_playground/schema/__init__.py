from form_playground.schema.catalog import BUILTIN_FORMS, get_builtin, load_forms
from form_playground.schema.checker import SchemaError, SchemaIssue, check_schema, ensure_valid, format_issues
from form_playground.schema.parser import parse_schema_yaml
from form_playground.schema.registry import constraint, get_constraint, load_constraints

__all__ = [
    "BUILTIN_FORMS",
    "SchemaError",
    "SchemaIssue",
    "check_schema",
    "constraint",
    "ensure_valid",
    "format_issues",
    "get_builtin",
    "get_constraint",
    "load_constraints",
    "load_forms",
    "parse_schema_yaml",
]
