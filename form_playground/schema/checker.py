"""Static analysis for form schemas — catch issues once, at definition time."""
from __future__ import annotations

from typing import TYPE_CHECKING

from form_playground.schema.constraints import BUILTIN_KINDS
from form_playground.schema.registry import get_constraint

if TYPE_CHECKING:
    from form_playground.types import FieldDescriptor, Schema


class SchemaIssue:
    def __init__(self, level: str, message: str, field: str | None = None):
        self.level = level  # "error" | "warning"
        self.message = message
        self.field = field

    def __str__(self):
        prefix = f"[{self.field}] " if self.field else ""
        return f"{self.level.upper()}: {prefix}{self.message}"


class SchemaError(ValueError):
    """Raised when a schema with error-level issues is put into use."""

    def __init__(self, schema_name: str, issues: list[SchemaIssue]):
        self.issues = issues
        super().__init__(f'Form "{schema_name}" failed validation:\n{format_issues(issues)}')


def check_schema(schema: Schema, *, strict_checks: bool = False) -> list[SchemaIssue]:
    """Run all static checks on a schema.

    With strict_checks, ``check:`` constraints naming an unregistered
    predicate are errors; otherwise the registry may still be filled later.
    """
    issues: list[SchemaIssue] = []

    if not schema.fields:
        issues.append(SchemaIssue("error", "Form has no fields"))
        return issues

    issues.extend(_check_display_field(schema))
    for f in schema.fields:
        issues.extend(_check_applicability(f))
        issues.extend(_check_bounds(f))
        issues.extend(_check_choices(f))
        issues.extend(_check_custom(f, strict_checks))
        issues.extend(_check_default(f))
    return issues


def ensure_valid(schema: Schema, *, strict_checks: bool = False) -> Schema:
    issues = check_schema(schema, strict_checks=strict_checks)
    if any(i.level == "error" for i in issues):
        raise SchemaError(schema.name, issues)
    return schema


def format_issues(issues: list[SchemaIssue]) -> str:
    if not issues:
        return ""
    lines = []
    errs = [i for i in issues if i.level == "error"]
    warns = [i for i in issues if i.level == "warning"]
    if errs:
        lines.append(f"  {len(errs)} error(s):")
        for i in errs:
            lines.append(f"    ✗ {i}")
    if warns:
        lines.append(f"  {len(warns)} warning(s):")
        for i in warns:
            lines.append(f"    ⚠ {i}")
    return "\n".join(lines)


# ─── Checks ───

def _check_display_field(schema: Schema) -> list[SchemaIssue]:
    """The filter matches on the display field, so it must be a string field."""
    if not schema.display_field:
        return []
    if schema.display_field not in schema:
        return [SchemaIssue("error", f'Display field "{schema.display_field}" is not declared')]
    if schema.get(schema.display_field).type != "string":
        return [SchemaIssue("error", "Display field must be a string field", schema.display_field)]
    return []


def _check_applicability(f: FieldDescriptor) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    for c in f.constraints:
        _factory, types = BUILTIN_KINDS[c.kind]
        if f.type not in types:
            issues.append(SchemaIssue(
                "error", f'Constraint "{c.kind}" does not apply to {f.type} fields', f.name,
            ))
    if f.type == "boolean" and f.required and not any(c.kind == "accepted" for c in f.constraints):
        # False is a value, not an empty input
        issues.append(SchemaIssue(
            "warning", "required does not reject an unchecked box, use accepted", f.name,
        ))
    return issues


def _check_bounds(f: FieldDescriptor) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    args = {c.kind: c.arg for c in f.constraints}
    for lo, hi in (("min_length", "max_length"), ("min", "max")):
        if lo in args and hi in args and args[lo] > args[hi]:
            issues.append(SchemaIssue("error", f"{lo} ({args[lo]}) is greater than {hi} ({args[hi]})", f.name))
    if args.get("min_length", 0) < 0:
        issues.append(SchemaIssue("error", "min_length must not be negative", f.name))
    if f.required and args.get("min_length") == 0:
        issues.append(SchemaIssue("warning", "min_length 0 on a required field never fails", f.name))
    return issues


def _check_choices(f: FieldDescriptor) -> list[SchemaIssue]:
    for c in f.constraints:
        if c.kind == "one_of" and not c.arg:
            return [SchemaIssue("error", "one_of has no choices", f.name)]
    return []


def _check_custom(f: FieldDescriptor, strict: bool) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    for c in f.constraints:
        if c.kind == "check" and get_constraint(c.arg) is None:
            level = "error" if strict else "warning"
            issues.append(SchemaIssue(level, f'Check "{c.arg}" is not registered', f.name))
    return issues


def _check_default(f: FieldDescriptor) -> list[SchemaIssue]:
    """A declared default must already have the field's type."""
    if f.default is None:
        return []
    ok = {
        "string": isinstance(f.default, str),
        "number": isinstance(f.default, int | float) and not isinstance(f.default, bool),
        "boolean": isinstance(f.default, bool),
    }[f.type]
    if not ok:
        return [SchemaIssue("error", f"Default {f.default!r} is not a {f.type}", f.name)]
    return []
