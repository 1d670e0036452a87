"""Parse YAML form definitions into an immutable Schema."""
from __future__ import annotations

import re
from typing import Any

import yaml

from form_playground.schema.constraints import BUILTIN_KINDS, FLAG_KINDS
from form_playground.types import FIELD_TYPES, Constraint, FieldDescriptor, Schema

# Keys consumed by the field parser, not treated as constraints
_FIELD_KEYS = frozenset({"type", "required", "message", "default", "label"})

# Accepted argument types per parameterized constraint kind
_ARG_TYPES: dict[str, type | tuple[type, ...]] = {
    "min_length": int,
    "max_length": int,
    "min": (int, float),
    "max": (int, float),
    "one_of": list,
    "pattern": str,
    "check": str,
}


def _text(value: Any, where: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"{where} must be text, got {value!r}")


def _parse_constraint(kind: str, spec: Any, field_name: str) -> Constraint:
    """Build one constraint from ``kind: spec``.

    spec forms:
      min: 1                              → arg only, default message
      min: {value: 1, message: "..."}     → arg + custom message
      accepted: true                      → flag, default message
      accepted: "You must accept"         → flag + custom message
    """
    if kind not in BUILTIN_KINDS:
        raise ValueError(f'Field "{field_name}": unknown constraint "{kind}"')
    factory, _types = BUILTIN_KINDS[kind]
    where = f'Field "{field_name}": {kind} message'

    if kind in FLAG_KINDS:
        if spec is False:
            raise ValueError(f'Field "{field_name}": "{kind}: false" has no meaning, remove it')
        if isinstance(spec, dict):
            return factory(_text(spec.get("message"), where))
        if isinstance(spec, str):
            return factory(spec)
        return factory()

    message = None
    arg = spec
    if isinstance(spec, dict):
        if "value" not in spec:
            raise ValueError(f'Field "{field_name}": constraint "{kind}" needs a value')
        arg = spec["value"]
        message = _text(spec.get("message"), where)
    if arg is None:
        raise ValueError(f'Field "{field_name}": constraint "{kind}" needs a value')
    expected = _ARG_TYPES[kind]
    if not isinstance(arg, expected) or isinstance(arg, bool):
        raise ValueError(f'Field "{field_name}": constraint "{kind}" got {arg!r}')
    if kind == "one_of" and not all(isinstance(choice, str) for choice in arg):
        raise ValueError(f'Field "{field_name}": one_of choices must be text, got {arg!r}')
    try:
        return factory(arg, message)
    except re.error as e:
        raise ValueError(f'Field "{field_name}": invalid pattern {arg!r}: {e}') from None


def _parse_raw_field(raw) -> tuple[str, dict]:
    """Parse a single raw YAML field entry into (name, body_dict)."""
    if isinstance(raw, str):
        # bare name → required string field
        return (raw, {"required": True})
    if isinstance(raw, dict) and len(raw) == 1:
        name, body = next(iter(raw.items()))
        if body is None:
            return (str(name), {})
        if isinstance(body, dict):
            return (str(name), body)
    raise ValueError(f"Invalid field entry: {raw!r}")


def _build_field(name: str, body: dict) -> FieldDescriptor:
    ftype = body.get("type", "string")
    if ftype not in FIELD_TYPES:
        raise ValueError(f'Field "{name}": unknown type "{ftype}" (expected one of {", ".join(FIELD_TYPES)})')

    constraints = tuple(
        _parse_constraint(k, v, name) for k, v in body.items() if k not in _FIELD_KEYS
    )
    return FieldDescriptor(
        name=name,
        type=ftype,
        required=bool(body.get("required", False)),
        required_message=_text(body.get("message"), f'Field "{name}": message') or "",
        constraints=constraints,
        default=body.get("default"),
        label=_text(body.get("label"), f'Field "{name}": label') or "",
    )


def parse_schema_yaml(content: str) -> Schema:
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML: {e}") from None
    if not isinstance(raw, dict):
        raise ValueError("Invalid YAML: expected a mapping")

    name = raw.get("name", "unnamed form")
    raw_fields = raw.get("fields")
    if not isinstance(raw_fields, list):
        raise ValueError('Invalid form: missing "fields" list')

    parsed = [_parse_raw_field(r) for r in raw_fields]

    seen: dict[str, int] = {}
    for n, _ in parsed:
        seen[n] = seen.get(n, 0) + 1
    dupes = [n for n, c in seen.items() if c > 1]
    if dupes:
        raise ValueError(f"Duplicate field names: {', '.join(dupes)}")

    fields = tuple(_build_field(n, body) for n, body in parsed)
    return Schema(
        name=str(name),
        fields=fields,
        display_field=_text(raw.get("display"), "display") or "",
        label=_text(raw.get("label"), "label") or "",
    )
