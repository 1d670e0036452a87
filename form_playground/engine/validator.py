"""Coerce raw input to typed values and evaluate schema constraints.

Two entry points with different failure shapes:
  validate_field  → fail-fast, the first failing message for one field
  validate_form   → exhaustive, every failing field at once
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from form_playground.types import FieldDescriptor, Schema, TypedValue

logger = logging.getLogger(__name__)

NOT_A_NUMBER = "not a number"
NOT_A_BOOLEAN = "not a boolean"

_TRUE_WORDS = frozenset({"true", "on", "yes", "1"})
_FALSE_WORDS = frozenset({"false", "off", "no", "0"})


class CoercionError(ValueError):
    """Raw input cannot be converted to the field's declared type."""


# ─── Result types ───

class FieldResult:
    def __init__(self, ok: bool, value: TypedValue = None, error: str | None = None):
        self.ok = ok
        self.value = value
        self.error = error

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return f"FieldResult(ok={self.ok}, value={self.value!r}, error={self.error!r})"


class FormResult:
    def __init__(self, ok: bool, values: dict[str, TypedValue] | None = None,
                 errors: dict[str, str] | None = None):
        self.ok = ok
        self.values = values or {}
        self.errors = errors or {}

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        return {"ok": self.ok, "values": self.values, "errors": self.errors}


# ─── Coercion ───

def is_empty(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def coerce_value(field: FieldDescriptor, raw: Any) -> TypedValue:
    match field.type:
        case "string":
            return raw if isinstance(raw, str) else str(raw)
        case "number":
            return _coerce_number(raw)
        case "boolean":
            return _coerce_boolean(raw)
    raise CoercionError(f"unsupported field type: {field.type}")


def _coerce_number(raw: Any) -> int | float:
    if isinstance(raw, bool):
        raise CoercionError(NOT_A_NUMBER)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise CoercionError(NOT_A_NUMBER) from None
    else:
        raise CoercionError(NOT_A_NUMBER)
    if math.isnan(value) or math.isinf(value):
        raise CoercionError(NOT_A_NUMBER)
    return value


def _coerce_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise CoercionError(NOT_A_BOOLEAN)


# ─── Validation ───

def validate_field(schema: Schema, name: str, raw: Any) -> FieldResult:
    """Validate one field: required check, coercion, then constraints in order."""
    field = schema.get(name)

    if is_empty(raw):
        if field.required:
            return FieldResult(False, error=field.missing_message)
        return FieldResult(True, None)

    try:
        value = coerce_value(field, raw)
    except CoercionError as e:
        return FieldResult(False, error=str(e))

    for c in field.constraints:
        try:
            message = c.evaluate(value)
        except Exception as e:
            logger.warning("constraint %s on %s.%s raised: %s", c.kind, schema.name, name, e)
            message = c.message
        if message is not None:
            return FieldResult(False, error=message)

    return FieldResult(True, value)


def validate_form(schema: Schema, raw_values: Mapping[str, Any]) -> FormResult:
    """Validate every declared field; undeclared keys in raw_values are ignored."""
    values: dict[str, TypedValue] = {}
    errors: dict[str, str] = {}
    for field in schema.fields:
        result = validate_field(schema, field.name, raw_values.get(field.name))
        if result:
            values[field.name] = result.value
        else:
            errors[field.name] = result.error or "invalid"
    if errors:
        return FormResult(False, errors=errors)
    return FormResult(True, values=values)
