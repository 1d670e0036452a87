from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

FieldType = Literal["string", "number", "boolean"]
FIELD_TYPES: tuple[str, ...] = ("string", "number", "boolean")

# Typed values after coercion: str for "string", int | float for "number",
# bool for "boolean". None only for an empty optional field.
TypedValue = str | int | float | bool | None

# ─── Schema IR (declared in code or parsed from YAML) ───

@dataclass(frozen=True)
class Constraint:
    kind: str  # min_length | max_length | min | max | accepted | one_of | email | pattern | check
    message: str
    predicate: Callable[[Any], bool | str] = field(compare=False, repr=False)
    arg: Any = None

    def evaluate(self, value: Any) -> str | None:
        """Return None when the value passes, otherwise the failure message."""
        result = self.predicate(value)
        if result is True:
            return None
        # custom checks may return their own message instead of False
        if isinstance(result, str) and result:
            return result
        return self.message


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: FieldType = "string"
    required: bool = False
    required_message: str = ""
    constraints: tuple[Constraint, ...] = ()
    default: Any = None
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()

    @property
    def missing_message(self) -> str:
        return self.required_message or f"{self.display_label} is required"

    def initial_value(self) -> Any:
        if self.default is not None:
            return self.default
        return False if self.type == "boolean" else ""


@dataclass(frozen=True)
class Schema:
    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    display_field: str = ""
    label: str = ""

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> FieldDescriptor:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f'Unknown field "{name}" in form "{self.name}"')

# ─── Session runtime state ───

# idle | validating | submitting | success | failed
IDLE = "idle"
VALIDATING = "validating"
SUBMITTING = "submitting"
SUCCESS = "success"
FAILED = "failed"
BUSY_STATUSES = frozenset({VALIDATING, SUBMITTING})


@dataclass
class FieldState:
    value: Any = ""
    touched: bool = False
    error: str | None = None

# ─── Submitted records ───

class Record:
    """Immutable schema-shaped value produced by a successful submission."""

    __slots__ = ("_created_at", "_form", "_values")

    def __init__(self, form: str, values: Mapping[str, TypedValue], created_at: str = ""):
        object.__setattr__(self, "_form", form)
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))
        object.__setattr__(
            self, "_created_at",
            created_at or datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S"),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Record is immutable")

    @property
    def form(self) -> str:
        return self._form

    @property
    def values(self) -> Mapping[str, TypedValue]:
        return self._values

    @property
    def created_at(self) -> str:
        return self._created_at

    def __getitem__(self, key: str) -> TypedValue:
        return self._values[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {"form": self._form, "values": dict(self._values), "created_at": self._created_at}

    def __repr__(self) -> str:
        return f"Record(form={self._form!r}, values={dict(self._values)!r})"
