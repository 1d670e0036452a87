"""Built-in constraint kinds — factories producing Constraint values."""
from __future__ import annotations

import re
from typing import Any

from form_playground.schema.registry import get_constraint
from form_playground.types import Constraint

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def min_length(n: int, message: str | None = None) -> Constraint:
    return Constraint(
        "min_length", message or f"must be at least {n} characters",
        lambda v: len(v) >= n, n,
    )


def max_length(n: int, message: str | None = None) -> Constraint:
    return Constraint(
        "max_length", message or f"must be at most {n} characters",
        lambda v: len(v) <= n, n,
    )


def min_value(n: float, message: str | None = None) -> Constraint:
    return Constraint("min", message or f"must be at least {_fmt(n)}", lambda v: v >= n, n)


def max_value(n: float, message: str | None = None) -> Constraint:
    return Constraint("max", message or f"must be at most {_fmt(n)}", lambda v: v <= n, n)


def accepted(message: str | None = None) -> Constraint:
    return Constraint("accepted", message or "must be accepted", lambda v: v is True, True)


def one_of(choices: list[str] | tuple[str, ...], message: str | None = None) -> Constraint:
    allowed = tuple(choices)
    return Constraint(
        "one_of", message or f"must be one of: {', '.join(allowed)}",
        lambda v: v in allowed, allowed,
    )


def email(message: str | None = None) -> Constraint:
    return Constraint(
        "email", message or "invalid email address",
        lambda v: EMAIL_RE.match(v) is not None, None,
    )


def pattern(regex: str, message: str | None = None) -> Constraint:
    compiled = re.compile(regex)
    return Constraint(
        "pattern", message or "invalid format",
        lambda v: compiled.fullmatch(v) is not None, regex,
    )


def check(name: str, message: str | None = None) -> Constraint:
    """Reference a predicate registered with @constraint(name).

    The lookup happens at evaluation time so schemas can be parsed before
    the project's constraint modules are loaded. A declared message wins
    over one returned by the predicate.
    """
    def _run(value: Any) -> bool | str:
        fn = get_constraint(name)
        if fn is None:
            return f'unknown check "{name}"'
        result = fn(value)
        if result is True:
            return True
        return message or result

    return Constraint("check", message or "is invalid", _run, name)


def _fmt(n: float) -> str:
    return str(int(n)) if isinstance(n, float) and n.is_integer() else str(n)


# kind -> (factory, field types it applies to)
BUILTIN_KINDS: dict[str, tuple[Any, frozenset[str]]] = {
    "min_length": (min_length, frozenset({"string"})),
    "max_length": (max_length, frozenset({"string"})),
    "min": (min_value, frozenset({"number"})),
    "max": (max_value, frozenset({"number"})),
    "accepted": (accepted, frozenset({"boolean"})),
    "one_of": (one_of, frozenset({"string"})),
    "email": (email, frozenset({"string"})),
    "pattern": (pattern, frozenset({"string"})),
    "check": (check, frozenset({"string", "number", "boolean"})),
}

# Kinds whose factory takes no positional argument
FLAG_KINDS = frozenset({"accepted", "email"})
