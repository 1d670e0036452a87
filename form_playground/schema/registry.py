"""Custom constraint predicates, registered in code or loaded from .py files."""
from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    Predicate = Callable[[Any], bool | str]

logger = logging.getLogger(__name__)

_CONSTRAINT_REGISTRY: dict[str, Predicate] = {}


def constraint(name: str | None = None):
    """Register a custom predicate for use as ``check: <name>`` in a schema.

    Usage in .playground/constraints/slug.py::

        from form_playground.schema.registry import constraint

        @constraint("slug")
        def slug(value):
            return True if value.replace("-", "").isalnum() else "must be a slug"

    A predicate returns True to pass; False or a message string to fail.
    """
    def decorator(fn: Predicate) -> Predicate:
        _CONSTRAINT_REGISTRY[name or fn.__name__] = fn
        return fn
    return decorator


def load_constraints(constraints_dir: str | Path) -> dict[str, Predicate]:
    """Import every *.py file in a directory so its @constraint predicates register."""
    path = Path(constraints_dir)
    if not path.is_dir():
        return registered_constraints()

    for py_file in sorted(path.glob("*.py")):
        try:
            spec = importlib.util.spec_from_file_location(f"playground_constraints.{py_file.stem}", py_file)
            if not spec or not spec.loader:
                continue
            mod = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(mod)
        except Exception as e:
            logger.warning("failed to load constraints from %s: %s", py_file, e)

    return registered_constraints()


def get_constraint(name: str) -> Predicate | None:
    return _CONSTRAINT_REGISTRY.get(name)


def registered_constraints() -> dict[str, Predicate]:
    """Copy of the registry, name → predicate."""
    return dict(_CONSTRAINT_REGISTRY)


def clear_constraints() -> None:
    _CONSTRAINT_REGISTRY.clear()
