"""Shared fixtures for form-playground tests."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from form_playground.engine.gateway import GatewayResult
from form_playground.engine.session import FormSession, SubmitResult
from form_playground.schema.catalog import get_builtin
from form_playground.schema.registry import clear_constraints, constraint, registered_constraints
from form_playground.store.records import RecordStore

if TYPE_CHECKING:
    from collections.abc import Mapping

    from form_playground.types import Schema

PLAYGROUND_DIR = Path(__file__).parent / ".playground"


class ScriptedGateway:
    """Gateway fake with no latency: answers from a queue, then succeeds.

    Queue items are GatewayResult values or exceptions to raise. Set
    ``hold`` to an asyncio.Event (inside the running loop) to keep the
    call in flight until the event is set.
    """

    def __init__(self, *results: GatewayResult | Exception):
        self.results = list(results)
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.hold: asyncio.Event | None = None

    async def submit(self, form: str, values: Mapping[str, Any]) -> GatewayResult:
        self.calls.append((form, dict(values)))
        if self.hold is not None:
            await self.hold.wait()
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return GatewayResult.success(id=len(self.calls))


class SessionHarness:
    """Drives one FormSession through its public API.

    submit() runs the coroutine to completion with asyncio.run, so tests
    stay synchronous unless they need to interleave calls.
    """

    def __init__(self, schema: str | Schema, *results: GatewayResult | Exception,
                 store: RecordStore | None = None, reset_on_success: bool = False):
        self.schema = get_builtin(schema) if isinstance(schema, str) else schema
        self.gateway = ScriptedGateway(*results)
        self.store = store if store is not None else RecordStore()
        self.session = FormSession(self.schema, self.gateway, self.store,
                                   reset_on_success=reset_on_success)

    @property
    def status(self) -> str:
        return self.session.status

    @property
    def errors(self) -> dict[str, str]:
        return self.session.errors

    def field(self, name: str):
        return self.session.fields[name]

    def set(self, name: str, value: Any) -> SubmitResult:
        return self.session.set_field(name, value)

    def fill(self, **values: Any) -> None:
        for name, value in values.items():
            self.session.set_field(name, value)

    def submit(self) -> SubmitResult:
        return asyncio.run(self.session.submit())

    def reset(self) -> SubmitResult:
        return self.session.reset()


@pytest.fixture
def harness_factory():
    def _make(schema: str | Schema, *results, **kwargs) -> SessionHarness:
        return SessionHarness(schema, *results, **kwargs)
    return _make


@pytest.fixture
def clean_registry():
    """Snapshot the constraint registry and restore it after the test."""
    saved = registered_constraints()
    yield saved
    clear_constraints()
    for name, predicate in saved.items():
        constraint(name)(predicate)


# ───Form definitions for tests ───

PRODUCT_YAML = """\
name: product
display: name
fields:
  - name
  - quantity:
      type: number
      min: 1
  - color:
      one_of: [red, green, blue]
"""

ORDERED_YAML = """\
name: ordered
fields:
  - code:
      required: true
      min_length:
        value: 4
        message: too short
      pattern:
        value: "[A-Z]+"
        message: uppercase only
"""
