"""Form session — per-form state machine mediating edits and submits.

    idle → validating → submitting → success | failed
                 └──→ idle (field errors, gateway never called)

success/failed return to idle on the next edit; reset() returns to idle
from anywhere. At most one submission is in flight per session.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from form_playground.engine.gateway import SERVER_ERROR, SERVER_ERROR_MESSAGE, GatewayResult
from form_playground.engine.validator import validate_field, validate_form
from form_playground.types import (
    BUSY_STATUSES,
    FAILED,
    IDLE,
    SUBMITTING,
    SUCCESS,
    VALIDATING,
    FieldState,
    Record,
)

if TYPE_CHECKING:
    from form_playground.engine.gateway import Gateway
    from form_playground.store.records import RecordStore
    from form_playground.types import Schema

logger = logging.getLogger(__name__)


# ─── Result type ───

class SubmitResult:
    def __init__(self, success: bool, message: str, status: str,
                 errors: dict[str, str] | None = None, reason: str | None = None,
                 record: Record | None = None, ignored: bool = False):
        self.success = success
        self.message = message
        self.status = status
        self.errors = errors or {}
        self.reason = reason
        self.record = record
        self.ignored = ignored

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "status": self.status,
            "errors": self.errors,
            "reason": self.reason,
            "record": self.record.to_dict() if self.record else None,
            "ignored": self.ignored,
        }


# ─── Session ───

class FormSession:
    def __init__(self, schema: Schema, gateway: Gateway, store: RecordStore, *,
                 reset_on_success: bool = False, history_limit: int = 50):
        self.schema = schema
        self.gateway = gateway
        self.store = store
        self.reset_on_success = reset_on_success
        self.status = IDLE
        self.fields: dict[str, FieldState] = {}
        self.form_error: str | None = None
        self.submit_attempted = False
        self.last_record: Record | None = None
        self.last_ack: dict[str, Any] = {}
        # bumped by reset(); a submission whose token is stale is discarded
        self._token = 0
        self._history: deque[dict[str, Any]] = deque(maxlen=history_limit)
        self._clear_fields()

    # ─── Intents ───

    def set_field(self, name: str, raw: Any) -> SubmitResult:
        descriptor = self.schema.get(name)
        if self.busy:
            return SubmitResult(
                False,
                f'Form "{self.schema.name}" is {self.status}; inputs are disabled until it finishes.',
                self.status, ignored=True,
            )

        state = self.fields[name]
        state.value = raw
        state.touched = True
        self.form_error = None
        if self.status in (SUCCESS, FAILED):
            self._set_status(IDLE)

        # live re-validation only once the user has tried to submit
        if self.submit_attempted:
            result = validate_field(self.schema, name, raw)
            state.error = None if result else result.error

        self._record("set_field", name)
        if state.error:
            return SubmitResult(False, f"{descriptor.display_label}: {state.error}", self.status,
                                errors={name: state.error})
        return SubmitResult(True, f"{descriptor.display_label} updated", self.status)

    async def submit(self) -> SubmitResult:
        if self.busy:
            self._record("submit", "ignored")
            return SubmitResult(False, "A submission is already in progress.", self.status, ignored=True)

        self._set_status(VALIDATING)
        self.submit_attempted = True
        self.form_error = None

        checked = validate_form(self.schema, self.raw_values())
        if not checked:
            for name, state in self.fields.items():
                state.error = checked.errors.get(name)
            self._set_status(IDLE)
            self._record("submit", "rejected")
            return SubmitResult(
                False,
                f"{len(checked.errors)} field(s) need attention: {', '.join(checked.errors)}",
                self.status, errors=dict(checked.errors),
            )

        for state in self.fields.values():
            state.error = None
        self._set_status(SUBMITTING)
        token = self._token

        try:
            outcome = await self.gateway.submit(self.schema.name, checked.values)
        except asyncio.CancelledError:
            if token == self._token:
                self._set_status(IDLE)
            raise
        except Exception as e:
            logger.warning("gateway for %s raised: %s", self.schema.name, e)
            outcome = GatewayResult.failure(SERVER_ERROR, SERVER_ERROR_MESSAGE)

        if token != self._token:
            logger.debug("discarding stale submission for %s", self.schema.name)
            return SubmitResult(False, "Submission discarded: the form was reset.", self.status, ignored=True)

        if not outcome:
            self.form_error = outcome.message
            self._set_status(FAILED)
            self._record("submit", outcome.reason or "failed")
            return SubmitResult(False, outcome.message, self.status, reason=outcome.reason)

        record = Record(self.schema.name, checked.values)
        self.store.append(record)
        self.last_record = record
        self.last_ack = dict(outcome.ack)
        self._set_status(SUCCESS)
        if self.reset_on_success:
            self._clear_fields()
        self._record("submit", "success")
        return SubmitResult(True, outcome.message or "Submitted", self.status, record=record)

    def reset(self) -> SubmitResult:
        self._token += 1
        self._clear_fields()
        self.form_error = None
        self.submit_attempted = False
        self.last_ack = {}
        self._set_status(IDLE)
        self._record("reset")
        return SubmitResult(True, f'Form "{self.schema.name}" reset', self.status)

    # ─── Views ───

    @property
    def busy(self) -> bool:
        return self.status in BUSY_STATUSES

    @property
    def errors(self) -> dict[str, str]:
        return {name: st.error for name, st in self.fields.items() if st.error}

    def raw_values(self) -> dict[str, Any]:
        return {name: st.value for name, st in self.fields.items()}

    def snapshot(self) -> dict[str, Any]:
        return {
            "form": self.schema.name,
            "status": self.status,
            "form_error": self.form_error,
            "submit_attempted": self.submit_attempted,
            "last_ack": dict(self.last_ack),
            "fields": {
                name: {"value": st.value, "touched": st.touched, "error": st.error}
                for name, st in self.fields.items()
            },
        }

    def get_history(self, limit: int = 20) -> list[dict[str, Any]]:
        return list(reversed(self._history))[:limit]

    # ─── Private ───

    def _clear_fields(self) -> None:
        self.fields = {f.name: FieldState(value=f.initial_value()) for f in self.schema.fields}

    def _set_status(self, status: str) -> None:
        if status != self.status:
            logger.debug("%s: %s → %s", self.schema.name, self.status, status)
        self.status = status

    def _record(self, action: str, detail: str | None = None) -> None:
        self._history.append({
            "action": action,
            "detail": detail,
            "status": self.status,
            "timestamp": datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S"),
        })
