"""Submission gateways — the simulated backend behind every form.

A gateway is any object with ``async submit(form, values) -> GatewayResult``.
It never retries; a failed submission needs an explicit re-submit.
"""
from __future__ import annotations

import asyncio
import logging
import random
from itertools import count
from typing import TYPE_CHECKING, Any, Protocol

from form_playground.auth import InvalidCredentials, verify_credentials

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from form_playground.auth import User
    from form_playground.types import TypedValue

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid_credentials"
SERVER_ERROR = "server_error"
FAILURE_REASONS = frozenset({INVALID_CREDENTIALS, SERVER_ERROR})

SERVER_ERROR_MESSAGE = "Something went wrong. Please try again."


class GatewayResult:
    def __init__(self, ok: bool, message: str = "", reason: str | None = None,
                 ack: dict[str, Any] | None = None):
        self.ok = ok
        self.message = message
        self.reason = reason  # None on success, else one of FAILURE_REASONS
        self.ack = ack or {}

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str = "Submitted", **ack: Any) -> GatewayResult:
        return cls(True, message, ack=ack)

    @classmethod
    def failure(cls, reason: str, message: str) -> GatewayResult:
        return cls(False, message, reason=reason)

    def to_dict(self) -> dict:
        return {"ok": self.ok, "message": self.message, "reason": self.reason, "ack": self.ack}


class Gateway(Protocol):
    async def submit(self, form: str, values: Mapping[str, TypedValue]) -> GatewayResult: ...


# ─── Simulated latency ───

class _Latency:
    def __init__(self, delay: float, jitter: float = 0.0, rng: random.Random | None = None,
                 sleep: Callable[[float], Awaitable[Any]] | None = None):
        if delay < 0 or jitter < 0:
            raise ValueError("delay and jitter must not be negative")
        self.delay = delay
        self.jitter = jitter
        self.rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep

    def next_delay(self) -> float:
        return self.delay + (self.rng.uniform(0, self.jitter) if self.jitter else 0.0)

    async def wait(self) -> None:
        await self._sleep(self.next_delay())


class SimulatedGateway(_Latency):
    """Accepts every record after a delay, failing with server_error at failure_rate."""

    def __init__(self, delay: float = 1.0, jitter: float = 0.0, failure_rate: float = 0.0,
                 rng: random.Random | None = None,
                 sleep: Callable[[float], Awaitable[Any]] | None = None):
        super().__init__(delay, jitter, rng, sleep)
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self._ids = count(1)

    async def submit(self, form: str, values: Mapping[str, TypedValue]) -> GatewayResult:
        await self.wait()
        if self.failure_rate and self.rng.random() < self.failure_rate:
            logger.warning("simulated server error for form %s", form)
            return GatewayResult.failure(SERVER_ERROR, SERVER_ERROR_MESSAGE)
        return GatewayResult.success(id=next(self._ids))


class CredentialGateway(_Latency):
    """Adapts the credential-verification service to the gateway contract."""

    def __init__(self, verify: Callable[[str, str, bool], User] = verify_credentials,
                 delay: float = 1.0, jitter: float = 0.0, rng: random.Random | None = None,
                 sleep: Callable[[float], Awaitable[Any]] | None = None):
        super().__init__(delay, jitter, rng, sleep)
        self.verify = verify

    async def submit(self, form: str, values: Mapping[str, TypedValue]) -> GatewayResult:
        await self.wait()
        try:
            user = self.verify(
                str(values.get("username") or ""),
                str(values.get("password") or ""),
                bool(values.get("remember")),
            )
        except InvalidCredentials as e:
            return GatewayResult.failure(INVALID_CREDENTIALS, str(e))
        return GatewayResult.success(f"Logged in as {user.username}", user=user.username, remember=user.remember)
