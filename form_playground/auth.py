"""Mocked credential verification used by the login form."""
from __future__ import annotations

from dataclasses import dataclass

# username -> password
DEMO_USERS: dict[str, str] = {"admin": "test"}


class InvalidCredentials(Exception):
    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


@dataclass(frozen=True)
class User:
    username: str
    remember: bool = False


def verify_credentials(username: str, password: str, remember: bool = False) -> User:
    if DEMO_USERS.get(username) != password:
        raise InvalidCredentials()
    return User(username=username, remember=remember)
