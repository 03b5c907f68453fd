"""
API key storage interface.

The client never persists the key itself; it talks to whatever store the
host application provides through this small get/set/remove/validate
interface.
"""

import re
from typing import Optional, Protocol, runtime_checkable

from ..config.constants import API_KEY_PATTERN

_API_KEY_RE = re.compile(API_KEY_PATTERN)


def validate_api_key(key: Optional[str]) -> bool:
    """Check the key shape: 32-128 chars of letters, digits, ``-``, ``_`` or ``.``."""
    if not key:
        return False
    return bool(_API_KEY_RE.match(key))


@runtime_checkable
class CredentialStore(Protocol):
    """Key-value store for the API key."""

    def get(self) -> Optional[str]:
        ...

    def set(self, key: str) -> None:
        ...

    def remove(self) -> None:
        ...

    def validate(self, key: str) -> bool:
        ...


class InMemoryCredentialStore:
    """Process-local store; useful for tests and short-lived scripts."""

    def __init__(self, key: Optional[str] = None):
        self._key = key

    def get(self) -> Optional[str]:
        return self._key

    def set(self, key: str) -> None:
        self._key = key

    def remove(self) -> None:
        self._key = None

    def validate(self, key: str) -> bool:
        return validate_api_key(key)
