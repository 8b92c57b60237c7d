"""Provider API key holder, injected into the clients that need it."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ApiKeyStore:
    """
    Holds one opaque provider credential.

    Loaded from settings at app startup and changed only through set().
    The value is never inspected, only passed to the provider.
    """

    def __init__(self, name: str, value: Optional[str] = None):
        self.name = name
        self._value = (value or '').strip()

    def get(self) -> str:
        return self._value

    def set(self, value: str) -> None:
        self._value = (value or '').strip()
        logger.info(f"{self.name} API key {'updated' if self._value else 'cleared'}")

    def has(self) -> bool:
        return bool(self._value)

    def __repr__(self):
        return f"ApiKeyStore({self.name!r}, configured={self.has()})"
