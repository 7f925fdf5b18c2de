"""Exception hierarchy for dotstore."""

from __future__ import annotations


class DotStoreError(Exception):
    """Base exception for all dotstore errors."""


class StoreUsageError(DotStoreError, RuntimeError):
    """A scoped store was requested outside the scope that provides it."""


class MalformedInstructionError(DotStoreError, ValueError):
    """The debug bridge delivered a payload that cannot be decoded.

    Never escapes message handling: the bridge logs it and drops the message.
    """

    def __init__(self, message: str, *, raw: object = None) -> None:
        self.raw = raw
        super().__init__(message)
