"""Exception hierarchy for treetrace."""

from __future__ import annotations

from typing import Any


class TreeTraceError(Exception):
    """Base exception for all treetrace errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidKeyError(TreeTraceError, ValueError):
    """A key is not a finite real number."""

    def __init__(self, message: str, index: int | None = None, value: Any = None):
        details: dict[str, Any] = {}
        if index is not None:
            details["index"] = index
            details["value"] = repr(value)
        super().__init__(message, details)
        self.index = index
        self.value = value


class EmptyTraceError(TreeTraceError):
    """An operation needs at least one snapshot."""


class InvariantError(TreeTraceError, AssertionError):
    """A tree violates a structural invariant."""

    def __init__(self, message: str, invariant: str, value: Any = None):
        super().__init__(message, details={"invariant": invariant, "value": value})
        self.invariant = invariant
        self.value = value


class UnknownEngineError(TreeTraceError, KeyError):
    """No insertion engine is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        super().__init__(
            f"unknown insertion engine {name!r}",
            details={"available": list(available or [])},
        )
        self.name = name

    def __str__(self) -> str:
        return self.message
