"""Typed error model with stable, machine-readable error codes.

Recipe content never raises: malformed or unusual recipes are data to
classify. These errors cover caller-level failures only.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    VALIDATION = "E_VALIDATION"
    CONFIG = "E_CONFIG"
    RECIPE = "E_RECIPE"
    TRAVERSAL = "E_TRAVERSAL"


class FsckError(Exception):
    """Caller-level failure. Subclasses pick the code; hint and context are optional."""

    error_code: ClassVar[ErrorCode]

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.context = dict(context or {})

    @property
    def code(self) -> str:
        return self.error_code.value

    def __str__(self) -> str:
        lines = [self.message]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        lines.extend(f"  {key}: {value}" for key, value in self.context.items() if value)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(FsckError):
    """A user-supplied value (issue filter, option) is not acceptable."""

    error_code = ErrorCode.VALIDATION


class ConfigError(FsckError):
    error_code = ErrorCode.CONFIG


class RecipeError(FsckError):
    """A PKGBUILD is missing or unreadable."""

    error_code = ErrorCode.RECIPE


class TraversalError(FsckError):
    error_code = ErrorCode.TRAVERSAL


__all__ = [
    "ConfigError",
    "ErrorCode",
    "FsckError",
    "RecipeError",
    "TraversalError",
    "ValidationError",
]
