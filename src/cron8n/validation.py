"""
Validating parse helpers.

Parse functions for on-disk and over-the-wire documents return a ParseResult
instead of raising, so callers decide whether a bad document is fatal
(single manifest load) or skippable (bulk load, corrupt registry).
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class ParseResult(Generic[T]):
    """Outcome of parsing an untrusted document."""

    success: bool
    value: T | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def error(self) -> str | None:
        return "; ".join(self.errors) if self.errors else None

    @classmethod
    def ok(cls, value: T) -> "ParseResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, *errors: str) -> "ParseResult[T]":
        return cls(success=False, errors=list(errors))


def require_str(data: dict, key: str, errors: list[str]) -> str:
    """Read a required string field, recording an error if absent or mistyped."""
    value = data.get(key)
    if not isinstance(value, str):
        errors.append(f"'{key}' must be a string")
        return ""
    return value


def optional_str(data: dict, key: str, errors: list[str]) -> str | None:
    """Read an optional string field; null and absence both mean None."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(f"'{key}' must be a string when present")
        return None
    return value


def require_str_list(data: dict, key: str, errors: list[str]) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        errors.append(f"'{key}' must be a list of strings")
        return []
    return list(value)


def as_dict(value: Any) -> dict:
    """Return value if it is a dict, else an empty dict."""
    return value if isinstance(value, dict) else {}
