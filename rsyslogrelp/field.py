"""Field paths and field-level validation errors."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Kind of a field validation error."""

    REQUIRED = "FieldValueRequired"
    INVALID = "FieldValueInvalid"
    NOT_SUPPORTED = "FieldValueNotSupported"

    @property
    def description(self) -> str:
        if self is ErrorType.REQUIRED:
            return "Required value"
        if self is ErrorType.INVALID:
            return "Invalid value"
        return "Unsupported value"


class Path:
    """An immutable path to a field, such as ``spec.extensions[0].providerConfig``."""

    __slots__ = ("_segments",)

    def __init__(self, name: str, *more: str) -> None:
        self._segments: tuple[str | int, ...] = (name, *more)

    @classmethod
    def _from_segments(cls, segments: tuple[str | int, ...]) -> Path:
        path = cls.__new__(cls)
        path._segments = segments
        return path

    def child(self, name: str, *args: str) -> Path:
        """Return the path of a named sub-field."""
        return self._from_segments(self._segments + (name, *args))

    def index(self, i: int) -> Path:
        """Return the path of an element of a list field."""
        return self._from_segments(self._segments + (int(i),))

    def __str__(self) -> str:
        parts = []
        for position, segment in enumerate(self._segments):
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif position > 0:
                parts.append("." + segment)
            else:
                parts.append(segment)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    return repr(value)


@dataclass(frozen=True)
class FieldError:
    """A single validation problem found at a field."""

    type: ErrorType
    field: str
    bad_value: Any
    detail: str

    @property
    def body(self) -> str:
        """The message without the field name."""
        text = self.type.description
        if self.type is not ErrorType.REQUIRED:
            text += ": " + _format_value(self.bad_value)
        if self.detail:
            text += ": " + self.detail
        return text

    def __str__(self) -> str:
        return f"{self.field}: {self.body}"


class ValidationError(ValueError):
    """One or more field errors, raised together."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors: tuple[FieldError, ...] = tuple(errors)
        messages = [str(error) for error in self.errors]
        message = messages[0] if len(messages) == 1 else "[" + ", ".join(messages) + "]"
        super().__init__(message)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


def required(path: Path, detail: str) -> FieldError:
    """A required value is missing."""
    return FieldError(ErrorType.REQUIRED, str(path), "", detail)


def invalid(path: Path, value: Any, detail: str) -> FieldError:
    """A value is present but not acceptable."""
    return FieldError(ErrorType.INVALID, str(path), value, detail)


def not_supported(path: Path, value: Any, valid_values: Sequence[str]) -> FieldError:
    """A value is not one of the supported choices."""
    detail = ""
    if valid_values:
        detail = "supported values: " + ", ".join(json.dumps(v) for v in valid_values)
    return FieldError(ErrorType.NOT_SUPPORTED, str(path), value, detail)


def aggregate(errors: Iterable[FieldError]) -> ValidationError | None:
    """Combine errors into one exception, dropping duplicates; None if there are none."""
    unique: list[FieldError] = []
    seen: set[str] = set()
    for error in errors:
        message = str(error)
        if message not in seen:
            seen.add(message)
            unique.append(error)
    return ValidationError(unique) if unique else None