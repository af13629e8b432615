"""Validation results shared by rating and scheduling inputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Successful validation carrying the accepted value."""

    value: T
    ok: bool = True


@dataclass(frozen=True)
class Invalid:
    """Failed validation carrying every rule violation found."""

    errors: tuple[str, ...]
    ok: bool = False


ValidationResult = Union[Valid[T], Invalid]


class ValidationError(ValueError):
    """Raised when a caller insists on a value that failed validation."""

    def __init__(self, errors: tuple[str, ...]) -> None:
        self.errors = tuple(errors)
        super().__init__("; ".join(self.errors) or "validation failed")


def collect(value: T, errors: list[str]) -> ValidationResult[T]:
    """Build a result from a value and the errors gathered while checking it."""
    if errors:
        return Invalid(errors=tuple(errors))
    return Valid(value=value)


def require_valid(result: ValidationResult[T]) -> T:
    """Return the validated value or raise ValidationError."""
    if isinstance(result, Invalid):
        raise ValidationError(result.errors)
    return result.value


def is_score(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = [
    "Invalid",
    "Valid",
    "ValidationError",
    "ValidationResult",
    "collect",
    "is_score",
    "require_valid",
]
