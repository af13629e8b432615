"""Rating engine and match scheduling domain modules."""

from clubladder.domain.validation import (
    Invalid,
    Valid,
    ValidationError,
    ValidationResult,
    require_valid,
)

__all__ = ["Invalid", "Valid", "ValidationError", "ValidationResult", "require_valid"]
