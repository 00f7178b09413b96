"""Model-level validation utilities for data integrity.

Reusable validators that enforce business rules at the ORM level, so that
invalid data cannot reach the database regardless of which route or service
writes it.
"""

from decimal import Decimal
from enum import Enum


def non_negative(key: str, value):
    """Validate that a numeric value is >= 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v < 0:
            raise ValueError(f"{key} cannot be negative, got {value}")
    return value


def positive(key: str, value):
    """Validate that a numeric value is > 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v <= 0:
            raise ValueError(f"{key} must be positive, got {value}")
    return value


def percentage(key: str, value):
    """Validate that a value is between 0 and 100 inclusive."""
    if value is not None:
        v = Decimal(str(value))
        if v < 0 or v > 100:
            raise ValueError(f"{key} must be between 0 and 100, got {value}")
    return value


def one_of(key: str, value, allowed):
    """Validate that a value is one of the allowed choices.

    Enum members are stored as their plain value.
    """
    if isinstance(value, Enum):
        value = value.value
    if value is not None and value not in allowed:
        raise ValueError(f"{key} must be one of {sorted(allowed)}, got {value!r}")
    return value


def validate_list(key: str, value):
    """Validate that a JSON column value is a list (or None)."""
    if value is not None and not isinstance(value, list):
        raise ValueError(f"{key} must be a list, got {type(value).__name__}")
    return value
