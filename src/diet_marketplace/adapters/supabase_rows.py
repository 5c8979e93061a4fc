"""Conversions between Supabase rows and Python values."""

from datetime import datetime
from uuid import UUID


def to_column(value: object) -> object:
    """Convert a Python value into something PostgREST accepts."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def to_columns(values: dict[str, object]) -> dict[str, object]:
    """Convert every value of a column mapping."""
    return {key: to_column(value) for key, value in values.items()}


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO timestamp column."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def parse_uuid(value: object) -> UUID | None:
    """Parse an optional uuid column."""
    if value is None or value == "":
        return None
    return UUID(str(value))


def parse_float(value: object, default: float = 0.0) -> float:
    """Parse a numeric column that may be null."""
    if value is None:
        return default
    return float(value)


def parse_optional_float(value: object) -> float | None:
    """Parse a nullable numeric column."""
    if value is None:
        return None
    return float(value)


def parse_strings(value: object) -> list[str]:
    """Parse a text[] or json array column into strings."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]
