"""Lenient coercion of raw store values; anything unusable becomes None."""
import math
from typing import Optional


def as_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    # "nan" and "inf" parse but are not usable values
    return result if math.isfinite(result) else None


def as_int(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError, OverflowError):
        return None


def as_bool(value) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
        return None
    return bool(value)


def as_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_set(value) -> set:
    if not value:
        return set()
    if isinstance(value, str):
        return {part.strip() for part in value.split(",") if part.strip()}
    return {str(item).strip() for item in value if str(item).strip()}


