"""Lenient value coercion for upstream dicts and bot payloads.

None of these raise: bad values fall back to a neutral default.
"""

from typing import Any


def first_of(data: dict, *keys: str, default: Any = None) -> Any:
    """First present, non-None key wins (camelCase or snake_case)."""
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return default


def as_bool(value: Any) -> bool:
    """Booleans, plus "true"/"yes"/"1" strings. "false" is False."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def as_int(value: Any, default: int = 0, minimum: int | None = 0) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    if minimum is not None and n < minimum:
        return minimum
    return n


def as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_str_list(value: Any) -> list[str]:
    """A list of non-blank strings; a bare string becomes a one-item list."""
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]
