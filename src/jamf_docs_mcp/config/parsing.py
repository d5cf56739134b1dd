"""Parsing helpers for configuration values.

Environment values arrive as strings; numeric settings that fail to parse keep
their default and produce a warning instead of aborting startup.
"""

from typing import Any, List


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_int(raw: str, default: int, name: str, warnings: List[str]) -> int:
    """Parse an integer env value, keeping ``default`` when it is malformed."""
    try:
        return int(raw.strip())
    except ValueError:
        message = f"Ignoring {name}={raw!r}: expected an integer, keeping {default}"
        warnings.append(message)
        return default


def _parse_millis(raw: str, default: float, name: str, warnings: List[str]) -> float:
    """Parse a millisecond env value into seconds."""
    try:
        return int(raw.strip()) / 1000
    except ValueError:
        message = f"Ignoring {name}={raw!r}: expected milliseconds, keeping {default}s"
        warnings.append(message)
        return default


def _parse_millis_to_seconds(raw: str, default: int, name: str, warnings: List[str]) -> int:
    """Parse a millisecond TTL env value into whole seconds."""
    try:
        return int(raw.strip()) // 1000
    except ValueError:
        message = f"Ignoring {name}={raw!r}: expected milliseconds, keeping {default}s"
        warnings.append(message)
        return default
