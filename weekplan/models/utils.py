# File: weekplan/models/utils.py

from typing import Any, Optional


def pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key; state files use camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def parse_bool(value: Any, default: bool = False) -> bool:
    """Loose boolean parsing ("Yes", "true", 1...)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ['yes', 'true', '1', 'active', 'y', 't']


def optional_int(value: Any) -> Optional[int]:
    """Handle "5", "5.0", 5 and empty values."""
    if value is None or value == '':
        return None
    return int(float(value))
