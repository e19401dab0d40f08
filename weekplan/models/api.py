# File: weekplan/models/api.py
"""
Result and error types shared across Weekplan.
"""

from dataclasses import dataclass
from typing import Optional


class InputValidationError(ValueError):
    """Malformed date/time strings or settings. Prevents any output."""


class BlockTransitionError(ValueError):
    """Illegal status change on a scheduled block."""


@dataclass(frozen=True)
class LimitCheck:
    """Outcome of a daily-limit test. Never raised, always returned."""
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class ValidationError:
    """Represents a validation error on a loaded record."""
    field: str
    message: str
    entry_index: Optional[int] = None

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"Entry {self.entry_index} - {self.field}: {self.message}"
        return f"{self.field}: {self.message}"
