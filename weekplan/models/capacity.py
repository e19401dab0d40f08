# File: weekplan/models/capacity.py
"""
The user's availability envelope.
"""

from dataclasses import dataclass

from .api import InputValidationError
from .common import time_to_minutes
from .utils import pick

BUFFER_PERCENT_MIN = 15
BUFFER_PERCENT_MAX = 40


@dataclass
class CapacitySettings:
    """Weekly availability and daily caps. One per user."""
    weekly_discretionary_hours: float = 25
    sleep_start: str = "23:00"  # "HH:MM" format
    sleep_end: str = "07:00"
    work_start: str = "09:00"
    work_end: str = "17:00"
    work_days: int = 5
    max_deep_blocks_per_day: int = 3
    max_planned_hours_per_day: float = 6
    buffer_percent: float = 25

    def __post_init__(self):
        """Reject settings the allocator cannot work with."""
        for name in ('sleep_start', 'sleep_end', 'work_start', 'work_end'):
            time_to_minutes(getattr(self, name))

        if self.work_end_minutes <= self.work_start_minutes:
            raise InputValidationError(
                f"Work end {self.work_end} must be after work start {self.work_start}"
            )
        if not 0 <= self.work_days <= 7:
            raise InputValidationError(f"Work days must be between 0 and 7: {self.work_days}")
        if self.max_deep_blocks_per_day < 0:
            raise InputValidationError("Max deep blocks per day cannot be negative")
        if self.max_planned_hours_per_day <= 0:
            raise InputValidationError("Max planned hours per day must be positive")
        if not BUFFER_PERCENT_MIN <= self.buffer_percent <= BUFFER_PERCENT_MAX:
            raise InputValidationError(
                f"Buffer percent must be between {BUFFER_PERCENT_MIN} and "
                f"{BUFFER_PERCENT_MAX}: {self.buffer_percent}"
            )

    @property
    def work_start_minutes(self) -> int:
        return time_to_minutes(self.work_start)

    @property
    def work_end_minutes(self) -> int:
        return time_to_minutes(self.work_end)

    @property
    def work_window_minutes(self) -> int:
        return self.work_end_minutes - self.work_start_minutes

    @property
    def max_planned_minutes_per_day(self) -> float:
        return self.max_planned_hours_per_day * 60

    def to_dict(self) -> dict:
        return {
            'weekly_discretionary_hours': self.weekly_discretionary_hours,
            'sleep_start': self.sleep_start,
            'sleep_end': self.sleep_end,
            'work_start': self.work_start,
            'work_end': self.work_end,
            'work_days': self.work_days,
            'max_deep_blocks_per_day': self.max_deep_blocks_per_day,
            'max_planned_hours_per_day': self.max_planned_hours_per_day,
            'buffer_percent': self.buffer_percent,
        }

    @classmethod
    def from_dict(cls, data: dict, defaults: 'CapacitySettings' = None) -> 'CapacitySettings':
        """Create settings from a dictionary, filling gaps from defaults."""
        base = (defaults or cls()).to_dict()
        camel = {
            'weekly_discretionary_hours': 'weeklyDiscretionaryHours',
            'sleep_start': 'sleepStart',
            'sleep_end': 'sleepEnd',
            'work_start': 'workStart',
            'work_end': 'workEnd',
            'work_days': 'workDays',
            'max_deep_blocks_per_day': 'maxDeepBlocksPerDay',
            'max_planned_hours_per_day': 'maxPlannedHoursPerDay',
            'buffer_percent': 'bufferPercent',
        }
        merged = {key: pick(data, key, camel[key], default=value) for key, value in base.items()}
        return cls(**merged)
