# File: weekplan/models/goals.py

import math
from dataclasses import dataclass
from typing import Optional

from .utils import pick, parse_bool, optional_int


@dataclass
class Goal:
    """A user-declared weekly objective."""
    id: str
    name: str
    priority_tier: int = 2  # 1 highest .. 3 lowest
    weekly_quota_hours: Optional[float] = None
    weekly_quota_sessions: Optional[int] = None
    daily_repetition: Optional[int] = None
    target_metric: Optional[str] = None
    active: bool = True

    def __post_init__(self):
        """Validate tier and quotas."""
        if isinstance(self.priority_tier, str):
            self.priority_tier = int(self.priority_tier)
        if self.priority_tier not in (1, 2, 3):
            raise ValueError(f"Priority tier must be 1, 2 or 3: {self.name}")
        if self.weekly_quota_hours is not None and self.weekly_quota_hours < 0:
            raise ValueError(f"Weekly quota hours cannot be negative: {self.name}")
        if self.weekly_quota_sessions is not None and self.weekly_quota_sessions < 0:
            raise ValueError(f"Weekly quota sessions cannot be negative: {self.name}")

    @property
    def weekly_sessions(self) -> int:
        """Sessions to place this week; 0 means nothing to allocate."""
        if self.weekly_quota_sessions is not None:
            return self.weekly_quota_sessions
        if self.weekly_quota_hours:
            return math.ceil(self.weekly_quota_hours)
        return 0

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'priority_tier': self.priority_tier,
            'weekly_quota_hours': self.weekly_quota_hours,
            'weekly_quota_sessions': self.weekly_quota_sessions,
            'daily_repetition': self.daily_repetition,
            'target_metric': self.target_metric,
            'active': self.active,
        }


def goal_from_dict(data: dict) -> Goal:
    """Create Goal from dictionary (camelCase or snake_case keys)."""
    raw_hours = pick(data, 'weekly_quota_hours', 'weeklyQuotaHours')
    return Goal(
        id=str(data.get('id', '')),
        name=str(data.get('name', 'Untitled Goal')),
        priority_tier=int(pick(data, 'priority_tier', 'priorityTier', default=2)),
        weekly_quota_hours=float(raw_hours) if raw_hours not in (None, '') else None,
        weekly_quota_sessions=optional_int(pick(data, 'weekly_quota_sessions', 'weeklyQuotaSessions')),
        daily_repetition=optional_int(pick(data, 'daily_repetition', 'dailyRepetition')),
        target_metric=pick(data, 'target_metric', 'targetMetric'),
        active=parse_bool(data.get('active'), default=True),
    )
