# File: weekplan/models/schedule.py

import datetime
from dataclasses import dataclass, field
from typing import List, Optional

from .common import time_to_minutes
from .enums import BlockStatus, EnergyType, SortOrder
from .utils import pick


@dataclass
class ScheduledBlock:
    """One scheduled occurrence of a task on a date/time range."""
    id: str
    task_id: str
    date: str          # "YYYY-MM-DD"
    start_time: str    # "HH:mm"
    end_time: str      # "HH:mm", may run past 23:59
    buffer_minutes: int
    energy: EnergyType
    sort_order: SortOrder
    status: BlockStatus = BlockStatus.PENDING
    skip_reason: Optional[str] = None

    def __post_init__(self):
        """Convert loose values to enums."""
        if isinstance(self.energy, str):
            self.energy = EnergyType(self.energy)
        if isinstance(self.status, str):
            self.status = BlockStatus(self.status)
        if isinstance(self.sort_order, int):
            self.sort_order = SortOrder(self.sort_order)

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    def duration_minutes(self) -> int:
        """Block length in minutes."""
        return self.end_minutes - self.start_minutes

    def is_active(self) -> bool:
        """Pending or in-progress blocks still hold capacity."""
        return self.status.is_active

    def overlaps_with(self, other: 'ScheduledBlock') -> bool:
        """Check if this block overlaps another on the same date."""
        if self.date != other.date:
            return False
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'task_id': self.task_id,
            'date': self.date,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'buffer_minutes': self.buffer_minutes,
            'energy': self.energy.value,
            'status': self.status.value,
            'skip_reason': self.skip_reason,
            'sort_order': self.sort_order.value,
        }


def block_from_dict(data: dict) -> ScheduledBlock:
    """Create ScheduledBlock from dictionary."""
    return ScheduledBlock(
        id=str(data['id']),
        task_id=str(pick(data, 'task_id', 'taskId')),
        date=str(data['date'])[:10],
        start_time=pick(data, 'start_time', 'startTime'),
        end_time=pick(data, 'end_time', 'endTime'),
        buffer_minutes=int(pick(data, 'buffer_minutes', 'bufferMinutes', default=0)),
        energy=pick(data, 'energy', 'energyType', default='Light'),
        sort_order=int(pick(data, 'sort_order', 'sortOrder', default=3)),
        status=data.get('status', 'pending'),
        skip_reason=pick(data, 'skip_reason', 'skipReason'),
    )


@dataclass(frozen=True)
class UnscheduledTask:
    """A task that was due this week but did not fit."""
    task_id: str
    reason: str

    def to_dict(self) -> dict:
        return {'task_id': self.task_id, 'reason': self.reason}


@dataclass
class WeeklySchedule:
    """Result of one allocator run for a 7-day window."""
    week_start: str
    blocks: List[ScheduledBlock] = field(default_factory=list)
    unscheduled: List[UnscheduledTask] = field(default_factory=list)
    generated_at: datetime.datetime = field(default_factory=datetime.datetime.now)

    def blocks_for_date(self, date: str) -> List[ScheduledBlock]:
        """Blocks on one date, in output order."""
        return [b for b in self.blocks if b.date == date]

    def scheduled_task_ids(self) -> List[str]:
        return [b.task_id for b in self.blocks]

    def has_conflicts(self) -> bool:
        """Check if any two active blocks overlap."""
        active = [b for b in self.blocks if b.is_active()]
        for i, block1 in enumerate(active):
            for block2 in active[i+1:]:
                if block1.overlaps_with(block2):
                    return True
        return False

    def is_newer_than(self, other: Optional['WeeklySchedule']) -> bool:
        """Used by state stores to drop a stale generation."""
        return other is None or self.generated_at >= other.generated_at

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'week_start': self.week_start,
            'blocks': [b.to_dict() for b in self.blocks],
            'unscheduled': [u.to_dict() for u in self.unscheduled],
            'generated_at': self.generated_at.isoformat(),
        }
