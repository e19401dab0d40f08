# File: weekplan/models/tasks.py

import datetime
import math
from dataclasses import dataclass
from typing import Optional

from .utils import pick, parse_bool
from .enums import EnergyType, TaskKind
from .common import format_date, parse_date, time_to_minutes

MICRO_TASK_MAX_MINUTES = 15


@dataclass
class Task:
    """A unit of schedulable work."""
    id: str
    title: str
    kind: TaskKind
    estimated_minutes: int
    energy: EnergyType = EnergyType.LIGHT
    goal_id: Optional[str] = None
    deadline: Optional[str] = None   # "YYYY-MM-DD"
    due_time: Optional[str] = None   # "HH:mm"
    location: Optional[str] = None
    completed: bool = False

    def __post_init__(self):
        """Validate task data and auto-convert types."""
        if isinstance(self.kind, str):
            self.kind = TaskKind(self.kind)
        if isinstance(self.energy, str):
            self.energy = EnergyType(self.energy)
        if self.estimated_minutes < 0:
            raise ValueError(f"Estimated minutes cannot be negative: {self.title}")

        # Deadlines may arrive as full ISO timestamps; only the date matters
        if isinstance(self.deadline, str):
            self.deadline = format_date(parse_date(self.deadline.strip()[:10]))
        elif isinstance(self.deadline, datetime.date):
            self.deadline = format_date(parse_date(self.deadline))
        if self.due_time is not None:
            time_to_minutes(self.due_time)

    def buffered_minutes(self, buffer_percent: float) -> int:
        """Estimate plus the planning buffer, rounded up."""
        return math.ceil(self.estimated_minutes * (100 + buffer_percent) / 100)

    @property
    def is_fixed(self) -> bool:
        """Placed at its own time, never moved by the allocator."""
        if self.kind == TaskKind.FIXED_EVENT:
            return True
        return self.kind == TaskKind.DEADLINE_TASK and bool(self.due_time)

    @property
    def is_micro(self) -> bool:
        return self.kind == TaskKind.MICRO_TASK and self.estimated_minutes <= MICRO_TASK_MAX_MINUTES

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'kind': self.kind.value,
            'estimated_minutes': self.estimated_minutes,
            'energy': self.energy.value,
            'goal_id': self.goal_id,
            'deadline': self.deadline,
            'due_time': self.due_time,
            'location': self.location,
            'completed': self.completed,
        }


def task_from_dict(data: dict) -> Task:
    """Create Task from dictionary with type safety."""
    raw_energy = pick(data, 'energy', 'energyType', default='Light')
    try:
        energy = EnergyType(raw_energy) if isinstance(raw_energy, str) else raw_energy
    except ValueError:
        energy = EnergyType.LIGHT  # Unknown energy is treated as cheap

    return Task(
        id=str(data.get('id', '')),
        title=str(data.get('title', 'Untitled Task')),
        kind=TaskKind(pick(data, 'kind', 'taskType', default='GoalTask')),
        estimated_minutes=int(float(pick(data, 'estimated_minutes', 'estimatedMinutes', default=30))),
        energy=energy,
        goal_id=pick(data, 'goal_id', 'goalId'),
        deadline=data.get('deadline') or None,
        due_time=pick(data, 'due_time', 'dueTime') or None,
        location=data.get('location'),
        completed=parse_bool(data.get('completed'), default=False),
    )
