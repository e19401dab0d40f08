# File: weekplan/models/enums.py

from enum import Enum


class EnergyType(Enum):
    """Cognitive cost of a task."""
    DEEP = "Deep"
    LIGHT = "Light"
    ADMIN = "Admin"


class TaskKind(Enum):
    """How a task enters the weekly allocation."""
    GOAL_TASK = "GoalTask"
    DEADLINE_TASK = "DeadlineTask"
    FIXED_EVENT = "FixedEvent"
    LOCATION_TASK = "LocationTask"
    MICRO_TASK = "MicroTask"  # < 15 minutes


class BlockStatus(Enum):
    """Lifecycle of a scheduled block."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def is_active(self) -> bool:
        """Active blocks still consume planned capacity."""
        return self in (BlockStatus.PENDING, BlockStatus.IN_PROGRESS)


class SortOrder(Enum):
    """Display/priority order of blocks within a day."""
    FIXED = 1
    DEADLINE = 2
    GOAL = 3
    MICRO = 4
    BUFFER = 5  # reserved
