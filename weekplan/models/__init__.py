from .enums import EnergyType, TaskKind, BlockStatus, SortOrder
from .api import InputValidationError, BlockTransitionError, LimitCheck, ValidationError
from .common import (
    time_to_minutes,
    minutes_to_time,
    parse_date,
    format_date,
    week_start,
    week_window_dates,
    shift_week,
    current_week_start,
)
from .goals import Goal, goal_from_dict
from .tasks import Task, task_from_dict
from .capacity import CapacitySettings
from .schedule import (
    ScheduledBlock,
    UnscheduledTask,
    WeeklySchedule,
    block_from_dict,
)

__all__ = [
    "EnergyType",
    "TaskKind",
    "BlockStatus",
    "SortOrder",
    "InputValidationError",
    "BlockTransitionError",
    "LimitCheck",
    "ValidationError",
    "time_to_minutes",
    "minutes_to_time",
    "parse_date",
    "format_date",
    "week_start",
    "week_window_dates",
    "shift_week",
    "current_week_start",
    "Goal",
    "goal_from_dict",
    "Task",
    "task_from_dict",
    "CapacitySettings",
    "ScheduledBlock",
    "UnscheduledTask",
    "WeeklySchedule",
    "block_from_dict",
]
