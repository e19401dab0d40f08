# File: weekplan/core/allocator.py
"""
Weekly allocator for Weekplan.
Places tasks into time blocks for a Monday-Sunday window.

Four passes run in strict priority order:
    1. fixed events (and deadline tasks with a clock time)
    2. deadline tasks without a clock time
    3. goal quotas, tier 1 first
    4. one micro task per day

Each pass takes the Allocation built so far and returns a new one, so later
passes see earlier placements through the capacity evaluator without any
shared mutable state.
"""

import uuid
from dataclasses import dataclass, replace
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from weekplan.core.capacity import (
    deep_block_count_for_day,
    planned_minutes_for_day,
    would_exceed_daily_limits,
)
from weekplan.core.config_manager import Config
from weekplan.models import (
    CapacitySettings,
    EnergyType,
    Goal,
    InputValidationError,
    ScheduledBlock,
    SortOrder,
    Task,
    TaskKind,
    UnscheduledTask,
    WeeklySchedule,
    format_date,
    goal_from_dict,
    minutes_to_time,
    parse_date,
    task_from_dict,
    time_to_minutes,
    week_start as monday_of,
    week_window_dates,
)
from weekplan.utils.logger import setup_logger

logger = setup_logger(__name__)


def new_block_id() -> str:
    return f"blk-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Allocation:
    """Blocks placed so far plus the tasks they cover."""
    blocks: Tuple[ScheduledBlock, ...] = ()
    scheduled_task_ids: FrozenSet[str] = frozenset()
    rejections: Tuple[UnscheduledTask, ...] = ()

    def place(self, block: ScheduledBlock) -> 'Allocation':
        return replace(
            self,
            blocks=self.blocks + (block,),
            scheduled_task_ids=self.scheduled_task_ids | {block.task_id},
        )

    def reject(self, task_id: str, reason: str) -> 'Allocation':
        return replace(self, rejections=self.rejections + (UnscheduledTask(task_id, reason),))

    def unscheduled(self) -> List[UnscheduledTask]:
        """Rejected tasks that never got a block; latest reason wins."""
        latest: Dict[str, UnscheduledTask] = {}
        for rejection in self.rejections:
            if rejection.task_id not in self.scheduled_task_ids:
                latest[rejection.task_id] = rejection
        return list(latest.values())


class WeeklyAllocator:
    """Deterministic weekly allocator over goals, tasks and capacity."""

    def __init__(
        self,
        capacity: Optional[CapacitySettings] = None,
        id_factory: Callable[[], str] = new_block_id
    ):
        """
        Initialize the allocator.

        Args:
            capacity: Capacity settings; defaults from Config when omitted
            id_factory: Block id generator (ids never affect placement)
        """
        if capacity is None:
            capacity = Config.default_capacity()
        if not isinstance(capacity, CapacitySettings):
            raise InputValidationError(f"Capacity settings required, got {type(capacity).__name__}")
        self.capacity = capacity
        self.id_factory = id_factory

    # ==================== Entry point ====================

    def allocate(
        self,
        goals: Iterable[Union[Goal, dict]],
        tasks: Iterable[Union[Task, dict]],
        week_start: str
    ) -> WeeklySchedule:
        """
        Run all four passes for the week starting at week_start.

        Raises:
            InputValidationError: malformed week start, goals or tasks
        """
        window_start = self._resolve_week_start(week_start)
        window = week_window_dates(window_start)
        goals = self._coerce(goals, Goal, goal_from_dict)
        tasks = [t for t in self._coerce(tasks, Task, task_from_dict) if not t.completed]

        logger.info(
            f"Allocating week {window_start}: {len(goals)} goals, {len(tasks)} open tasks"
        )

        allocation = Allocation()
        allocation = self._place_fixed(allocation, tasks, window)
        allocation = self._place_deadlines(allocation, tasks, window)
        allocation = self._place_goal_quotas(allocation, goals, tasks, window)
        allocation = self._place_micro(allocation, tasks, window)

        blocks = sorted(allocation.blocks, key=lambda b: (b.date, b.sort_order.value))
        unscheduled = allocation.unscheduled()

        logger.info(
            f"Week {window_start}: {len(blocks)} blocks placed, "
            f"{len(unscheduled)} tasks did not fit"
        )
        return WeeklySchedule(week_start=window_start, blocks=blocks, unscheduled=unscheduled)

    # ==================== Passes ====================

    def _place_fixed(self, allocation: Allocation, tasks: List[Task], window: List[str]) -> Allocation:
        """Pass 1: commitments made elsewhere, placed as given."""
        placed = 0
        for task in tasks:
            if not task.is_fixed:
                continue
            date = task.deadline or window[0]
            if date not in window:
                continue
            start = time_to_minutes(task.due_time or self.capacity.work_start)
            allocation = allocation.place(self._block(task, date, start, SortOrder.FIXED))
            placed += 1

        logger.info(f"Fixed pass: {placed} blocks")
        return allocation

    def _place_deadlines(self, allocation: Allocation, tasks: List[Task], window: List[str]) -> Allocation:
        """Pass 2: deadline tasks without a clock time, on their deadline day."""
        placed = 0
        for task in tasks:
            if task.kind != TaskKind.DEADLINE_TASK or task.due_time or not task.deadline:
                continue
            if task.id in allocation.scheduled_task_ids or task.deadline not in window:
                continue

            allocation, ok = self._try_stack(allocation, task, task.deadline, SortOrder.DEADLINE)
            placed += ok

        logger.info(f"Deadline pass: {placed} blocks")
        return allocation

    def _place_goal_quotas(
        self,
        allocation: Allocation,
        goals: List[Goal],
        tasks: List[Task],
        window: List[str]
    ) -> Allocation:
        """Pass 3: fill weekly session quotas, highest tier first."""
        active_goals = sorted((g for g in goals if g.active), key=lambda g: g.priority_tier)

        for goal in active_goals:
            quota = goal.weekly_sessions
            if quota <= 0:
                logger.debug(f"Goal '{goal.name}' has no weekly quota, skipping")
                continue

            sessions = 0
            for date in window:
                if sessions >= quota:
                    break

                free = self.capacity.max_planned_minutes_per_day - planned_minutes_for_day(allocation.blocks, date)
                if free < Config.MIN_GOAL_SLOT_MINUTES:
                    continue

                task = self._pick_goal_task(allocation, goal, tasks, date)
                if task is None:
                    break

                allocation, ok = self._try_stack(allocation, task, date, SortOrder.GOAL)
                sessions += ok

            logger.info(f"Goal '{goal.name}' (tier {goal.priority_tier}): {sessions}/{quota} sessions")

        return allocation

    def _place_micro(self, allocation: Allocation, tasks: List[Task], window: List[str]) -> Allocation:
        """Pass 4: at most one short Light block per day."""
        micro_tasks = [t for t in tasks if t.is_micro]
        if not micro_tasks:
            return allocation

        duration = Config.MICRO_BLOCK_MINUTES + Config.MICRO_BUFFER_MINUTES
        headroom = self.capacity.max_planned_minutes_per_day - Config.MICRO_HEADROOM_MINUTES
        placed = 0

        for date in window:
            placed_today = {b.task_id for b in allocation.blocks if b.date == date}
            task = next((t for t in micro_tasks if t.id not in placed_today), None)
            if task is None:
                continue

            planned = planned_minutes_for_day(allocation.blocks, date)
            if planned >= headroom:
                allocation = allocation.reject(task.id, "Not enough room left for a micro task.")
                continue

            check = would_exceed_daily_limits(
                self.capacity, allocation.blocks, date,
                duration + Config.MICRO_BUFFER_MINUTES, Config.MICRO_ENERGY
            )
            if not check.ok:
                allocation = allocation.reject(task.id, check.reason)
                continue

            start = self._stacked_start(planned, duration)
            allocation = allocation.place(ScheduledBlock(
                id=self.id_factory(),
                task_id=task.id,
                date=date,
                start_time=minutes_to_time(start),
                end_time=minutes_to_time(start + duration),
                buffer_minutes=Config.MICRO_BUFFER_MINUTES,
                energy=Config.MICRO_ENERGY,
                sort_order=SortOrder.MICRO,
            ))
            placed += 1

        logger.info(f"Micro pass: {placed} blocks")
        return allocation

    # ==================== Helpers ====================

    def _pick_goal_task(
        self,
        allocation: Allocation,
        goal: Goal,
        tasks: List[Task],
        date: str
    ) -> Optional[Task]:
        """Prefer Deep work while the day is under its deep cap, else the first task."""
        candidates = [
            t for t in tasks
            if t.kind == TaskKind.GOAL_TASK
            and t.goal_id == goal.id
            and t.id not in allocation.scheduled_task_ids
        ]
        if not candidates:
            return None

        under_cap = deep_block_count_for_day(allocation.blocks, date) < self.capacity.max_deep_blocks_per_day
        if under_cap:
            deep = next((t for t in candidates if t.energy == EnergyType.DEEP), None)
            if deep is not None:
                return deep
        return candidates[0]

    def _try_stack(
        self,
        allocation: Allocation,
        task: Task,
        date: str,
        sort_order: SortOrder
    ) -> Tuple[Allocation, bool]:
        """Stack a task after the day's planned work if the daily caps allow it."""
        duration = task.buffered_minutes(self.capacity.buffer_percent)
        buffer = duration - task.estimated_minutes

        check = would_exceed_daily_limits(
            self.capacity, allocation.blocks, date, duration + buffer, task.energy
        )
        if not check.ok:
            logger.debug(f"Task '{task.title}' does not fit on {date}: {check.reason}")
            return allocation.reject(task.id, check.reason), False

        start = self._stacked_start(planned_minutes_for_day(allocation.blocks, date), duration)
        return allocation.place(self._block(task, date, start, sort_order)), True

    def _stacked_start(self, planned: int, duration: int) -> int:
        """Start after planned work, clamped so the block ends by work end.

        A block longer than the window never starts before midnight.
        """
        latest_offset = self.capacity.work_window_minutes - duration
        return max(0, self.capacity.work_start_minutes + min(planned, latest_offset))

    def _block(self, task: Task, date: str, start: int, sort_order: SortOrder) -> ScheduledBlock:
        duration = task.buffered_minutes(self.capacity.buffer_percent)
        return ScheduledBlock(
            id=self.id_factory(),
            task_id=task.id,
            date=date,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(start + duration),
            buffer_minutes=duration - task.estimated_minutes,
            energy=task.energy,
            sort_order=sort_order,
        )

    @staticmethod
    def _resolve_week_start(week_start: str) -> str:
        requested = format_date(parse_date(week_start))
        monday = monday_of(requested)
        if monday != requested:
            logger.warning(f"Week start {week_start} is not a Monday, using {monday}")
        return monday

    @staticmethod
    def _coerce(items, model, factory) -> list:
        """Accept model instances or their dictionary form."""
        if items is None:
            return []
        result = []
        for i, item in enumerate(items):
            if isinstance(item, model):
                result.append(item)
                continue
            if not isinstance(item, dict):
                raise InputValidationError(f"{model.__name__} {i}: unsupported type {type(item).__name__}")
            try:
                result.append(factory(item))
            except (KeyError, TypeError, ValueError) as e:
                raise InputValidationError(f"{model.__name__} {i}: {e}") from e
        return result


def allocate_week(
    goals: Iterable[Union[Goal, dict]],
    tasks: Iterable[Union[Task, dict]],
    capacity: Optional[CapacitySettings],
    week_start: str,
    id_factory: Callable[[], str] = new_block_id
) -> WeeklySchedule:
    """Run the allocator and return blocks plus the tasks that did not fit."""
    return WeeklyAllocator(capacity, id_factory=id_factory).allocate(goals, tasks, week_start)


def run_weekly_scheduler(
    goals: Iterable[Union[Goal, dict]],
    tasks: Iterable[Union[Task, dict]],
    capacity: Optional[CapacitySettings],
    week_start: str
) -> List[ScheduledBlock]:
    """Blocks for the week, sorted by date then sort order."""
    return allocate_week(goals, tasks, capacity, week_start).blocks
