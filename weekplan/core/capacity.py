# File: weekplan/core/capacity.py
"""
Capacity evaluation over already allocated blocks.

Read-only queries: nothing here mutates the blocks it is given, so the
allocator and the UI's manual-add preview can call them freely.
"""

from typing import Iterable, List

from weekplan.models import (
    CapacitySettings,
    EnergyType,
    LimitCheck,
    ScheduledBlock,
    week_window_dates,
)


def _active_blocks_on(blocks: Iterable[ScheduledBlock], date: str) -> List[ScheduledBlock]:
    return [b for b in blocks if b.date == date and b.is_active()]


def planned_minutes_for_day(
    blocks: Iterable[ScheduledBlock],
    date: str,
    include_buffer: bool = True
) -> int:
    """
    Total planned minutes on a date.

    Completed and skipped blocks no longer count, so finishing or skipping
    something frees room for more work.

    Args:
        blocks: Blocks to inspect (any dates)
        date: Day to sum, "YYYY-MM-DD"
        include_buffer: Add each block's buffer minutes on top of its length

    Returns:
        Planned minutes for the day
    """
    total = 0
    for block in _active_blocks_on(blocks, date):
        total += block.duration_minutes()
        if include_buffer:
            total += block.buffer_minutes
    return total


def deep_block_count_for_day(blocks: Iterable[ScheduledBlock], date: str) -> int:
    """Count active deep-work blocks on a date."""
    return sum(1 for b in _active_blocks_on(blocks, date) if b.energy == EnergyType.DEEP)


def would_exceed_daily_limits(
    capacity: CapacitySettings,
    blocks: Iterable[ScheduledBlock],
    date: str,
    new_block_minutes: int,
    energy: EnergyType
) -> LimitCheck:
    """
    Check whether adding a block would break the daily caps.

    The total-time check runs first; the first failing check's reason is
    returned.
    """
    blocks = list(blocks)
    planned = planned_minutes_for_day(blocks, date)
    if planned + new_block_minutes > capacity.max_planned_minutes_per_day:
        return LimitCheck(
            ok=False,
            reason=(
                f"Daily planned time would exceed {capacity.max_planned_hours_per_day:g}h. "
                "Remove something first."
            ),
        )

    if energy == EnergyType.DEEP:
        if deep_block_count_for_day(blocks, date) >= capacity.max_deep_blocks_per_day:
            return LimitCheck(
                ok=False,
                reason=f"Max {capacity.max_deep_blocks_per_day} deep-work blocks per day.",
            )

    return LimitCheck(ok=True)


def weekly_planned_minutes(blocks: Iterable[ScheduledBlock], week_start: str) -> int:
    """Planned minutes summed over the 7 window dates."""
    blocks = list(blocks)
    return sum(planned_minutes_for_day(blocks, date) for date in week_window_dates(week_start))


def weekly_capacity_minutes(capacity: CapacitySettings) -> int:
    """Discretionary minutes available in a week."""
    return int(capacity.weekly_discretionary_hours * 60)


def remaining_weekly_minutes(
    capacity: CapacitySettings,
    blocks: Iterable[ScheduledBlock],
    week_start: str
) -> int:
    """Discretionary minutes left this week; negative when over-committed."""
    return weekly_capacity_minutes(capacity) - weekly_planned_minutes(blocks, week_start)
