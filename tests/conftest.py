# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable goals, tasks, capacity settings and blocks for all tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Keep test runs from writing log files
os.environ.setdefault("WEEKPLAN_LOG_DIR", "")

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from weekplan.models import (
    BlockStatus,
    CapacitySettings,
    EnergyType,
    Goal,
    ScheduledBlock,
    SortOrder,
    Task,
    TaskKind,
)


# ==================== Date Fixtures ====================

@pytest.fixture
def monday():
    """A fixed Monday so tests never depend on the wall clock."""
    return "2025-03-10"


@pytest.fixture
def window():
    """The 7 dates starting at the fixed Monday."""
    return [
        "2025-03-10", "2025-03-11", "2025-03-12", "2025-03-13",
        "2025-03-14", "2025-03-15", "2025-03-16",
    ]


# ==================== Capacity Fixtures ====================

@pytest.fixture
def capacity():
    """Default-like capacity: 6h/day, 3 deep blocks, 25% buffer, 09:00-17:00."""
    return CapacitySettings(
        max_planned_hours_per_day=6,
        max_deep_blocks_per_day=3,
        buffer_percent=25,
        work_start="09:00",
        work_end="17:00",
    )


# ==================== Factory Fixtures ====================

@pytest.fixture
def make_task():
    """Factory fixture for creating test tasks."""
    def _create(
        task_id: str,
        kind: TaskKind = TaskKind.GOAL_TASK,
        minutes: int = 60,
        energy: EnergyType = EnergyType.DEEP,
        **kwargs
    ) -> Task:
        return Task(
            id=task_id,
            title=kwargs.pop("title", f"Task {task_id}"),
            kind=kind,
            estimated_minutes=minutes,
            energy=energy,
            **kwargs
        )

    return _create


@pytest.fixture
def make_goal():
    """Factory fixture for creating test goals."""
    def _create(goal_id: str, tier: int = 1, sessions=None, hours=None, active: bool = True) -> Goal:
        return Goal(
            id=goal_id,
            name=f"Goal {goal_id}",
            priority_tier=tier,
            weekly_quota_sessions=sessions,
            weekly_quota_hours=hours,
            active=active,
        )

    return _create


@pytest.fixture
def make_block():
    """Factory fixture for creating scheduled blocks."""
    counter = {"n": 0}

    def _create(
        date: str,
        start: str,
        end: str,
        buffer: int = 0,
        energy: EnergyType = EnergyType.LIGHT,
        status: BlockStatus = BlockStatus.PENDING,
        task_id: str = None,
        sort_order: SortOrder = SortOrder.GOAL,
    ) -> ScheduledBlock:
        counter["n"] += 1
        return ScheduledBlock(
            id=f"blk-{counter['n']}",
            task_id=task_id or f"task-{counter['n']}",
            date=date,
            start_time=start,
            end_time=end,
            buffer_minutes=buffer,
            energy=energy,
            sort_order=sort_order,
            status=status,
        )

    return _create


@pytest.fixture
def sequential_ids():
    """Factory for deterministic block id generators."""
    def _factory():
        counter = {"n": 0}

        def _next_id():
            counter["n"] += 1
            return f"blk-{counter['n']}"
        return _next_id

    return _factory


# ==================== Helper Fixtures ====================

@pytest.fixture
def assert_within_caps():
    """Assert that no day exceeds planned-time or deep-block caps."""
    from weekplan.core.capacity import deep_block_count_for_day, planned_minutes_for_day

    def _assert(blocks, capacity, dates):
        for date in dates:
            assert planned_minutes_for_day(blocks, date) <= capacity.max_planned_hours_per_day * 60, date
            assert deep_block_count_for_day(blocks, date) <= capacity.max_deep_blocks_per_day, date

    return _assert


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
