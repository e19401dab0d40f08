# File: tests/unit/test_capacity.py
"""
Unit tests for the capacity evaluator.
"""

import pytest

from weekplan.core.capacity import (
    deep_block_count_for_day,
    planned_minutes_for_day,
    remaining_weekly_minutes,
    weekly_capacity_minutes,
    weekly_planned_minutes,
    would_exceed_daily_limits,
)
from weekplan.models import BlockStatus, CapacitySettings, EnergyType

pytestmark = pytest.mark.unit

MONDAY = "2025-03-10"


class TestPlannedMinutes:

    def test_sums_length_and_buffer(self, make_block):
        blocks = [
            make_block(MONDAY, "09:00", "10:15", buffer=15),
            make_block(MONDAY, "10:30", "11:00", buffer=6),
        ]

        assert planned_minutes_for_day(blocks, MONDAY) == 75 + 15 + 30 + 6
        assert planned_minutes_for_day(blocks, MONDAY, include_buffer=False) == 105

    def test_only_counts_requested_date(self, make_block):
        blocks = [
            make_block(MONDAY, "09:00", "10:00"),
            make_block("2025-03-11", "09:00", "12:00"),
        ]

        assert planned_minutes_for_day(blocks, MONDAY) == 60

    def test_completed_and_skipped_blocks_free_capacity(self, make_block):
        blocks = [
            make_block(MONDAY, "09:00", "10:00", status=BlockStatus.COMPLETED),
            make_block(MONDAY, "10:00", "11:00", status=BlockStatus.SKIPPED),
            make_block(MONDAY, "11:00", "12:00", status=BlockStatus.IN_PROGRESS),
        ]

        assert planned_minutes_for_day(blocks, MONDAY) == 60

    def test_empty_day(self):
        assert planned_minutes_for_day([], MONDAY) == 0


class TestDeepBlockCount:

    def test_counts_active_deep_blocks(self, make_block):
        blocks = [
            make_block(MONDAY, "09:00", "10:00", energy=EnergyType.DEEP),
            make_block(MONDAY, "10:00", "11:00", energy=EnergyType.DEEP, status=BlockStatus.COMPLETED),
            make_block(MONDAY, "11:00", "12:00", energy=EnergyType.ADMIN),
            make_block("2025-03-11", "09:00", "10:00", energy=EnergyType.DEEP),
        ]

        assert deep_block_count_for_day(blocks, MONDAY) == 1


class TestWouldExceedDailyLimits:

    def test_fits(self, capacity, make_block):
        blocks = [make_block(MONDAY, "09:00", "11:00")]

        check = would_exceed_daily_limits(capacity, blocks, MONDAY, 120, EnergyType.DEEP)

        assert check.ok is True
        assert check.reason is None

    def test_exactly_at_cap_fits(self, capacity, make_block):
        blocks = [make_block(MONDAY, "09:00", "13:00")]

        assert would_exceed_daily_limits(capacity, blocks, MONDAY, 120, EnergyType.LIGHT).ok is True
        assert would_exceed_daily_limits(capacity, blocks, MONDAY, 121, EnergyType.LIGHT).ok is False

    def test_total_time_exceeded(self, capacity):
        check = would_exceed_daily_limits(capacity, [], MONDAY, 750, EnergyType.LIGHT)

        assert check.ok is False
        assert "6h" in check.reason

    def test_deep_cap_reached(self, capacity, make_block):
        blocks = [
            make_block(MONDAY, f"{9 + i:02d}:00", f"{9 + i:02d}:30", energy=EnergyType.DEEP)
            for i in range(3)
        ]

        deep = would_exceed_daily_limits(capacity, blocks, MONDAY, 30, EnergyType.DEEP)
        light = would_exceed_daily_limits(capacity, blocks, MONDAY, 30, EnergyType.LIGHT)

        assert deep.ok is False
        assert "deep-work" in deep.reason
        assert light.ok is True

    def test_total_time_is_checked_before_deep_cap(self, make_block):
        capacity = CapacitySettings(max_planned_hours_per_day=1, max_deep_blocks_per_day=1)
        blocks = [make_block(MONDAY, "09:00", "09:45", energy=EnergyType.DEEP)]

        check = would_exceed_daily_limits(capacity, blocks, MONDAY, 30, EnergyType.DEEP)

        assert check.ok is False
        assert "Daily planned time" in check.reason

    def test_does_not_mutate_blocks(self, capacity, make_block):
        blocks = [make_block(MONDAY, "09:00", "10:00")]
        snapshot = [b.to_dict() for b in blocks]

        would_exceed_daily_limits(capacity, blocks, MONDAY, 30, EnergyType.DEEP)

        assert [b.to_dict() for b in blocks] == snapshot


class TestWeeklyTotals:

    def test_weekly_planned_minutes_covers_window_only(self, make_block):
        blocks = [
            make_block(MONDAY, "09:00", "10:00", buffer=10),
            make_block("2025-03-16", "09:00", "09:30"),
            make_block("2025-03-17", "09:00", "17:00"),  # next week
        ]

        assert weekly_planned_minutes(blocks, MONDAY) == 100

    def test_weekly_capacity_and_remaining(self, make_block):
        capacity = CapacitySettings(weekly_discretionary_hours=25)
        blocks = [make_block(MONDAY, "09:00", "11:00")]

        assert weekly_capacity_minutes(capacity) == 1500
        assert remaining_weekly_minutes(capacity, blocks, MONDAY) == 1380
