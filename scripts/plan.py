"""
Weekly schedule planner entry point.
Run this file at the start of each week (or after editing goals/tasks)
to regenerate the week's blocks.

Usage:
    python scripts/plan.py                        # current week, default state file
    python scripts/plan.py --week 2025-03-10      # a specific week
    python scripts/plan.py --state my_state.json --output out.json
    python scripts/plan.py --no-state-update      # leave the state file untouched
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from weekplan.core.allocator import allocate_week
from weekplan.core.capacity import planned_minutes_for_day, deep_block_count_for_day, remaining_weekly_minutes
from weekplan.core.config_manager import Config
from weekplan.models import InputValidationError, current_week_start
from weekplan.processors.block_processor import BlockProcessor
from weekplan.processors.state_loader import load_state, save_state_blocks
from weekplan.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a weekly schedule")
    parser.add_argument("--state", type=Path, default=Config.STATE_FILE, help="JSON state file")
    parser.add_argument("--week", help="Week start (YYYY-MM-DD); defaults to the current week")
    parser.add_argument("--output", type=Path, default=Config.SCHEDULE_OUTPUT_FILE, help="Schedule output file")
    parser.add_argument(
        "--no-state-update", action="store_true",
        help="Do not write the regenerated week back into the state file"
    )
    return parser.parse_args(argv)


def log_summary(schedule, state) -> None:
    """Per-day overview of what was placed."""
    titles = {t.id: t.title for t in state.tasks}
    days = sorted({b.date for b in schedule.blocks})
    for day in days:
        logger.info(
            f"{day}: {planned_minutes_for_day(schedule.blocks, day)} min planned, "
            f"{deep_block_count_for_day(schedule.blocks, day)} deep"
        )
        for block in schedule.blocks_for_date(day):
            logger.info(
                f"    {block.start_time}-{block.end_time} [{block.energy.value}] "
                f"{titles.get(block.task_id, block.task_id)}"
            )

    for item in schedule.unscheduled:
        logger.warning(f"Not scheduled: {titles.get(item.task_id, item.task_id)} ({item.reason})")

    remaining = remaining_weekly_minutes(state.capacity, schedule.blocks, schedule.week_start)
    logger.info(f"Weekly discretionary minutes remaining: {remaining}")


def main(argv=None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    start_time = time.time()

    logger.info("=" * 60)
    logger.info("Starting Weekplan")
    logger.info("=" * 60)

    try:
        state = load_state(args.state)
        week = args.week or state.last_scheduled_week_start or current_week_start(Config.TARGET_TIMEZONE)

        schedule = allocate_week(state.goals, state.tasks, state.capacity, week)
        log_summary(schedule, state)

        processor = BlockProcessor()
        if not processor.save_schedule(schedule, args.output):
            return 1

        if args.no_state_update:
            return 0

        # Regenerating replaces the whole week; other weeks' blocks stay
        blocks = processor.replace_week_blocks(state.blocks, schedule)
        if not save_state_blocks(args.state, blocks, schedule.week_start):
            return 1
        return 0

    except FileNotFoundError as e:
        logger.error(f"Missing required file: {e}")
        return 1

    except InputValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    except KeyboardInterrupt:
        logger.warning("Plan generation interrupted by user")
        return 1

    finally:
        elapsed = time.time() - start_time
        logger.info(f"Total execution time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main())
