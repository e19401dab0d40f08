# File: weekplan/processors/state_loader.py
"""
Loads goals, tasks, capacity and existing blocks from a JSON state file.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from weekplan.core.config_manager import Config
from weekplan.utils.logger import setup_logger
from weekplan.models import (
    CapacitySettings,
    Goal,
    InputValidationError,
    ScheduledBlock,
    Task,
    ValidationError,
    block_from_dict,
    goal_from_dict,
    task_from_dict,
)

logger = setup_logger(__name__)


@dataclass
class PlannerState:
    """Read model handed to the allocator."""
    goals: List[Goal] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    capacity: CapacitySettings = field(default_factory=Config.default_capacity)
    blocks: List[ScheduledBlock] = field(default_factory=list)
    last_scheduled_week_start: Optional[str] = None
    errors: List[ValidationError] = field(default_factory=list)


def validate_active_goals(goals: List[Goal], limit: int = Config.MAX_ACTIVE_GOALS) -> None:
    """Raise when more goals are active than allowed."""
    active = [g for g in goals if g.active]
    if len(active) > limit:
        names = ", ".join(g.name for g in active)
        raise InputValidationError(f"At most {limit} goals may be active, found {len(active)}: {names}")


def _load_records(raw_items, factory, field_name: str) -> Tuple[list, List[ValidationError]]:
    """Build models, collecting per-record errors instead of aborting."""
    items, errors = [], []
    for i, raw in enumerate(raw_items or []):
        try:
            items.append(factory(raw))
        except (KeyError, TypeError, ValueError) as e:
            error = ValidationError(field=field_name, message=str(e), entry_index=i)
            logger.warning(f"Skipping invalid record: {error}")
            errors.append(error)
    return items, errors


def state_from_dict(data: dict) -> PlannerState:
    """
    Create PlannerState from a dictionary.

    Invalid goals, tasks and blocks are skipped and reported in `errors`;
    invalid capacity settings raise, since nothing can be planned without them.
    """
    goals, goal_errors = _load_records(data.get('goals'), goal_from_dict, 'goals')
    tasks, task_errors = _load_records(data.get('tasks'), task_from_dict, 'tasks')
    blocks, block_errors = _load_records(
        data.get('scheduled_blocks', data.get('scheduledBlocks')), block_from_dict, 'scheduled_blocks'
    )

    try:
        capacity = CapacitySettings.from_dict(data.get('capacity') or {}, defaults=Config.default_capacity())
    except (TypeError, ValueError) as e:
        raise InputValidationError(f"Invalid capacity settings: {e}") from e

    validate_active_goals(goals)

    return PlannerState(
        goals=goals,
        tasks=tasks,
        capacity=capacity,
        blocks=blocks,
        last_scheduled_week_start=data.get('last_scheduled_week_start', data.get('lastScheduledWeekStart')),
        errors=goal_errors + task_errors + block_errors,
    )


def load_state(filepath: Path = None) -> PlannerState:
    """Load planner state from JSON."""
    filepath = Path(filepath or Config.STATE_FILE)
    if not filepath.exists():
        raise FileNotFoundError(f"State file not found: {filepath}")

    with open(filepath, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InputValidationError(f"State file is not valid JSON: {e}") from e

    state = state_from_dict(data)
    logger.info(
        f"Loaded state from {filepath}: {len(state.goals)} goals, {len(state.tasks)} tasks, "
        f"{len(state.blocks)} blocks ({len(state.errors)} invalid records)"
    )
    return state


def save_state_blocks(filepath: Path, blocks: List[ScheduledBlock], week_start: str) -> bool:
    """
    Write the block list and last generated week back into a state file.

    Other sections of the file are left as they are. Existing key spelling
    (camelCase or snake_case) is kept.

    Returns:
        True if successful, False otherwise
    """
    filepath = Path(filepath)
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read state file {filepath}: {e}")
        return False

    camel = 'scheduledBlocks' in data or 'lastScheduledWeekStart' in data
    blocks_key = 'scheduledBlocks' if camel else 'scheduled_blocks'
    week_key = 'lastScheduledWeekStart' if camel else 'last_scheduled_week_start'
    data[blocks_key] = [b.to_dict() for b in blocks]
    data[week_key] = week_start

    try:
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error(f"Could not update state file {filepath}: {e}", exc_info=True)
        return False

    logger.info(f"State file {filepath} updated: {len(blocks)} blocks, last week {week_start}")
    return True
