# File: weekplan/processors/block_processor.py
"""
Block processing module.
Handles status transitions on scheduled blocks, week replacement and
schedule persistence using typed models.
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from weekplan.core.config_manager import Config
from weekplan.utils.logger import LoggerMixin
from weekplan.models import (
    BlockStatus,
    BlockTransitionError,
    ScheduledBlock,
    WeeklySchedule,
    block_from_dict,
    week_window_dates,
)

# Allowed status moves; completed and skipped are terminal
TRANSITIONS: Dict[BlockStatus, Set[BlockStatus]] = {
    BlockStatus.PENDING: {BlockStatus.IN_PROGRESS, BlockStatus.SKIPPED},
    BlockStatus.IN_PROGRESS: {BlockStatus.COMPLETED, BlockStatus.SKIPPED},
    BlockStatus.COMPLETED: set(),
    BlockStatus.SKIPPED: set(),
}


class BlockProcessor(LoggerMixin):
    """Applies user status changes to blocks produced by the allocator."""

    # ==================== Status transitions ====================

    def set_status(
        self,
        blocks: Iterable[ScheduledBlock],
        block_id: str,
        status: BlockStatus,
        skip_reason: Optional[str] = None
    ) -> List[ScheduledBlock]:
        """
        Return a new block list with one block moved to a new status.

        Args:
            blocks: Current blocks (left untouched)
            block_id: Block to update
            status: Target status
            skip_reason: Optional reason, kept only for skipped blocks

        Raises:
            BlockTransitionError: unknown block or illegal move
        """
        if isinstance(status, str):
            status = BlockStatus(status)

        updated: List[ScheduledBlock] = []
        found = False
        for block in blocks:
            if block.id != block_id:
                updated.append(block)
                continue

            found = True
            if status not in TRANSITIONS[block.status]:
                raise BlockTransitionError(
                    f"Cannot move block {block_id} from {block.status.value} to {status.value}"
                )
            reason = skip_reason if status == BlockStatus.SKIPPED else None
            updated.append(replace(block, status=status, skip_reason=reason))
            self.logger.info(f"Block {block_id}: {block.status.value} -> {status.value}")

        if not found:
            raise BlockTransitionError(f"Block not found: {block_id}")
        return updated

    def start_block(self, blocks: Iterable[ScheduledBlock], block_id: str) -> List[ScheduledBlock]:
        return self.set_status(blocks, block_id, BlockStatus.IN_PROGRESS)

    def complete_block(self, blocks: Iterable[ScheduledBlock], block_id: str) -> List[ScheduledBlock]:
        return self.set_status(blocks, block_id, BlockStatus.COMPLETED)

    def skip_block(
        self,
        blocks: Iterable[ScheduledBlock],
        block_id: str,
        reason: Optional[str] = None
    ) -> List[ScheduledBlock]:
        return self.set_status(blocks, block_id, BlockStatus.SKIPPED, skip_reason=reason)

    # ==================== Week replacement ====================

    def replace_week_blocks(
        self,
        existing: Iterable[ScheduledBlock],
        schedule: WeeklySchedule
    ) -> List[ScheduledBlock]:
        """
        Swap in a freshly generated week.

        Blocks dated inside the schedule's window are dropped wholesale and
        replaced; blocks of other weeks are kept.
        """
        window = set(week_window_dates(schedule.week_start))
        kept = [b for b in existing if b.date not in window]
        self.logger.info(
            f"Replacing week {schedule.week_start}: keeping {len(kept)} blocks from other weeks, "
            f"adding {len(schedule.blocks)}"
        )
        return kept + list(schedule.blocks)

    # ==================== Persistence ====================

    def save_schedule(
        self,
        schedule: WeeklySchedule,
        filepath: Path = Config.SCHEDULE_OUTPUT_FILE
    ) -> bool:
        """
        Save schedule JSON to file.

        Args:
            schedule: Allocator result to save
            filepath: Output file path

        Returns:
            True if successful, False otherwise
        """
        try:
            filepath = Path(filepath)
            filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, 'w', encoding="utf-8") as f:
                json.dump(schedule.to_dict(), f, indent=2, ensure_ascii=False)

            self.logger.info(f"Schedule saved to {filepath}")
            return True
        except OSError as e:
            self.logger.error(f"Could not save schedule: {e}", exc_info=True)
            return False

    def load_blocks(self, filepath: Path) -> List[ScheduledBlock]:
        """Read blocks back from a saved schedule file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        blocks = [block_from_dict(raw) for raw in data.get('blocks', [])]
        self.logger.debug(f"Loaded {len(blocks)} blocks from {filepath}")
        return blocks
