# File: weekplan/core/config_manager.py
"""
Centralized configuration management for Weekplan.
Loads settings from environment variables and config files.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from weekplan.models import CapacitySettings, EnergyType

# Load environment variables
load_dotenv()


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from weekplan/core/

    # Subdirectories
    CONFIG_DIR = BASE_DIR / "config"
    OUTPUT_DIR = BASE_DIR / "output"
    LOGS_DIR = BASE_DIR / "logs"

    # Files
    STATE_FILE = Path(os.getenv("WEEKPLAN_STATE_FILE", str(CONFIG_DIR / "state.json")))
    SCHEDULE_OUTPUT_FILE = OUTPUT_DIR / "weekly_schedule.json"
    ENV_FILE = BASE_DIR / ".env"

    # Application Settings
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "Europe/Amsterdam")
    MAX_ACTIVE_GOALS = 3

    # Capacity defaults (overridable per user in the state file)
    DEFAULT_WEEKLY_HOURS = float(os.getenv("DEFAULT_WEEKLY_HOURS", "25"))
    DEFAULT_WORK_START = os.getenv("DEFAULT_WORK_START", "09:00")
    DEFAULT_WORK_END = os.getenv("DEFAULT_WORK_END", "17:00")
    DEFAULT_MAX_DEEP_BLOCKS = int(os.getenv("DEFAULT_MAX_DEEP_BLOCKS", "3"))
    DEFAULT_MAX_PLANNED_HOURS = float(os.getenv("DEFAULT_MAX_PLANNED_HOURS", "6"))
    DEFAULT_BUFFER_PERCENT = float(os.getenv("DEFAULT_BUFFER_PERCENT", "25"))

    # Allocator constants
    MIN_GOAL_SLOT_MINUTES = 30       # goal sessions skip days with less room
    MICRO_BLOCK_MINUTES = 15
    MICRO_BUFFER_MINUTES = 5
    MICRO_HEADROOM_MINUTES = 20      # micro pass needs this much left under the cap
    MICRO_ENERGY = EnergyType.LIGHT

    @classmethod
    def default_capacity(cls) -> CapacitySettings:
        """Capacity settings used when the state file has none."""
        return CapacitySettings(
            weekly_discretionary_hours=cls.DEFAULT_WEEKLY_HOURS,
            work_start=cls.DEFAULT_WORK_START,
            work_end=cls.DEFAULT_WORK_END,
            max_deep_blocks_per_day=cls.DEFAULT_MAX_DEEP_BLOCKS,
            max_planned_hours_per_day=cls.DEFAULT_MAX_PLANNED_HOURS,
            buffer_percent=cls.DEFAULT_BUFFER_PERCENT,
        )
