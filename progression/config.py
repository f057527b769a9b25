"""Configuration management"""
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from progression.exceptions import ConfigurationError

load_dotenv()

# Leveling
XP_PER_LEVEL: int = int(os.getenv("XP_PER_LEVEL", "500"))

# Daily workout generator
DAILY_WORKOUT_BONUS_XP: int = int(os.getenv("DAILY_WORKOUT_BONUS_XP", "50"))
DAILY_WORKOUT_MAX_DRILLS: int = int(os.getenv("DAILY_WORKOUT_MAX_DRILLS", "4"))
# Below this many unseen drills the generator falls back to the full pool
DAILY_WORKOUT_MIN_FRESH_DRILLS: int = 3

# Skill mastery: levels 1..FREE_SKILL_LEVELS are free, the rest require Pro
FREE_SKILL_LEVELS: int = int(os.getenv("FREE_SKILL_LEVELS", "2"))

# Weekly accounting
DEFAULT_WEEKLY_GOAL: int = int(os.getenv("DEFAULT_WEEKLY_GOAL", "5"))
APP_OPEN_TICK_SECONDS: int = int(os.getenv("APP_OPEN_TICK_SECONDS", "60"))

# Day and week boundaries are computed in this zone
PROGRESS_TIMEZONE: str = os.getenv("PROGRESS_TIMEZONE", "UTC")

# Storage
PROGRESS_STORAGE_KEY: str = os.getenv("PROGRESS_STORAGE_KEY", "training_progress")
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Content catalog
CATALOG_PATH: Path = Path(
    os.getenv("CATALOG_PATH", str(Path(__file__).parent / "catalog" / "data" / "catalog.json"))
)

# Monitoring
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "true").lower() == "true"

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if XP_PER_LEVEL <= 0:
        raise ConfigurationError("XP_PER_LEVEL must be positive", config_key="XP_PER_LEVEL")
    if APP_OPEN_TICK_SECONDS <= 0:
        raise ConfigurationError(
            "APP_OPEN_TICK_SECONDS must be positive", config_key="APP_OPEN_TICK_SECONDS"
        )
    if DAILY_WORKOUT_MAX_DRILLS <= 0:
        raise ConfigurationError(
            "DAILY_WORKOUT_MAX_DRILLS must be positive", config_key="DAILY_WORKOUT_MAX_DRILLS"
        )
    if FREE_SKILL_LEVELS < 0:
        raise ConfigurationError("FREE_SKILL_LEVELS cannot be negative", config_key="FREE_SKILL_LEVELS")
    try:
        ZoneInfo(PROGRESS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone '{PROGRESS_TIMEZONE}'",
            config_key="PROGRESS_TIMEZONE",
            cause=e,
        )
