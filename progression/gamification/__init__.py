"""
Progression calculators

Pure functions with no storage access:
- XP and leveling
- Day streaks and snapshot normalization
- Skill mastery unlock gates
- Daily workout generation
"""

from progression.gamification.xp_system import (
    award_xp,
    level_from_xp,
    xp_to_next_level,
    level_progress_percent,
)
from progression.gamification.streak_system import normalize, new_snapshot, next_streak
from progression.gamification.skill_mastery import (
    get_current_skill_level,
    is_skill_level_unlocked,
    is_level_pro_locked,
)
from progression.gamification.daily_workout import generate_daily_workout

__all__ = [
    "award_xp",
    "level_from_xp",
    "xp_to_next_level",
    "level_progress_percent",
    "normalize",
    "new_snapshot",
    "next_streak",
    "get_current_skill_level",
    "is_skill_level_unlocked",
    "is_level_pro_locked",
    "generate_daily_workout",
]
