"""
Skill Mastery Resolver

Each skill path is an ordered list of levels. A level is complete when
every one of its drills has been completed at least once.

Rules:
- Level 1 is always unlocked
- Level N > 1 is unlocked iff every drill of level N-1 is completed
- current_level is one past the last contiguously complete level,
  capped at the number of levels in the path
- progress_percent counts completed drills across the whole path and
  ignores the unlock order
"""

from typing import AbstractSet
import logging

from progression.config import FREE_SKILL_LEVELS
from progression.models.catalog import SkillMasteryLevel, SkillMasteryPath
from progression.models.progress import SkillProgress

logger = logging.getLogger(__name__)


def is_level_complete(level: SkillMasteryLevel, completed_drills: AbstractSet[str]) -> bool:
    return all(drill_id in completed_drills for drill_id in level.drill_ids)


def get_current_skill_level(
    path: SkillMasteryPath,
    completed_drills: AbstractSet[str]
) -> SkillProgress:
    """
    Resolve current level and completion for one path

    Args:
        path: Skill mastery path from the catalog
        completed_drills: Ids of every drill the player has ever completed

    Returns:
        SkillProgress for the path
    """
    levels = sorted(path.levels, key=lambda lvl: lvl.level)

    current_level = 1
    contiguous = True
    drills_completed = 0
    total_drills = 0

    for level in levels:
        done = sum(1 for drill_id in level.drill_ids if drill_id in completed_drills)
        drills_completed += done
        total_drills += len(level.drill_ids)

        # A later level finished out of order does not skip an unfinished one
        if contiguous and done == len(level.drill_ids):
            current_level = min(level.level + 1, len(levels))
        else:
            contiguous = False

    progress_percent = round(drills_completed / total_drills * 100) if total_drills else 0

    return SkillProgress(
        skill_id=path.id,
        title=path.title,
        current_level=current_level,
        progress_percent=progress_percent,
        drills_completed=drills_completed,
        total_drills=total_drills,
        total_levels=len(levels),
    )


def is_skill_level_unlocked(
    path: SkillMasteryPath,
    level_number: int,
    completed_drills: AbstractSet[str]
) -> bool:
    """Level 1 is open; later levels need every drill of the previous level"""
    if level_number == 1:
        return True

    previous = next((lvl for lvl in path.levels if lvl.level == level_number - 1), None)
    if previous is None:
        return False

    return is_level_complete(previous, completed_drills)


def is_level_pro_locked(level_number: int) -> bool:
    """First FREE_SKILL_LEVELS levels are free, the rest require Pro"""
    return level_number > FREE_SKILL_LEVELS
