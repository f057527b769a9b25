"""
XP and Leveling System

Maps cumulative XP to levels with a flat per-level threshold.

Leveling Curve:
- Every level costs XP_PER_LEVEL XP (500 by default)
- level = floor(xp / XP_PER_LEVEL) + 1

XP is never taken away, so levels never go down.
"""

from typing import Dict, Optional
import logging

from progression.config import XP_PER_LEVEL

logger = logging.getLogger(__name__)


def level_from_xp(xp: int, xp_per_level: Optional[int] = None) -> int:
    """Level reached with xp total XP (negative XP counts as zero)"""
    per_level = xp_per_level or XP_PER_LEVEL
    return max(xp, 0) // per_level + 1


def xp_to_next_level(xp: int, xp_per_level: Optional[int] = None) -> int:
    """XP still needed to reach the next level"""
    per_level = xp_per_level or XP_PER_LEVEL
    return per_level - (max(xp, 0) % per_level)


def level_progress_percent(xp: int, xp_per_level: Optional[int] = None) -> float:
    """Progress through the current level, 0 <= percent < 100"""
    per_level = xp_per_level or XP_PER_LEVEL
    return (max(xp, 0) % per_level) / per_level * 100


def calculate_level_from_xp(total_xp: int) -> Dict[str, int]:
    """
    Calculate level information from total XP

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int
        }
    """
    level = level_from_xp(total_xp)
    return {
        "current_level": level,
        "xp_in_current_level": max(total_xp, 0) % XP_PER_LEVEL,
        "xp_to_next_level": xp_to_next_level(total_xp),
        "total_xp_for_next_level": level * XP_PER_LEVEL,
    }


def award_xp(xp: int, level: int, amount: int) -> Dict[str, int]:
    """
    Add XP and report whether a level boundary was crossed

    Args:
        xp: Current total XP
        level: Currently recorded level
        amount: XP to add (negative amounts are ignored)

    Returns:
        {
            'xp_awarded': int,
            'new_total_xp': int,
            'old_level': int,
            'new_level': int,
            'leveled_up': bool
        }
    """
    awarded = max(amount, 0)
    new_total_xp = xp + awarded
    new_level = level_from_xp(new_total_xp)
    leveled_up = new_level > level

    if leveled_up:
        logger.info(f"Level up: {level} -> {new_level} ({new_total_xp} XP)")

    return {
        "xp_awarded": awarded,
        "new_total_xp": new_total_xp,
        "old_level": level,
        "new_level": new_level,
        "leveled_up": leveled_up,
    }
