"""
Daily Workout Generator

Builds the recommended workout for one day from the player's profile
and completion history. The result is derived and never persisted.

Selection:
1. Focus area: first goal, else rotate through the six categories by
   day of week; Sunday is always a fitness/recovery day
2. Pool: drills in the focus area or fitness, matching the position
   (if any) and allowed by the skill level
3. Prefer drills not completed yet when at least three remain
4. Shuffle with a generator seeded by user and date, take up to four
"""

import random
from datetime import date, datetime
from typing import AbstractSet, Iterable, Optional, Sequence
import logging

from progression.config import (
    DAILY_WORKOUT_BONUS_XP,
    DAILY_WORKOUT_MAX_DRILLS,
    DAILY_WORKOUT_MIN_FRESH_DRILLS,
)
from progression.models.catalog import (
    Drill,
    DrillDifficulty,
    Position,
    SkillCategory,
    SkillLevel,
)
from progression.models.progress import DailyWorkout
from progression.utils.datetime_helpers import js_day_of_week, today_key

logger = logging.getLogger(__name__)

FOCUS_ROTATION = [
    SkillCategory.SHOOTING,
    SkillCategory.DRIBBLING,
    SkillCategory.PASSING,
    SkillCategory.SPEED,
    SkillCategory.DEFENSE,
    SkillCategory.FITNESS,
]

WORKOUT_TITLES = {
    SkillCategory.SHOOTING: "Finishing Focus",
    SkillCategory.DRIBBLING: "Ball Mastery",
    SkillCategory.PASSING: "Vision & Passing",
    SkillCategory.SPEED: "Speed Session",
    SkillCategory.DEFENSE: "Defensive Drills",
    SkillCategory.FITNESS: "Conditioning Day",
}

SUNDAY = 0


def workout_seed(user_id: Optional[str], day: date) -> str:
    """Seed that keeps one workout per user per day"""
    return f"{user_id or 'anonymous'}:{day.isoformat()}"


def pick_focus_area(goals: Sequence[SkillCategory], day_of_week: int) -> SkillCategory:
    """First goal wins, otherwise rotate by weekday; Sundays are for fitness"""
    if day_of_week == SUNDAY:
        return SkillCategory.FITNESS
    if goals:
        return SkillCategory(goals[0])
    return FOCUS_ROTATION[day_of_week % len(FOCUS_ROTATION)]


def allowed_difficulties(skill_level: Optional[SkillLevel]) -> set[DrillDifficulty]:
    if skill_level == SkillLevel.BEGINNER:
        return {DrillDifficulty.EASY, DrillDifficulty.MEDIUM}
    if skill_level == SkillLevel.ADVANCED:
        return set(DrillDifficulty)
    return {DrillDifficulty.EASY, DrillDifficulty.MEDIUM, DrillDifficulty.HARD}


def workout_difficulty(skill_level: Optional[SkillLevel]) -> str:
    if skill_level == SkillLevel.BEGINNER:
        return "easy"
    if skill_level == SkillLevel.ADVANCED:
        return "hard"
    return "medium"


def filter_drill_pool(
    drills: Iterable[Drill],
    focus_area: SkillCategory,
    position: Optional[Position],
    skill_level: Optional[SkillLevel]
) -> list[Drill]:
    """Drills eligible for a workout, in catalog order"""
    difficulties = allowed_difficulties(skill_level)
    return [
        d for d in drills
        if d.category in (focus_area, SkillCategory.FITNESS)
        and (position is None or position in d.positions)
        and d.difficulty in difficulties
    ]


def generate_daily_workout(
    drills: Sequence[Drill],
    position: Optional[Position],
    goals: Sequence[SkillCategory],
    skill_level: Optional[SkillLevel],
    completed_drills: AbstractSet[str],
    now: datetime,
    user_id: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> DailyWorkout:
    """
    Generate the recommended workout for the day containing `now`

    Args:
        drills: Full drill catalog
        position: Player position, None for no position filter
        goals: Player goals, most important first
        skill_level: Player skill level, None treated as intermediate
        completed_drills: Ids of every drill the player has completed
        now: Clock reading
        user_id: Used with the date to seed the shuffle
        rng: Explicit random source (overrides the seed)

    Returns:
        DailyWorkout keyed by date
    """
    day = today_key(now)
    focus_area = pick_focus_area(goals, js_day_of_week(now))

    pool = filter_drill_pool(drills, focus_area, position, skill_level)

    fresh = [d for d in pool if d.id not in completed_drills]
    if len(fresh) >= DAILY_WORKOUT_MIN_FRESH_DRILLS:
        pool = fresh

    if rng is None:
        rng = random.Random(workout_seed(user_id, day))
    shuffled = list(pool)
    rng.shuffle(shuffled)
    selected = shuffled[:DAILY_WORKOUT_MAX_DRILLS]

    if not selected:
        logger.warning(
            f"No drills available for focus={focus_area.value}, "
            f"position={position}, skill_level={skill_level}"
        )

    return DailyWorkout(
        id=f"daily-{day.isoformat()}",
        date=day,
        title=WORKOUT_TITLES[focus_area],
        description=f"{len(selected)} drills focused on {focus_area.value}",
        duration=sum(d.duration for d in selected),
        drill_ids=[d.id for d in selected],
        focus_area=focus_area,
        difficulty=workout_difficulty(skill_level),
        xp_reward=sum(d.xp_reward for d in selected) + DAILY_WORKOUT_BONUS_XP,
    )
