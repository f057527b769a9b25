"""Unit tests for Skill Mastery Resolver (progression/gamification/skill_mastery.py)"""
import pytest

from progression.gamification.skill_mastery import (
    get_current_skill_level,
    is_level_complete,
    is_level_pro_locked,
    is_skill_level_unlocked,
)
from progression.models.catalog import SkillCategory, SkillMasteryLevel, SkillMasteryPath

SHOOTING_LEVEL_1 = {"shoot-1", "shoot-11", "shoot-14"}
SHOOTING_LEVEL_2 = {"shoot-5", "shoot-10", "shoot-20"}


@pytest.fixture
def small_path():
    """Three-level path with two drills per level"""
    return SkillMasteryPath(
        id=SkillCategory.PASSING,
        title="Passing Mastery",
        levels=[
            SkillMasteryLevel(level=1, title="Basics", drill_ids=["a", "b"]),
            SkillMasteryLevel(level=2, title="Range", drill_ids=["c", "d"]),
            SkillMasteryLevel(level=3, title="Vision", drill_ids=["e", "f"]),
        ],
    )


@pytest.fixture
def shooting_path(catalog):
    return catalog.get_skill_path(SkillCategory.SHOOTING)


# ============================================================================
# Current Level Tests
# ============================================================================

def test_current_level_nothing_completed(small_path):
    """Test empty history starts at level 1 with 0%"""
    progress = get_current_skill_level(small_path, set())

    assert progress.skill_id == SkillCategory.PASSING
    assert progress.current_level == 1
    assert progress.progress_percent == 0
    assert progress.drills_completed == 0
    assert progress.total_drills == 6
    assert progress.total_levels == 3


def test_current_level_advances_after_complete_level(small_path):
    """Test finishing level 1 moves to level 2"""
    progress = get_current_skill_level(small_path, {"a", "b", "c"})

    assert progress.current_level == 2
    assert progress.drills_completed == 3
    assert progress.progress_percent == 50


def test_current_level_out_of_order_completion_does_not_skip(small_path):
    """Test a finished later level does not skip an unfinished earlier one"""
    progress = get_current_skill_level(small_path, {"a", "e", "f"})

    assert progress.current_level == 1
    # Percent still counts every completed drill
    assert progress.progress_percent == 50


def test_current_level_capped_at_path_length(small_path):
    """Test a fully completed path stays on its last level"""
    progress = get_current_skill_level(small_path, {"a", "b", "c", "d", "e", "f"})

    assert progress.current_level == 3
    assert progress.progress_percent == 100


def test_current_level_sorts_levels(small_path):
    """Test level order comes from level numbers, not list order"""
    shuffled = small_path.model_copy(update={"levels": list(reversed(small_path.levels))})

    assert get_current_skill_level(shuffled, {"a", "b"}).current_level == 2


def test_current_level_ignores_unrelated_drills(small_path):
    """Test drills outside the path do not count"""
    progress = get_current_skill_level(small_path, {"x", "y", "z"})

    assert progress.drills_completed == 0
    assert progress.current_level == 1


def test_shooting_level_one_complete(shooting_path):
    """Test completing every level 1 shooting drill reaches level 2"""
    progress = get_current_skill_level(shooting_path, SHOOTING_LEVEL_1)

    assert progress.current_level == 2
    assert progress.total_levels == 10


# ============================================================================
# Unlock Tests
# ============================================================================

def test_level_one_always_unlocked(small_path):
    """Test level 1 is open with no history"""
    assert is_skill_level_unlocked(small_path, 1, set()) is True


def test_level_after_last_follows_previous_level(small_path):
    """Test the level past the end unlocks once the last level is complete"""
    assert is_skill_level_unlocked(small_path, 4, {"a", "b", "c", "d"}) is False
    assert is_skill_level_unlocked(small_path, 4, {"e", "f"}) is True


def test_level_without_previous_level_is_locked(small_path):
    """Test levels with no previous level in the path stay locked"""
    assert is_skill_level_unlocked(small_path, 5, {"a", "b", "c", "d", "e", "f"}) is False
    assert is_skill_level_unlocked(small_path, 0, set()) is False


def test_shooting_level_after_last(shooting_path):
    """Test level 11 unlocks once every shooting drill is done"""
    done = {d for level in shooting_path.levels for d in level.drill_ids}

    assert is_skill_level_unlocked(shooting_path, 11, done) is True


def test_shooting_unlock_scenario(shooting_path):
    """Test level 2 unlocks only once all level 1 drills are done"""
    assert is_skill_level_unlocked(shooting_path, 2, {"shoot-1", "shoot-11"}) is False
    assert is_skill_level_unlocked(shooting_path, 2, SHOOTING_LEVEL_1) is True
    assert is_skill_level_unlocked(shooting_path, 3, SHOOTING_LEVEL_1) is False
    assert is_skill_level_unlocked(shooting_path, 3, SHOOTING_LEVEL_1 | SHOOTING_LEVEL_2) is True


def test_is_level_complete(small_path):
    """Test level completion requires every drill"""
    level = small_path.levels[0]

    assert is_level_complete(level, {"a"}) is False
    assert is_level_complete(level, {"a", "b"}) is True


# ============================================================================
# Pro Gating Tests
# ============================================================================

@pytest.mark.parametrize("level,locked", [(1, False), (2, False), (3, True), (10, True)])
def test_is_level_pro_locked(level, locked):
    """Test first two levels are free"""
    assert is_level_pro_locked(level) is locked
