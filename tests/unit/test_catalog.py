"""Unit tests for the content catalog (progression/catalog/repository.py)"""
import json

import pytest

from progression.catalog.repository import (
    InMemoryCatalog,
    JsonCatalogRepository,
    get_recommended_drills,
    program_progress_percent,
)
from progression.exceptions import (
    CatalogError,
    DrillNotFoundError,
    ProgramNotFoundError,
    SkillPathNotFoundError,
)
from progression.models.catalog import (
    Drill,
    DrillDifficulty,
    Position,
    ProgramPhase,
    SkillCategory,
    SkillLevel,
    TrainingProgram,
)


def make_drill(drill_id, category, difficulty=DrillDifficulty.EASY, positions=(Position.ST,)):
    return Drill(
        id=drill_id,
        title=drill_id,
        duration=10,
        difficulty=difficulty,
        category=category,
        positions=list(positions),
        xp_reward=20,
    )


# ============================================================================
# Bundled Catalog Tests
# ============================================================================

def test_bundled_catalog_loads(catalog):
    """Test bundled catalog has drills, programs and one path per category"""
    assert len(catalog.list_drills()) > 0
    assert len(catalog.list_programs()) > 0
    assert {p.id for p in catalog.list_skill_paths()} == set(SkillCategory)


def test_bundled_catalog_references_are_valid(catalog):
    """Test every drill id used by programs and paths exists"""
    for program in catalog.list_programs():
        for drill_id in program.all_drill_ids():
            assert catalog.find_drill(drill_id) is not None, f"{program.id}: {drill_id}"

    for path in catalog.list_skill_paths():
        for level in path.levels:
            for drill_id in level.drill_ids:
                assert catalog.find_drill(drill_id) is not None, f"{path.id}: {drill_id}"


def test_get_drill_by_id(catalog):
    """Test known drill lookup"""
    drill = catalog.get_drill_by_id("shoot-1")

    assert drill.category == SkillCategory.SHOOTING
    assert drill.xp_reward == 50


def test_get_drill_by_id_unknown(catalog):
    """Test unknown drill raises DrillNotFoundError"""
    with pytest.raises(DrillNotFoundError) as exc_info:
        catalog.get_drill_by_id("nope")

    assert exc_info.value.drill_id == "nope"
    assert catalog.find_drill("nope") is None


def test_get_program_by_id_unknown(catalog):
    """Test unknown program raises ProgramNotFoundError"""
    with pytest.raises(ProgramNotFoundError):
        catalog.get_program_by_id("prog-unknown")


def test_get_skill_path_accepts_enum_or_string(catalog):
    """Test skill paths are found by enum member or plain string"""
    assert catalog.get_skill_path(SkillCategory.SHOOTING).id == SkillCategory.SHOOTING
    assert catalog.get_skill_path("shooting").id == SkillCategory.SHOOTING


def test_get_skill_path_unknown():
    """Test missing path raises SkillPathNotFoundError"""
    with pytest.raises(SkillPathNotFoundError):
        InMemoryCatalog().get_skill_path(SkillCategory.SPEED)


def test_get_drills_by_category(catalog):
    """Test category filter"""
    drills = catalog.get_drills_by_category(SkillCategory.FITNESS)

    assert drills
    assert all(d.category == SkillCategory.FITNESS for d in drills)


# ============================================================================
# Loading Errors
# ============================================================================

def test_missing_catalog_file(tmp_path):
    """Test unreadable catalog raises CatalogError"""
    with pytest.raises(CatalogError):
        JsonCatalogRepository(tmp_path / "missing.json")


def test_invalid_catalog_document(tmp_path):
    """Test schema violations raise CatalogError"""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"drills": [{"id": "x"}]}))

    with pytest.raises(CatalogError):
        JsonCatalogRepository(path)


def test_custom_catalog_file(tmp_path):
    """Test a small catalog document loads"""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "drills": [make_drill("d1", SkillCategory.SPEED).model_dump(mode="json")],
        "programs": [],
        "skill_paths": [],
    }))

    repo = JsonCatalogRepository(path)

    assert [d.id for d in repo.list_drills()] == ["d1"]
    assert repo.list_programs() == ()


# ============================================================================
# Recommendation Tests
# ============================================================================

def test_recommended_drills_goal_categories_first():
    """Test goal categories come first, catalog order kept within groups"""
    repo = InMemoryCatalog(drills=[
        make_drill("pass-1", SkillCategory.PASSING),
        make_drill("shoot-1", SkillCategory.SHOOTING),
        make_drill("pass-2", SkillCategory.PASSING),
        make_drill("shoot-2", SkillCategory.SHOOTING),
    ])

    drills = get_recommended_drills(repo, None, [SkillCategory.SHOOTING], None, limit=3)

    assert [d.id for d in drills] == ["shoot-1", "shoot-2", "pass-1"]


def test_recommended_drills_accepts_string_goals():
    """Test goals given as plain strings still match"""
    repo = InMemoryCatalog(drills=[
        make_drill("pass-1", SkillCategory.PASSING),
        make_drill("shoot-1", SkillCategory.SHOOTING),
    ])

    drills = get_recommended_drills(repo, None, ["shooting"], None, limit=1)

    assert [d.id for d in drills] == ["shoot-1"]


def test_recommended_drills_position_and_beginner_filters():
    """Test position filter and beginner difficulty ceiling"""
    repo = InMemoryCatalog(drills=[
        make_drill("gk-only", SkillCategory.SHOOTING, positions=[Position.GK]),
        make_drill("hard", SkillCategory.SHOOTING, difficulty=DrillDifficulty.HARD),
        make_drill("elite", SkillCategory.SHOOTING, difficulty=DrillDifficulty.ELITE),
        make_drill("medium", SkillCategory.SHOOTING, difficulty=DrillDifficulty.MEDIUM),
    ])

    drills = get_recommended_drills(repo, Position.ST, [], SkillLevel.BEGINNER)

    assert [d.id for d in drills] == ["medium"]


# ============================================================================
# Program Progress Tests
# ============================================================================

@pytest.fixture
def program():
    return TrainingProgram(
        id="prog-test",
        title="Test Program",
        category=SkillCategory.SHOOTING,
        difficulty=SkillLevel.BEGINNER,
        weeks=2,
        phases=[
            ProgramPhase(week=1, title="One", drill_ids=["a", "b"]),
            ProgramPhase(week=2, title="Two", drill_ids=["b", "c"]),
        ],
    )


def test_program_progress_counts_distinct_drills(program):
    """Test drills repeated across phases count once"""
    assert program_progress_percent(program, set()) == 0
    assert program_progress_percent(program, {"b"}) == 33
    assert program_progress_percent(program, {"a", "b"}) == 67
    assert program_progress_percent(program, {"a", "b", "c", "z"}) == 100


def test_program_progress_empty_program(program):
    """Test a program without drills is 0%"""
    empty = program.model_copy(update={"phases": []})

    assert program_progress_percent(empty, {"a"}) == 0
