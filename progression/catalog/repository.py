"""
Read-only content catalog

Drills, training programs and skill mastery paths are static reference
data. The engine only reads them through CatalogRepository so tests can
swap in a small catalog.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError

from progression.config import CATALOG_PATH
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
    SkillCategory,
    SkillLevel,
    SkillMasteryPath,
    TrainingProgram,
)

logger = logging.getLogger(__name__)


class CatalogRepository(ABC):
    """Lookup interface over the content catalog"""

    @abstractmethod
    def list_drills(self) -> Sequence[Drill]:
        ...

    @abstractmethod
    def list_programs(self) -> Sequence[TrainingProgram]:
        ...

    @abstractmethod
    def list_skill_paths(self) -> Sequence[SkillMasteryPath]:
        ...

    @abstractmethod
    def find_drill(self, drill_id: str) -> Optional[Drill]:
        ...

    @abstractmethod
    def find_program(self, program_id: str) -> Optional[TrainingProgram]:
        ...

    @abstractmethod
    def find_skill_path(self, skill_id: str) -> Optional[SkillMasteryPath]:
        ...

    def get_drill_by_id(self, drill_id: str) -> Drill:
        drill = self.find_drill(drill_id)
        if drill is None:
            raise DrillNotFoundError(drill_id, operation="get_drill_by_id")
        return drill

    def get_program_by_id(self, program_id: str) -> TrainingProgram:
        program = self.find_program(program_id)
        if program is None:
            raise ProgramNotFoundError(program_id, operation="get_program_by_id")
        return program

    def get_skill_path(self, skill_id: str) -> SkillMasteryPath:
        path = self.find_skill_path(skill_id)
        if path is None:
            raise SkillPathNotFoundError(skill_id, operation="get_skill_path")
        return path

    def get_drills_by_category(self, category: SkillCategory) -> list[Drill]:
        return [d for d in self.list_drills() if d.category == category]


class InMemoryCatalog(CatalogRepository):
    """Catalog held in memory, indexed by id"""

    def __init__(
        self,
        drills: Iterable[Drill] = (),
        programs: Iterable[TrainingProgram] = (),
        skill_paths: Iterable[SkillMasteryPath] = ()
    ):
        self._drills = list(drills)
        self._programs = list(programs)
        self._skill_paths = list(skill_paths)
        self._drills_by_id = {d.id: d for d in self._drills}
        self._programs_by_id = {p.id: p for p in self._programs}
        self._paths_by_id = {p.id.value: p for p in self._skill_paths}

    def list_drills(self) -> Sequence[Drill]:
        return tuple(self._drills)

    def list_programs(self) -> Sequence[TrainingProgram]:
        return tuple(self._programs)

    def list_skill_paths(self) -> Sequence[SkillMasteryPath]:
        return tuple(self._skill_paths)

    def find_drill(self, drill_id: str) -> Optional[Drill]:
        return self._drills_by_id.get(drill_id)

    def find_program(self, program_id: str) -> Optional[TrainingProgram]:
        return self._programs_by_id.get(program_id)

    def find_skill_path(self, skill_id: str) -> Optional[SkillMasteryPath]:
        return self._paths_by_id.get(str(getattr(skill_id, "value", skill_id)))


class JsonCatalogRepository(InMemoryCatalog):
    """Catalog loaded from a JSON document with drills, programs and skill_paths"""

    def __init__(self, catalog_path: Path = CATALOG_PATH):
        self.catalog_path = Path(catalog_path)
        try:
            raw = json.loads(self.catalog_path.read_text(encoding="utf-8"))
            drills = [Drill.model_validate(d) for d in raw.get("drills", [])]
            programs = [TrainingProgram.model_validate(p) for p in raw.get("programs", [])]
            skill_paths = [SkillMasteryPath.model_validate(p) for p in raw.get("skill_paths", [])]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise CatalogError(
                message=f"Failed to load catalog from {self.catalog_path}",
                operation="load_catalog",
                context={"path": str(self.catalog_path)},
                cause=e,
            )

        super().__init__(drills, programs, skill_paths)
        logger.info(
            f"Loaded catalog: {len(drills)} drills, {len(programs)} programs, "
            f"{len(skill_paths)} skill paths"
        )


def get_recommended_drills(
    catalog: CatalogRepository,
    position: Optional[Position],
    goals: Sequence[SkillCategory],
    skill_level: Optional[SkillLevel],
    limit: int = 3
) -> list[Drill]:
    """
    Drills for the player's position, goal categories first

    Beginners never see hard or elite drills.
    """
    drills = list(catalog.list_drills())

    if position:
        drills = [d for d in drills if position in d.positions]

    if goals:
        goal_set = {SkillCategory(g) for g in goals}
        # sort is stable, so catalog order is kept inside each group
        drills.sort(key=lambda d: 0 if d.category in goal_set else 1)

    if skill_level == SkillLevel.BEGINNER:
        drills = [
            d for d in drills
            if d.difficulty not in (DrillDifficulty.HARD, DrillDifficulty.ELITE)
        ]

    return drills[:limit]


def program_progress_percent(program: TrainingProgram, completed_drills: Iterable[str]) -> int:
    """Rounded percent of the program's distinct drills already completed"""
    program_drills = set(program.all_drill_ids())
    if not program_drills:
        return 0
    done = len(program_drills & set(completed_drills))
    return round(done / len(program_drills) * 100)
