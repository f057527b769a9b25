"""Content catalog models (drills, programs, skill mastery paths)"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class SkillCategory(str, Enum):
    """Training categories; each has one mastery path"""
    SHOOTING = "shooting"
    DRIBBLING = "dribbling"
    PASSING = "passing"
    SPEED = "speed"
    DEFENSE = "defense"
    FITNESS = "fitness"


class Position(str, Enum):
    """Pitch positions a drill can target"""
    ST = "ST"
    LW = "LW"
    RW = "RW"
    CAM = "CAM"
    CM = "CM"
    CDM = "CDM"
    LB = "LB"
    RB = "RB"
    CB = "CB"
    GK = "GK"


class DrillDifficulty(str, Enum):
    """Drill difficulty tiers"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    ELITE = "elite"


class SkillLevel(str, Enum):
    """Player self-reported skill level"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Drill(BaseModel):
    """Single training drill"""
    id: str
    title: str
    description: str = ""
    duration: int = Field(..., ge=0, description="Minutes")
    difficulty: DrillDifficulty
    category: SkillCategory
    positions: list[Position] = Field(default_factory=list)
    is_pro: bool = False
    equipment: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    xp_reward: int = Field(..., ge=0)
    video_tip: Optional[str] = None


class ProgramPhase(BaseModel):
    """Week-scoped block of a training program"""
    week: int
    title: str
    description: str = ""
    drill_ids: list[str]


class TrainingProgram(BaseModel):
    """Multi-week training program"""
    id: str
    title: str
    description: str = ""
    category: SkillCategory
    difficulty: SkillLevel
    weeks: int
    is_pro: bool = False
    phases: list[ProgramPhase]

    def all_drill_ids(self) -> list[str]:
        """Flattened drill ids across every phase, duplicates kept"""
        return [drill_id for phase in self.phases for drill_id in phase.drill_ids]


class SkillMasteryLevel(BaseModel):
    """Gated stage within a skill mastery path"""
    level: int = Field(..., ge=1)
    title: str
    description: str = ""
    drill_ids: list[str]
    xp_required: int = 0
    unlock_reward: int = 0


class SkillMasteryPath(BaseModel):
    """Ordered levels for one training category"""
    id: SkillCategory
    title: str
    description: str = ""
    levels: list[SkillMasteryLevel]

    @property
    def total_levels(self) -> int:
        return len(self.levels)
