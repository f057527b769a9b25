"""Progress snapshot and derived progression values"""
from datetime import date
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from progression.config import DEFAULT_WEEKLY_GOAL
from progression.models.catalog import SkillCategory, TrainingProgram


class ProgressSnapshot(BaseModel):
    """
    Durable per-user progression state.

    Serialized with camelCase aliases so the stored document keeps the
    shape the mobile client has always written. Sets are written as
    sorted lists.
    """
    model_config = ConfigDict(populate_by_name=True)

    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    streak: int = Field(default=0, ge=0)
    last_training_date: Optional[date] = Field(default=None, alias="lastTrainingDate")
    completed_drills: set[str] = Field(default_factory=set, alias="completedDrills")
    completed_workouts: set[str] = Field(default_factory=set, alias="completedWorkouts")
    enrolled_programs: set[str] = Field(default_factory=set, alias="enrolledPrograms")
    program_progress: dict[str, int] = Field(default_factory=dict, alias="programProgress")
    total_training_minutes: int = Field(default=0, ge=0, alias="totalTrainingMinutes")
    drills_completed_today: int = Field(default=0, ge=0, alias="drillsCompletedToday")
    weekly_goal: int = Field(default=DEFAULT_WEEKLY_GOAL, alias="weeklyGoal")
    weekly_progress: int = Field(default=0, alias="weeklyProgress")
    weekly_minutes: int = Field(default=0, alias="weeklyMinutes")
    week_start_date: Optional[date] = Field(default=None, alias="weekStartDate")
    sessions_this_week: int = Field(default=0, alias="sessionsThisWeek")
    session_dates: set[date] = Field(default_factory=set, alias="sessionDates")
    app_open_minutes_this_week: int = Field(default=0, ge=0, alias="appOpenMinutesThisWeek")

    @model_validator(mode="before")
    @classmethod
    def drop_null_counters(cls, data: Any) -> Any:
        """Older documents may carry nulls where a default is expected"""
        if not isinstance(data, dict):
            return data
        nullable = {
            "lastTrainingDate", "last_training_date",
            "weekStartDate", "week_start_date",
        }
        return {k: v for k, v in data.items() if v is not None or k in nullable}

    @field_serializer("completed_drills", "completed_workouts", "enrolled_programs")
    def _serialize_id_set(self, value: set[str]) -> list[str]:
        return sorted(value)

    @field_serializer("session_dates")
    def _serialize_date_set(self, value: set[date]) -> list[str]:
        return [d.isoformat() for d in sorted(value)]

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict using the stored field names"""
        return self.model_dump(mode="json", by_alias=True)


class SkillProgress(BaseModel):
    """Mastery state of one skill path for a player"""
    skill_id: SkillCategory
    title: str = ""
    current_level: int = 1
    progress_percent: int = 0
    drills_completed: int = 0
    total_drills: int = 0
    total_levels: int = 0


class EnrolledProgramDetails(BaseModel):
    """Enrolled program plus the player's completion percent"""
    program: TrainingProgram
    progress: int = 0


class DailyWorkout(BaseModel):
    """Recommended drills for one day; derived, never persisted"""
    id: str
    date: date
    title: str
    description: str
    duration: int
    drill_ids: list[str]
    focus_area: SkillCategory
    difficulty: str
    xp_reward: int


class MutationResult(BaseModel):
    """Outcome of a progress mutation; failures are reported, not raised"""
    success: bool
    operation: str
    xp_earned: int = 0
    leveled_up: bool = False
    new_level: Optional[int] = None
    changed: bool = True
    persisted: bool = False
    error: Optional[dict[str, Any]] = None
