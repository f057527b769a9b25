"""Player profile inputs consumed by the daily workout generator"""
from typing import Optional
from pydantic import BaseModel, Field

from progression.models.catalog import Position, SkillCategory, SkillLevel


class PlayerProfile(BaseModel):
    """Personalization data owned by the profile provider (read-only here)"""
    user_id: str
    position: Optional[Position] = None
    goals: list[SkillCategory] = Field(default_factory=list)
    skill_level: Optional[SkillLevel] = None
