"""Avatar (per-user progression state) models"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from finedu.models.achievement import AchievementType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Avatar(BaseModel):
    """
    Gamification state of one user

    Values are treated as immutable by the progression engine: every
    operation works on a deep copy and returns the new value.
    """
    level: int = Field(1, ge=1)
    xp: int = Field(0, ge=0)
    health: int = Field(100, ge=0, le=100)
    streak: int = Field(0, ge=0)
    max_streak: int = Field(0, ge=0)
    total_lessons_completed: int = Field(0, ge=0)
    total_tasks_completed: int = Field(0, ge=0)
    total_games_played: int = Field(0, ge=0)
    achievements: list[AchievementType] = Field(default_factory=list)
    inventory: dict[str, int] = Field(default_factory=dict)
    last_activity_date: datetime = Field(default_factory=_utcnow)

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "Avatar":
        """Default avatar, created on first access"""
        return cls(last_activity_date=now or _utcnow())


class AvatarStats(BaseModel):
    """Read-only view of an avatar, used as the API serialization contract"""
    level: int
    xp: int
    health: int
    health_percentage: int
    streak: int
    max_streak: int
    xp_for_next_level: int
    xp_progress: float
    total_lessons_completed: int
    total_tasks_completed: int
    total_games_played: int
    achievements: list[AchievementType]
    inventory: dict[str, int]
