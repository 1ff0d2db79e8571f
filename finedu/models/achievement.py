"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel


class AchievementType(str, Enum):
    """Achievement identifiers stored on the avatar"""
    FIRST_LESSON = "first_lesson"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"
    LEVEL_5 = "level_5"
    LEVEL_10 = "level_10"
    PERFECT_SCORE = "perfect_score"
    EARLY_BIRD = "early_bird"
    NIGHT_OWL = "night_owl"


class AchievementCategory(str, Enum):
    """Achievement categories"""
    CONSISTENCY = "consistency"
    MILESTONES = "milestones"
    MASTERY = "mastery"
    HABITS = "habits"


class AchievementTier(str, Enum):
    """Achievement tiers/difficulty levels"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class Achievement(BaseModel):
    """Achievement definition"""
    id: AchievementType
    name: str
    description: str
    icon: str
    category: AchievementCategory
    tier: AchievementTier
