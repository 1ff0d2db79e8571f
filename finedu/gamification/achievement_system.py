"""
Achievement System

Catalog of the achievements a learner can unlock, grouped in categories:
- Milestones (first lesson, levels 5 and 10)
- Consistency (7 and 30 day streaks)
- Mastery (perfect scores)
- Habits (early morning and late evening study)

Unlocking itself happens in the progression engine; this module only
describes achievements and summarizes an avatar's progress through them.
"""

from typing import Any, Dict, List, Union
import logging

from finedu.exceptions import UnknownAchievementError
from finedu.gamification.constants import LEVEL_MILESTONES, STREAK_MILESTONES
from finedu.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementTier,
    AchievementType,
)
from finedu.models.avatar import Avatar

logger = logging.getLogger(__name__)


ACHIEVEMENTS: Dict[AchievementType, Achievement] = {
    a.id: a
    for a in [
        Achievement(
            id=AchievementType.FIRST_LESSON,
            name="First Steps",
            description="Complete your first lesson",
            icon="📘",
            category=AchievementCategory.MILESTONES,
            tier=AchievementTier.BRONZE,
        ),
        Achievement(
            id=AchievementType.STREAK_7,
            name="Week Warrior",
            description="Keep a 7 day learning streak",
            icon="🔥",
            category=AchievementCategory.CONSISTENCY,
            tier=AchievementTier.SILVER,
        ),
        Achievement(
            id=AchievementType.STREAK_30,
            name="Monthly Master",
            description="Keep a 30 day learning streak",
            icon="🏆",
            category=AchievementCategory.CONSISTENCY,
            tier=AchievementTier.GOLD,
        ),
        Achievement(
            id=AchievementType.LEVEL_5,
            name="Rising Saver",
            description="Reach level 5",
            icon="⭐",
            category=AchievementCategory.MILESTONES,
            tier=AchievementTier.SILVER,
        ),
        Achievement(
            id=AchievementType.LEVEL_10,
            name="Money Mentor",
            description="Reach level 10",
            icon="🌟",
            category=AchievementCategory.MILESTONES,
            tier=AchievementTier.GOLD,
        ),
        Achievement(
            id=AchievementType.PERFECT_SCORE,
            name="Perfectionist",
            description="Score 100 on a lesson or game",
            icon="💯",
            category=AchievementCategory.MASTERY,
            tier=AchievementTier.SILVER,
        ),
        Achievement(
            id=AchievementType.EARLY_BIRD,
            name="Early Bird",
            description="Study early in the morning",
            icon="🌅",
            category=AchievementCategory.HABITS,
            tier=AchievementTier.BRONZE,
        ),
        Achievement(
            id=AchievementType.NIGHT_OWL,
            name="Night Owl",
            description="Study late in the evening",
            icon="🦉",
            category=AchievementCategory.HABITS,
            tier=AchievementTier.BRONZE,
        ),
    ]
}


def resolve_achievement_id(achievement_id: Union[AchievementType, str]) -> AchievementType:
    """Coerce a raw id into an AchievementType, rejecting unknown ids"""
    try:
        return AchievementType(achievement_id)
    except ValueError:
        raise UnknownAchievementError(achievement_id)


def get_achievement(achievement_id: Union[AchievementType, str]) -> Achievement:
    """Catalog entry for an achievement id"""
    return ACHIEVEMENTS[resolve_achievement_id(achievement_id)]


def _progress(avatar: Avatar, achievement_id: AchievementType) -> Dict[str, int]:
    """Current/target counts toward a locked achievement"""
    for level, milestone in LEVEL_MILESTONES.items():
        if milestone == achievement_id:
            return {"current": min(avatar.level, level), "target": level}
    for days, milestone in STREAK_MILESTONES.items():
        if milestone == achievement_id:
            return {"current": min(avatar.max_streak, days), "target": days}
    if achievement_id == AchievementType.FIRST_LESSON:
        return {"current": min(avatar.total_lessons_completed, 1), "target": 1}
    # Single-event achievements have no partial progress
    return {"current": 0, "target": 1}


def get_user_achievements(avatar: Avatar, include_locked: bool = False) -> Dict[str, Any]:
    """
    Summarize an avatar's achievements

    Args:
        avatar: Avatar to summarize
        include_locked: Whether to include locked achievements with progress

    Returns:
        {
            'unlocked': [achievement dicts in unlock order],
            'locked': [achievement dicts with progress] (if include_locked=True),
            'total_unlocked': int,
            'total_achievements': int
        }
    """
    unlocked = [ACHIEVEMENTS[a].model_dump(mode="json") for a in avatar.achievements]

    result: Dict[str, Any] = {
        "unlocked": unlocked,
        "total_unlocked": len(unlocked),
        "total_achievements": len(ACHIEVEMENTS),
    }

    if include_locked:
        locked: List[Dict[str, Any]] = []
        for achievement_id, achievement in ACHIEVEMENTS.items():
            if achievement_id in avatar.achievements:
                continue
            progress = _progress(avatar, achievement_id)
            progress["percentage"] = int(progress["current"] / progress["target"] * 100)
            entry = achievement.model_dump(mode="json")
            entry["progress"] = progress
            locked.append(entry)

        # Closest to completion first
        locked.sort(key=lambda x: x["progress"]["percentage"], reverse=True)
        result["locked"] = locked

    return result
