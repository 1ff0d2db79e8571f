"""Pydantic models shared by the engine and the service layer"""
from finedu.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementTier,
    AchievementType,
)
from finedu.models.avatar import Avatar, AvatarStats
from finedu.models.events import (
    Event,
    GameCompleted,
    ItemGranted,
    ItemUsed,
    LessonCompleted,
    PenaltyReason,
    StreakCheck,
    TaskCompleted,
    TaskMissed,
    TaskUncompleted,
    parse_event,
)
from finedu.models.notification import Notification, NotificationType

__all__ = [
    "Achievement",
    "AchievementCategory",
    "AchievementTier",
    "AchievementType",
    "Avatar",
    "AvatarStats",
    "Event",
    "GameCompleted",
    "ItemGranted",
    "ItemUsed",
    "LessonCompleted",
    "PenaltyReason",
    "StreakCheck",
    "TaskCompleted",
    "TaskMissed",
    "TaskUncompleted",
    "parse_event",
    "Notification",
    "NotificationType",
]
