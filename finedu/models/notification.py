"""Notifications emitted by the progression engine for the UI layer"""
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Kinds of state change reported to the user"""
    XP_GAINED = "xp_gained"
    LEVEL_UP = "level_up"
    HEALTH_CHANGED = "health_changed"
    STREAK_CONTINUED = "streak_continued"
    STREAK_BROKEN = "streak_broken"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    AVATAR_RESET = "avatar_reset"


class Notification(BaseModel):
    """One state change, with the values needed to describe it"""
    type: NotificationType
    data: dict[str, Any] = Field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]
