"""Domain events consumed by the progression engine"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class PenaltyReason(str, Enum):
    """Causes of health decay"""
    MISSED_TASK = "missed_task"
    MISSED_DAILY = "missed_daily"
    INACTIVE_DAY = "inactive_day"


class LessonCompleted(BaseModel):
    type: Literal["lesson_completed"] = "lesson_completed"
    score: int = Field(0, ge=0, le=100)
    xp_reward: int = 10


class TaskCompleted(BaseModel):
    type: Literal["task_completed"] = "task_completed"
    xp_reward: int = 15


class TaskUncompleted(BaseModel):
    """Reversal of an earlier TaskCompleted"""
    type: Literal["task_uncompleted"] = "task_uncompleted"
    xp_reward: int = 15


class TaskMissed(BaseModel):
    type: Literal["task_missed"] = "task_missed"
    reason: PenaltyReason = PenaltyReason.MISSED_TASK
    health_penalty: Optional[int] = Field(None, ge=0)


class GameCompleted(BaseModel):
    type: Literal["game_completed"] = "game_completed"
    score: int = Field(0, ge=0, le=100)
    xp_reward: int = 20


class StreakCheck(BaseModel):
    type: Literal["streak_check"] = "streak_check"
    now: Optional[datetime] = None


class ItemUsed(BaseModel):
    type: Literal["item_used"] = "item_used"
    item_id: str = Field(..., min_length=1)


class ItemGranted(BaseModel):
    type: Literal["item_granted"] = "item_granted"
    item_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


Event = Annotated[
    Union[
        LessonCompleted,
        TaskCompleted,
        TaskUncompleted,
        TaskMissed,
        GameCompleted,
        StreakCheck,
        ItemUsed,
        ItemGranted,
    ],
    Field(discriminator="type"),
]

event_adapter = TypeAdapter(Event)


def parse_event(payload: dict) -> Event:
    """Build an event model from a plain dict (e.g. a decoded JSON body)"""
    return event_adapter.validate_python(payload)
