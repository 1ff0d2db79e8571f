"""
ProgressionService - Progression Orchestration

Relays learner activity to the progression engine and persists the result.
Each call loads the avatar, applies one engine operation, saves the new
snapshot and returns an API-style response:

    {
        'success': bool,
        'message': str,
        'xp_earned': int,
        'avatar': <AvatarStats as dict>,
        'notifications': [{'type', 'data', 'message'}]
    }

Read-modify-write is serialized per user with an asyncio.Lock, so one event
(with all its cascades) is stored before the next one for that user starts.
"""

import asyncio
import logging
import weakref
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, Optional, Union
from zoneinfo import ZoneInfo

from finedu import config
from finedu.exceptions import FinEduError
from finedu.gamification import engine
from finedu.gamification.achievement_system import get_user_achievements
from finedu.gamification.constants import HEALTH_POTION, XP_REWARDS
from finedu.models.avatar import Avatar
from finedu.models.events import Event, PenaltyReason, StreakCheck, parse_event
from finedu.models.notification import NotificationType
from finedu.observability.metrics import record_error, record_event
from finedu.services.avatar_store import AvatarStore
from finedu.services.notification_formatter import format_notification

logger = logging.getLogger(__name__)

Operation = Callable[[Avatar], engine.EngineResult]


class ProgressionService:
    """
    Service for learner progression.

    Responsibilities:
    - Loading and saving avatars
    - Per-user serialization of updates
    - Translating engine results into responses
    - Metrics for applied events
    """

    def __init__(self, store: AvatarStore, timezone: Optional[str] = None):
        """
        Initialize ProgressionService.

        Args:
            store: Avatar store used for snapshots
            timezone: IANA timezone for streak day boundaries (DEFAULT_TIMEZONE if omitted)
        """
        self.store = store
        self.timezone = ZoneInfo(timezone or config.DEFAULT_TIMEZONE)
        # Entries disappear once no call holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
        logger.debug(f"ProgressionService initialized (timezone={self.timezone.key})")

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def _localize(self, moment: Optional[datetime]) -> datetime:
        if moment is None:
            return datetime.now(self.timezone)
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.timezone)
        return moment.astimezone(self.timezone)

    async def _apply(
        self,
        user_id: str,
        event_type: str,
        operation: Operation,
        message: str,
        failure_message: str = "",
    ) -> Dict[str, Any]:
        async with self._lock_for(user_id):
            avatar = await self.store.get_or_create(user_id)
            try:
                result = operation(avatar)
            except FinEduError as e:
                e.user_id = e.user_id or user_id
                record_error(type(e).__name__, "engine")
                raise

            if result.success:
                await self.store.save(user_id, result.avatar)

        record_event(event_type, result.success, result.notifications)

        xp_earned = sum(
            n["amount"] for n in result.of_type(NotificationType.XP_GAINED)
        )
        logger.info(
            f"Progression processed: user={user_id}, event={event_type}, "
            f"success={result.success}, xp={xp_earned}, level={result.avatar.level}"
        )

        return {
            "success": result.success,
            "message": message if result.success else failure_message,
            "xp_earned": xp_earned,
            "avatar": engine.get_avatar_stats(result.avatar).model_dump(mode="json"),
            "notifications": [
                {
                    "type": n.type.value,
                    "data": n.data,
                    "message": format_notification(n),
                }
                for n in result.notifications
            ],
        }

    # ============================================
    # Completion events
    # ============================================

    async def complete_lesson(
        self,
        user_id: str,
        score: int = 0,
        xp_reward: int = XP_REWARDS["lesson"],
        completed_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Process a finished lesson (score 0-100)"""
        return await self._apply(
            user_id,
            "lesson_completed",
            partial(engine.complete_lesson, score=score, xp_reward=xp_reward,
                    now=self._localize(completed_at)),
            "Lesson completed! Great job!",
        )

    async def complete_task(
        self,
        user_id: str,
        xp_reward: int = XP_REWARDS["task"],
        completed_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Process a finished task"""
        return await self._apply(
            user_id,
            "task_completed",
            partial(engine.complete_task, xp_reward=xp_reward, now=self._localize(completed_at)),
            "Task completed! You earned XP!",
        )

    async def uncomplete_task(self, user_id: str, xp_reward: int = XP_REWARDS["task"]) -> Dict[str, Any]:
        """Undo a task completion (XP and counter)"""
        return await self._apply(
            user_id,
            "task_uncompleted",
            partial(engine.uncomplete_task, xp_reward=xp_reward),
            "Task marked as incomplete",
        )

    async def complete_game(
        self,
        user_id: str,
        score: int = 0,
        xp_reward: int = XP_REWARDS["game"],
        completed_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Process a finished mini-game (score 0-100)"""
        return await self._apply(
            user_id,
            "game_completed",
            partial(engine.complete_game, score=score, xp_reward=xp_reward,
                    now=self._localize(completed_at)),
            "Game completed! Check your achievements!",
        )

    # ============================================
    # Streak, health and inventory
    # ============================================

    async def check_streak(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        return await self._apply(
            user_id,
            "streak_check",
            partial(engine.update_streak, now=self._localize(now)),
            "Streak updated",
        )

    async def apply_penalty(
        self,
        user_id: str,
        reason: Union[PenaltyReason, str] = PenaltyReason.MISSED_TASK,
        amount: Optional[int] = None,
    ) -> Dict[str, Any]:
        reason = PenaltyReason(reason)
        return await self._apply(
            user_id,
            "task_missed",
            partial(engine.apply_health_penalty, reason=reason, amount=amount),
            f"Health reduced: {reason.value.replace('_', ' ')}",
        )

    async def use_health_potion(self, user_id: str) -> Dict[str, Any]:
        return await self._apply(
            user_id,
            "item_used",
            engine.use_health_potion,
            "Health restored!",
            failure_message="No health potions available!",
        )

    async def grant_item(self, user_id: str, item_id: str, quantity: int = 1) -> Dict[str, Any]:
        return await self._apply(
            user_id,
            "item_granted",
            partial(engine.add_inventory_item, item_id=item_id, quantity=quantity),
            f"+{quantity} {item_id} added to inventory!",
        )

    async def use_item(self, user_id: str, item_id: str, quantity: int = 1) -> Dict[str, Any]:
        if item_id == HEALTH_POTION and quantity == 1:
            return await self.use_health_potion(user_id)
        return await self._apply(
            user_id,
            "item_used",
            partial(engine.remove_inventory_item, item_id=item_id, quantity=quantity),
            f"Used {quantity} {item_id}",
            failure_message=f"Not enough {item_id} in inventory!",
        )

    async def apply_event(self, user_id: str, event: Union[Event, dict]) -> Dict[str, Any]:
        """Apply any engine event model (or its dict form)"""
        if isinstance(event, dict):
            event = parse_event(event)
        now = self._localize(getattr(event, "now", None))
        if isinstance(event, StreakCheck):
            event = event.model_copy(update={"now": now})
        return await self._apply(
            user_id,
            event.type,
            partial(engine.apply_event, event=event, now=now),
            "Progress updated",
            failure_message="Action could not be completed",
        )

    # ============================================
    # Read-only views and reset
    # ============================================

    async def get_stats(self, user_id: str) -> Dict[str, Any]:
        avatar = await self.store.get_or_create(user_id)
        return engine.get_avatar_stats(avatar).model_dump(mode="json")

    async def get_achievements(self, user_id: str, include_locked: bool = False) -> Dict[str, Any]:
        avatar = await self.store.get_or_create(user_id)
        return get_user_achievements(avatar, include_locked=include_locked)

    async def reset_avatar(self, user_id: str) -> Dict[str, Any]:
        """Reinitialize a user's avatar to defaults"""
        now = self._localize(None)
        return await self._apply(
            user_id,
            "avatar_reset",
            lambda avatar: engine.reset_avatar(now),
            "Avatar reset successfully!",
        )
