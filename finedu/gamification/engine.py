"""
Progression Engine

Pure, synchronous state transitions over an Avatar. Every public operation
takes the current Avatar, works on a deep copy inside a transaction and
returns an EngineResult holding the new Avatar, the notifications emitted
along the way and a success flag for domain outcomes (not enough items,
achievement already unlocked).

Cascades are nested calls within one transaction:
- add_xp -> level up -> update_health (+10) and milestone achievements
- add_achievement -> add_xp (bonus)
- update_streak -> streak achievements and add_xp (bonus)

Persistence, locking and message rendering belong to the callers
(see finedu.services).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from numbers import Integral
from typing import Any, Iterable, List, Optional, Union
import logging

from finedu.exceptions import UnknownEventError, ValidationError
from finedu.gamification.achievement_system import resolve_achievement_id
from finedu.gamification.constants import (
    HEALTH_PENALTIES,
    HEALTH_POTION,
    HEALTH_POTION_HEAL,
    LEVEL_MILESTONES,
    LEVEL_UP_HEAL,
    MAX_HEALTH,
    MIN_HEALTH,
    PERFECT_SCORE,
    XP_REWARDS,
)
from finedu.gamification.streak_system import calendar_day_gap, streak_milestone
from finedu.gamification.xp_system import (
    calculate_level,
    calculate_xp_for_next_level,
    calculate_xp_progress,
    get_xp_for_activity,
)
from finedu.models.achievement import AchievementType
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

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineResult:
    """Outcome of one engine operation"""
    avatar: Avatar
    notifications: List[Notification] = field(default_factory=list)
    success: bool = True

    def of_type(self, notification_type: NotificationType) -> List[Notification]:
        return [n for n in self.notifications if n.type == notification_type]


class _Transaction:
    """Working copy of an avatar plus the notifications produced so far"""

    def __init__(self, avatar: Avatar):
        self.avatar = avatar.model_copy(deep=True)
        self.notifications: List[Notification] = []

    def emit(self, notification_type: NotificationType, **data: Any) -> None:
        self.notifications.append(Notification(type=notification_type, data=data))

    def result(self, success: bool = True) -> EngineResult:
        return EngineResult(avatar=self.avatar, notifications=self.notifications, success=success)


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _require_int(
    value: Any,
    field_name: str,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None
) -> int:
    # bool is an Integral subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ValidationError("must be an integer", field=field_name, value=value)
    if minimum is not None and value < minimum:
        raise ValidationError(f"must be >= {minimum}", field=field_name, value=value)
    if maximum is not None and value > maximum:
        raise ValidationError(f"must be <= {maximum}", field=field_name, value=value)
    return int(value)


def _require_item_id(item_id: Any) -> str:
    if not isinstance(item_id, str) or not item_id.strip():
        raise ValidationError("must be a non-empty string", field="item_id", value=item_id)
    return item_id


# ============================================
# Core rules (operate on a transaction)
# ============================================

def _add_xp(tx: _Transaction, amount: int, source: str) -> None:
    amount = _require_int(amount, "amount")
    if not isinstance(source, str) or not source:
        raise ValidationError("must be a non-empty string", field="source", value=source)

    avatar = tx.avatar
    old_level = avatar.level
    # Reversals never take the total below zero
    avatar.xp = max(0, avatar.xp + amount)
    avatar.level = calculate_level(avatar.xp)

    if avatar.level > old_level:
        tx.emit(NotificationType.LEVEL_UP, level=avatar.level, previous_level=old_level)
        logger.info(f"Level up from {old_level} to {avatar.level} ({source})")

        milestone = LEVEL_MILESTONES.get(avatar.level)
        if milestone is not None:
            _add_achievement(tx, milestone)

        _update_health(tx, LEVEL_UP_HEAL)

    tx.emit(NotificationType.XP_GAINED, amount=amount, source=source)


def _update_health(tx: _Transaction, delta: int) -> None:
    delta = _require_int(delta, "delta")
    if delta == 0:
        return
    avatar = tx.avatar
    avatar.health = max(MIN_HEALTH, min(MAX_HEALTH, avatar.health + delta))
    # Report the requested change even when clamping absorbed part of it
    tx.emit(NotificationType.HEALTH_CHANGED, delta=delta, health=avatar.health)


def _add_achievement(tx: _Transaction, achievement_id: Union[AchievementType, str]) -> bool:
    achievement_id = resolve_achievement_id(achievement_id)
    avatar = tx.avatar
    if achievement_id in avatar.achievements:
        return False

    avatar.achievements.append(achievement_id)
    tx.emit(NotificationType.ACHIEVEMENT_UNLOCKED, achievement=achievement_id.value)
    logger.info(f"Achievement unlocked: {achievement_id.value}")

    _add_xp(tx, get_xp_for_activity("achievement"), "achievement")
    return True


def _update_streak(tx: _Transaction, now: datetime) -> None:
    avatar = tx.avatar
    diff_days = calendar_day_gap(avatar.last_activity_date, now)

    if diff_days <= 0:
        # Same day (or a clock behind the last activity): nothing to do
        return

    if diff_days == 1:
        avatar.streak += 1
        avatar.max_streak = max(avatar.max_streak, avatar.streak)
        tx.emit(NotificationType.STREAK_CONTINUED, streak=avatar.streak)

        milestone = streak_milestone(avatar.streak)
        if milestone is not None:
            _add_achievement(tx, milestone)

        _add_xp(tx, get_xp_for_activity("streak"), "streak")
    else:
        if avatar.streak > 0:
            tx.emit(NotificationType.STREAK_BROKEN, previous=avatar.streak, gap_days=diff_days)
            logger.info(f"Streak of {avatar.streak} days broken after a {diff_days} day gap")
        avatar.streak = 1
        avatar.max_streak = max(avatar.max_streak, avatar.streak)

    avatar.last_activity_date = now


def _touch(tx: _Transaction, now: datetime) -> None:
    if calendar_day_gap(tx.avatar.last_activity_date, now) >= 0:
        tx.avatar.last_activity_date = now


def _add_item(tx: _Transaction, item_id: str, quantity: int) -> None:
    item_id = _require_item_id(item_id)
    quantity = _require_int(quantity, "quantity", minimum=1)
    inventory = tx.avatar.inventory
    inventory[item_id] = inventory.get(item_id, 0) + quantity
    tx.emit(NotificationType.ITEM_ADDED, item_id=item_id, quantity=quantity)


def _remove_item(tx: _Transaction, item_id: str, quantity: int) -> bool:
    item_id = _require_item_id(item_id)
    quantity = _require_int(quantity, "quantity", minimum=1)
    inventory = tx.avatar.inventory
    available = inventory.get(item_id, 0)
    if available < quantity:
        return False

    remaining = available - quantity
    if remaining > 0:
        inventory[item_id] = remaining
    else:
        del inventory[item_id]
    tx.emit(NotificationType.ITEM_REMOVED, item_id=item_id, quantity=quantity)
    return True


# ============================================
# Public operations
# ============================================

def add_xp(avatar: Avatar, amount: int, source: str = "general") -> EngineResult:
    """
    Add (or, with a negative amount, remove) XP and recompute the level

    Emits LevelUp when a level boundary is crossed and XPGained always.
    """
    tx = _Transaction(avatar)
    _add_xp(tx, amount, source)
    return tx.result()


def update_health(avatar: Avatar, delta: int) -> EngineResult:
    """Change health by delta, clamped to 0-100"""
    tx = _Transaction(avatar)
    _update_health(tx, delta)
    return tx.result()


def update_streak(avatar: Avatar, now: Optional[datetime] = None) -> EngineResult:
    """Advance, keep or restart the daily streak depending on the day gap"""
    tx = _Transaction(avatar)
    _update_streak(tx, _now(now))
    return tx.result()


def add_achievement(avatar: Avatar, achievement_id: Union[AchievementType, str]) -> EngineResult:
    """
    Unlock an achievement once

    success is False (and the avatar unchanged) when it was already
    unlocked. Raises UnknownAchievementError for ids outside the catalog.
    """
    tx = _Transaction(avatar)
    unlocked = _add_achievement(tx, achievement_id)
    return tx.result(success=unlocked)


def add_inventory_item(avatar: Avatar, item_id: str, quantity: int = 1) -> EngineResult:
    tx = _Transaction(avatar)
    _add_item(tx, item_id, quantity)
    return tx.result()


def remove_inventory_item(avatar: Avatar, item_id: str, quantity: int = 1) -> EngineResult:
    """Remove items; success is False when fewer than quantity are held"""
    tx = _Transaction(avatar)
    removed = _remove_item(tx, item_id, quantity)
    return tx.result(success=removed)


def complete_lesson(
    avatar: Avatar,
    score: int = 0,
    xp_reward: int = XP_REWARDS["lesson"],
    now: Optional[datetime] = None
) -> EngineResult:
    """
    Apply a lesson completion

    Order: XP, lesson counter, first-lesson and perfect-score achievements,
    streak. "First lesson" means no lesson had been completed before this one.
    """
    score = _require_int(score, "score", minimum=0, maximum=PERFECT_SCORE)
    xp_reward = _require_int(xp_reward, "xp_reward", minimum=0)
    now = _now(now)

    tx = _Transaction(avatar)
    _add_xp(tx, xp_reward, "lesson")

    first_lesson = tx.avatar.total_lessons_completed == 0
    tx.avatar.total_lessons_completed += 1

    if first_lesson:
        _add_achievement(tx, AchievementType.FIRST_LESSON)
    if score == PERFECT_SCORE:
        _add_achievement(tx, AchievementType.PERFECT_SCORE)

    _update_streak(tx, now)
    _touch(tx, now)
    return tx.result()


def complete_task(
    avatar: Avatar,
    xp_reward: int = XP_REWARDS["task"],
    now: Optional[datetime] = None
) -> EngineResult:
    """Apply a task completion: XP, task counter, streak"""
    xp_reward = _require_int(xp_reward, "xp_reward", minimum=0)
    now = _now(now)

    tx = _Transaction(avatar)
    _add_xp(tx, xp_reward, "task")
    tx.avatar.total_tasks_completed += 1
    _update_streak(tx, now)
    _touch(tx, now)
    return tx.result()


def uncomplete_task(avatar: Avatar, xp_reward: int = XP_REWARDS["task"]) -> EngineResult:
    """Reverse a task completion: remove its XP and decrement the counter"""
    xp_reward = _require_int(xp_reward, "xp_reward", minimum=0)

    tx = _Transaction(avatar)
    _add_xp(tx, -xp_reward, "task")
    tx.avatar.total_tasks_completed = max(0, tx.avatar.total_tasks_completed - 1)
    return tx.result()


def complete_game(
    avatar: Avatar,
    score: int = 0,
    xp_reward: int = XP_REWARDS["game"],
    now: Optional[datetime] = None
) -> EngineResult:
    """Apply a mini-game completion: XP, games counter, perfect score, streak"""
    score = _require_int(score, "score", minimum=0, maximum=PERFECT_SCORE)
    xp_reward = _require_int(xp_reward, "xp_reward", minimum=0)
    now = _now(now)

    tx = _Transaction(avatar)
    _add_xp(tx, xp_reward, "game")
    tx.avatar.total_games_played += 1

    if score == PERFECT_SCORE:
        _add_achievement(tx, AchievementType.PERFECT_SCORE)

    _update_streak(tx, now)
    _touch(tx, now)
    return tx.result()


def use_health_potion(avatar: Avatar) -> EngineResult:
    """Consume one Health Potion to restore 25 health; success is False without one"""
    tx = _Transaction(avatar)
    if not _remove_item(tx, HEALTH_POTION, 1):
        return tx.result(success=False)
    _update_health(tx, HEALTH_POTION_HEAL)
    return tx.result()


def apply_health_penalty(
    avatar: Avatar,
    reason: PenaltyReason = PenaltyReason.MISSED_TASK,
    amount: Optional[int] = None
) -> EngineResult:
    """Reduce health for a missed task, missed daily or inactive day"""
    if amount is None:
        amount = HEALTH_PENALTIES[PenaltyReason(reason)]
    amount = _require_int(amount, "amount", minimum=0)

    tx = _Transaction(avatar)
    _update_health(tx, -amount)
    return tx.result()


def reset_avatar(now: Optional[datetime] = None) -> EngineResult:
    """Fresh default avatar"""
    avatar = Avatar.new(_now(now))
    return EngineResult(
        avatar=avatar,
        notifications=[Notification(type=NotificationType.AVATAR_RESET)],
    )


def get_avatar_stats(avatar: Avatar) -> AvatarStats:
    """Derived read-only view of an avatar"""
    return AvatarStats(
        level=avatar.level,
        xp=avatar.xp,
        health=avatar.health,
        health_percentage=avatar.health,
        streak=avatar.streak,
        max_streak=avatar.max_streak,
        xp_for_next_level=calculate_xp_for_next_level(avatar.level),
        xp_progress=calculate_xp_progress(avatar.xp, avatar.level),
        total_lessons_completed=avatar.total_lessons_completed,
        total_tasks_completed=avatar.total_tasks_completed,
        total_games_played=avatar.total_games_played,
        achievements=list(avatar.achievements),
        inventory=dict(avatar.inventory),
    )


# ============================================
# Event dispatch
# ============================================

def apply_event(
    avatar: Avatar,
    event: Union[Event, dict],
    now: Optional[datetime] = None
) -> EngineResult:
    """Route one event model (or its dict form) to the matching operation"""
    if isinstance(event, dict):
        event = parse_event(event)

    if isinstance(event, LessonCompleted):
        return complete_lesson(avatar, event.score, event.xp_reward, now)
    if isinstance(event, TaskCompleted):
        return complete_task(avatar, event.xp_reward, now)
    if isinstance(event, TaskUncompleted):
        return uncomplete_task(avatar, event.xp_reward)
    if isinstance(event, GameCompleted):
        return complete_game(avatar, event.score, event.xp_reward, now)
    if isinstance(event, StreakCheck):
        return update_streak(avatar, event.now or now)
    if isinstance(event, TaskMissed):
        return apply_health_penalty(avatar, event.reason, event.health_penalty)
    if isinstance(event, ItemUsed):
        if event.item_id == HEALTH_POTION:
            return use_health_potion(avatar)
        return remove_inventory_item(avatar, event.item_id, 1)
    if isinstance(event, ItemGranted):
        return add_inventory_item(avatar, event.item_id, event.quantity)

    raise UnknownEventError(event)


def replay(
    events: Iterable[Union[Event, dict]],
    avatar: Optional[Avatar] = None,
    now: Optional[datetime] = None
) -> EngineResult:
    """
    Apply events in order, starting from avatar (or a default one created at now)

    The returned notifications are those of every event, in order; success
    reflects the last event.
    """
    current = avatar if avatar is not None else Avatar.new(now)
    notifications: List[Notification] = []
    success = True
    for event in events:
        result = apply_event(current, event, now)
        current = result.avatar
        notifications.extend(result.notifications)
        success = result.success
    return EngineResult(avatar=current, notifications=notifications, success=success)
