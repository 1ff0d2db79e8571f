"""Tests for event dispatch, replay and progression invariants"""
import random
import pytest
from datetime import timedelta

from finedu.exceptions import UnknownEventError
from finedu.gamification.constants import XP_PER_LEVEL
from finedu.gamification.engine import add_achievement, apply_event, get_avatar_stats, replay
from finedu.models.avatar import Avatar
from finedu.models.events import (
    GameCompleted,
    ItemGranted,
    ItemUsed,
    LessonCompleted,
    StreakCheck,
    TaskCompleted,
    TaskMissed,
    TaskUncompleted,
    parse_event,
)
from finedu.models.notification import NotificationType


# ============================================================================
# Dispatch
# ============================================================================

def test_parse_event_from_dict():
    event = parse_event({"type": "item_granted", "item_id": "Health Potion", "quantity": 2})

    assert isinstance(event, ItemGranted)
    assert event.quantity == 2


def test_apply_event_accepts_dicts(fresh_avatar, noon):
    result = apply_event(fresh_avatar, {"type": "lesson_completed", "score": 100}, noon)

    assert result.avatar.total_lessons_completed == 1
    assert result.avatar.xp == 20


def test_item_used_health_potion_restores_health(make_avatar, noon):
    avatar = make_avatar(health=40, inventory={"Health Potion": 2})

    result = apply_event(avatar, ItemUsed(item_id="Health Potion"), noon)

    assert result.avatar.health == 65
    assert result.avatar.inventory == {"Health Potion": 1}


def test_item_used_other_item(make_avatar, noon):
    result = apply_event(make_avatar(inventory={"Coin": 1}), ItemUsed(item_id="Coin"), noon)

    assert result.success is True
    assert result.avatar.inventory == {}


def test_streak_check_uses_event_time(make_avatar, noon, yesterday):
    avatar = make_avatar(streak=1, max_streak=1, last_activity_date=yesterday)

    result = apply_event(avatar, StreakCheck(now=noon))

    assert result.avatar.streak == 2


def test_task_missed_event(fresh_avatar, noon):
    result = apply_event(fresh_avatar, TaskMissed(health_penalty=7), noon)

    assert result.avatar.health == 93


def test_unknown_event_rejected(fresh_avatar, noon):
    with pytest.raises(UnknownEventError):
        apply_event(fresh_avatar, object(), noon)


# ============================================================================
# Replay
# ============================================================================

def test_replay_is_deterministic(noon):
    events = [
        LessonCompleted(score=100, xp_reward=10),
        TaskCompleted(xp_reward=15),
        ItemGranted(item_id="Health Potion", quantity=1),
        TaskMissed(),
        ItemUsed(item_id="Health Potion"),
        GameCompleted(score=100, xp_reward=20),
        TaskUncompleted(xp_reward=15),
    ]

    first = replay(events, now=noon)
    second = replay(events, now=noon)

    assert get_avatar_stats(first.avatar) == get_avatar_stats(second.avatar)
    assert first.notifications == second.notifications
    assert first.avatar.health == 100
    assert first.avatar.total_tasks_completed == 0


def test_replay_across_days(noon):
    events = [StreakCheck(now=noon + timedelta(days=day)) for day in range(1, 8)]

    result = replay(events, avatar=Avatar.new(noon))

    assert result.avatar.streak == 7
    assert len(result.of_type(NotificationType.STREAK_CONTINUED)) == 7
    assert result.avatar.achievements == ["streak_7"]


# ============================================================================
# Invariants over random event sequences
# ============================================================================

def _random_event(rng: random.Random):
    kind = rng.choice(["lesson", "task", "untask", "game", "grant", "use", "missed"])
    if kind == "lesson":
        return LessonCompleted(score=rng.choice([0, 50, 100]), xp_reward=rng.randint(0, 60))
    if kind == "task":
        return TaskCompleted(xp_reward=rng.randint(0, 60))
    if kind == "untask":
        return TaskUncompleted(xp_reward=rng.randint(0, 60))
    if kind == "game":
        return GameCompleted(score=rng.choice([10, 100]), xp_reward=rng.randint(0, 60))
    if kind == "grant":
        return ItemGranted(item_id=rng.choice(["Health Potion", "Coin"]), quantity=rng.randint(1, 3))
    if kind == "use":
        return ItemUsed(item_id=rng.choice(["Health Potion", "Coin"]))
    return TaskMissed(health_penalty=rng.randint(0, 40))


@pytest.mark.parametrize("seed", range(20))
def test_invariants_hold_for_random_sequences(seed, noon):
    rng = random.Random(seed)
    avatar = Avatar.new(noon)
    now = noon

    for _ in range(60):
        now = now + timedelta(days=rng.choice([0, 0, 1, 1, 2, 5]), hours=rng.randint(-6, 6))
        avatar = apply_event(avatar, _random_event(rng), now).avatar

        assert avatar.level == avatar.xp // XP_PER_LEVEL + 1
        assert 0 <= avatar.health <= 100
        assert avatar.max_streak >= avatar.streak
        assert len(avatar.achievements) == len(set(avatar.achievements))
        assert all(quantity > 0 for quantity in avatar.inventory.values())


def test_add_achievement_twice_equals_once(fresh_avatar):
    once = add_achievement(fresh_avatar, "level_5")
    twice = add_achievement(once.avatar, "level_5")

    assert twice.avatar == once.avatar
    assert twice.success is False
