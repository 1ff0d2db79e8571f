"""Unit tests for streak rules (streak_system.py and engine.update_streak)"""
from datetime import datetime, timedelta, timezone

from finedu.gamification.engine import update_streak
from finedu.gamification.streak_system import calendar_day_gap, streak_milestone
from finedu.models.achievement import AchievementType
from finedu.models.notification import NotificationType


# ============================================================================
# Day gap
# ============================================================================

def test_calendar_day_gap_ignores_time_of_day():
    late = datetime(2024, 1, 15, 23, 59, tzinfo=timezone.utc)
    early = datetime(2024, 1, 16, 0, 1, tzinfo=timezone.utc)
    assert calendar_day_gap(late, early) == 1


def test_calendar_day_gap_same_day():
    start = datetime(2024, 1, 15, 0, 1, tzinfo=timezone.utc)
    end = datetime(2024, 1, 15, 23, 59, tzinfo=timezone.utc)
    assert calendar_day_gap(start, end) == 0


def test_calendar_day_gap_uses_now_timezone():
    """23:30 UTC is already the next day one hour east"""
    cet = timezone(timedelta(hours=1))
    last = datetime(2024, 1, 15, 23, 30, tzinfo=timezone.utc)
    now = datetime(2024, 1, 16, 9, 0, tzinfo=cet)
    assert calendar_day_gap(last, now) == 0


def test_calendar_day_gap_naive_values():
    assert calendar_day_gap(datetime(2024, 1, 1, 8), datetime(2024, 1, 4, 7)) == 3


def test_streak_milestones():
    assert streak_milestone(7) == AchievementType.STREAK_7
    assert streak_milestone(30) == AchievementType.STREAK_30
    assert streak_milestone(8) is None


# ============================================================================
# update_streak
# ============================================================================

def test_update_streak_same_day_is_noop(make_avatar, noon):
    avatar = make_avatar(streak=3, max_streak=5)

    first = update_streak(avatar, noon + timedelta(hours=3))
    second = update_streak(first.avatar, noon + timedelta(hours=5))

    assert first.avatar == avatar
    assert second.avatar == avatar
    assert first.notifications == []
    assert second.notifications == []


def test_update_streak_consecutive_day(make_avatar, noon, yesterday):
    avatar = make_avatar(streak=2, max_streak=10, last_activity_date=yesterday)

    result = update_streak(avatar, noon)

    assert result.avatar.streak == 3
    assert result.avatar.max_streak == 10
    assert result.avatar.xp == 2  # streak bonus
    assert result.avatar.last_activity_date == noon
    continued = result.of_type(NotificationType.STREAK_CONTINUED)
    assert continued[0]["streak"] == 3


def test_update_streak_reaches_seven(make_avatar, noon, yesterday):
    """Day 7 unlocks STREAK_7, grants bonus XP and raises max_streak"""
    avatar = make_avatar(streak=6, max_streak=6, last_activity_date=yesterday)

    result = update_streak(avatar, noon)

    assert result.avatar.streak == 7
    assert result.avatar.max_streak == 7
    assert AchievementType.STREAK_7 in result.avatar.achievements
    # 5 achievement bonus + 2 streak bonus
    assert result.avatar.xp == 7


def test_update_streak_reaches_thirty(make_avatar, noon, yesterday):
    avatar = make_avatar(streak=29, max_streak=29, last_activity_date=yesterday)

    result = update_streak(avatar, noon)

    assert result.avatar.achievements == [AchievementType.STREAK_30]


def test_update_streak_broken(make_avatar, noon):
    avatar = make_avatar(streak=10, max_streak=12, last_activity_date=noon - timedelta(days=3))

    result = update_streak(avatar, noon)

    assert result.avatar.streak == 1
    assert result.avatar.max_streak == 12
    assert result.avatar.xp == 0
    broken = result.of_type(NotificationType.STREAK_BROKEN)
    assert len(broken) == 1
    assert broken[0]["previous"] == 10


def test_update_streak_gap_without_streak_is_silent(make_avatar, noon):
    avatar = make_avatar(streak=0, max_streak=0, last_activity_date=noon - timedelta(days=5))

    result = update_streak(avatar, noon)

    assert result.avatar.streak == 1
    assert result.avatar.max_streak == 1
    assert result.of_type(NotificationType.STREAK_BROKEN) == []


def test_update_streak_clock_behind_is_noop(make_avatar, noon):
    avatar = make_avatar(streak=4, max_streak=4)

    result = update_streak(avatar, noon - timedelta(days=2))

    assert result.avatar == avatar
