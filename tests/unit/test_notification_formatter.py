"""Tests for notification rendering"""
from finedu.models.notification import Notification, NotificationType
from finedu.services.notification_formatter import (
    format_notification,
    format_notifications,
    format_stats_display,
)


def _n(kind, **data):
    return Notification(type=kind, data=data)


def test_format_xp_and_level_up():
    assert format_notification(_n(NotificationType.XP_GAINED, amount=10, source="task")) == "⭐ +10 XP earned!"
    assert format_notification(_n(NotificationType.XP_GAINED, amount=-15, source="task")) == "⭐ -15 XP"
    assert format_notification(_n(NotificationType.LEVEL_UP, level=3)) == "🎉 Level Up! You're now level 3!"


def test_format_health():
    assert format_notification(_n(NotificationType.HEALTH_CHANGED, delta=-5, health=95)) == "💔 -5 Health"
    assert format_notification(_n(NotificationType.HEALTH_CHANGED, delta=25, health=100)) == "❤️ +25 Health"


def test_format_streak_and_achievement():
    assert format_notification(_n(NotificationType.STREAK_CONTINUED, streak=4)) == "🔥 4 day streak!"
    assert "Streak broken" in format_notification(_n(NotificationType.STREAK_BROKEN, previous=4))
    message = format_notification(_n(NotificationType.ACHIEVEMENT_UNLOCKED, achievement="night_owl"))
    assert message == "🏆 Achievement Unlocked: Night Owl!"


def test_format_notifications_keeps_order():
    messages = format_notifications([
        _n(NotificationType.ITEM_ADDED, item_id="Health Potion", quantity=2),
        _n(NotificationType.AVATAR_RESET),
    ])

    assert messages == ["🎁 +2 Health Potion added to inventory!", "Avatar reset successfully!"]


def test_format_stats_display():
    stats = {
        "level": 3,
        "xp": 250,
        "xp_for_next_level": 300,
        "xp_progress": 50.0,
        "health": 90,
        "streak": 2,
        "max_streak": 9,
        "total_lessons_completed": 4,
        "total_tasks_completed": 1,
        "total_games_played": 0,
        "achievements": ["first_lesson"],
    }

    display = format_stats_display(stats)

    assert "Level 3 (250/300 XP, 50%)" in display
    assert "(best: 9)" in display
    assert "Achievements: 1" in display
