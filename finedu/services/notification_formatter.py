"""
Notification rendering

Turns engine notifications into the short user-facing messages shown by the
client (toasts). The engine itself never formats display strings.
"""

import logging
from typing import List

from finedu.gamification.achievement_system import get_achievement
from finedu.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


def format_notification(notification: Notification) -> str:
    """Render one notification"""
    data = notification.data
    kind = notification.type

    if kind == NotificationType.XP_GAINED:
        amount = data["amount"]
        if amount < 0:
            return f"⭐ {amount} XP"
        return f"⭐ +{amount} XP earned!"

    if kind == NotificationType.LEVEL_UP:
        return f"🎉 Level Up! You're now level {data['level']}!"

    if kind == NotificationType.HEALTH_CHANGED:
        delta = data["delta"]
        if delta < 0:
            return f"💔 -{abs(delta)} Health"
        return f"❤️ +{delta} Health"

    if kind == NotificationType.STREAK_CONTINUED:
        return f"🔥 {data['streak']} day streak!"

    if kind == NotificationType.STREAK_BROKEN:
        return "💔 Streak broken! Start a new one today."

    if kind == NotificationType.ACHIEVEMENT_UNLOCKED:
        achievement = get_achievement(data["achievement"])
        return f"🏆 Achievement Unlocked: {achievement.name}!"

    if kind == NotificationType.ITEM_ADDED:
        return f"🎁 +{data['quantity']} {data['item_id']} added to inventory!"

    if kind == NotificationType.ITEM_REMOVED:
        return f"-{data['quantity']} {data['item_id']}"

    if kind == NotificationType.AVATAR_RESET:
        return "Avatar reset successfully!"

    logger.warning(f"No message template for notification {kind}")
    return str(kind.value)


def format_notifications(notifications: List[Notification]) -> List[str]:
    return [format_notification(n) for n in notifications]


def format_stats_display(stats: dict) -> str:
    """
    Format an avatar stats view for plain-text display

    Args:
        stats: AvatarStats as a dict (see ProgressionService.get_stats)

    Returns:
        Multi-line summary
    """
    lines = [
        "📊 YOUR PROGRESS\n",
        f"⭐ Level {stats['level']} ({stats['xp']}/{stats['xp_for_next_level']} XP, "
        f"{stats['xp_progress']:.0f}%)",
        f"❤️ Health: {stats['health']}/100",
    ]

    streak_line = f"🔥 Streak: {stats['streak']} days"
    if stats["max_streak"] > stats["streak"]:
        streak_line += f" (best: {stats['max_streak']})"
    lines.append(streak_line)

    lines.append(
        f"📘 Lessons: {stats['total_lessons_completed']}  "
        f"✅ Tasks: {stats['total_tasks_completed']}  "
        f"🎮 Games: {stats['total_games_played']}"
    )

    if stats["achievements"]:
        lines.append(f"🏆 Achievements: {len(stats['achievements'])}")

    return "\n".join(lines)
