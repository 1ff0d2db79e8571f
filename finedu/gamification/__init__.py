"""
Gamification system for FinEdu

This module implements the learner progression engine:
- XP and leveling
- Health (decay and restoration)
- Daily streaks
- Achievements
- Item inventory

All operations are pure: they return a new Avatar plus notifications.
"""

from finedu.gamification.engine import (
    EngineResult,
    add_achievement,
    add_inventory_item,
    add_xp,
    apply_event,
    apply_health_penalty,
    complete_game,
    complete_lesson,
    complete_task,
    get_avatar_stats,
    remove_inventory_item,
    replay,
    reset_avatar,
    uncomplete_task,
    update_health,
    update_streak,
    use_health_potion,
)
from finedu.gamification.achievement_system import get_achievement, get_user_achievements
from finedu.gamification.xp_system import calculate_level, get_xp_for_activity

__all__ = [
    "EngineResult",
    "add_achievement",
    "add_inventory_item",
    "add_xp",
    "apply_event",
    "apply_health_penalty",
    "complete_game",
    "complete_lesson",
    "complete_task",
    "get_avatar_stats",
    "remove_inventory_item",
    "replay",
    "reset_avatar",
    "uncomplete_task",
    "update_health",
    "update_streak",
    "use_health_potion",
    "get_achievement",
    "get_user_achievements",
    "calculate_level",
    "get_xp_for_activity",
]
