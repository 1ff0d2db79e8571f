"""
XP and Leveling System

Level math used by the progression engine and the stats view.

Leveling Curve:
- Flat 100 XP per level: level = floor(xp / 100) + 1

XP Award Rules:
- Lesson completion: 10 XP
- Task completion: 15 XP
- Game completion: 20 XP
- Achievement unlocks: 5 XP
- Streak continuation: 2 XP
"""

import logging

from finedu.gamification.constants import XP_PER_LEVEL, XP_REWARDS

logger = logging.getLogger(__name__)


def calculate_level(total_xp: int) -> int:
    """Level reached with total_xp (never below 1)"""
    return max(0, total_xp) // XP_PER_LEVEL + 1


def calculate_xp_for_next_level(current_level: int) -> int:
    """Total XP at which current_level ends"""
    return current_level * XP_PER_LEVEL


def calculate_xp_progress(total_xp: int, level: int) -> float:
    """Percentage (0-100) of the current level already earned"""
    xp_in_current_level = total_xp - (level - 1) * XP_PER_LEVEL
    progress = (xp_in_current_level / XP_PER_LEVEL) * 100
    return max(0.0, min(100.0, progress))


def get_xp_for_activity(activity_type: str) -> int:
    """
    Default XP reward for an activity type

    Args:
        activity_type: lesson, task, game, achievement or streak

    Returns:
        XP amount to award (10 for unknown types)
    """
    amount = XP_REWARDS.get(activity_type)
    if amount is None:
        logger.debug(f"No XP reward defined for '{activity_type}', using 10")
        return 10
    return amount
