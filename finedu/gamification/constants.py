"""
Progression rule constants

XP Rewards:
- Lesson completion: 10 XP
- Task completion: 15 XP
- Game completion: 20 XP
- Achievement unlock: 5 XP
- Streak continuation: 2 XP

Health:
- Range 0-100, starts at 100
- Level up: +10
- Health potion: +25
- Missed task: -5, missed daily: -10, inactive day: -2
"""

from finedu.models.achievement import AchievementType
from finedu.models.events import PenaltyReason


XP_PER_LEVEL = 100

XP_REWARDS = {
    "lesson": 10,
    "task": 15,
    "game": 20,
    "achievement": 5,
    "streak": 2,
}

MAX_HEALTH = 100
MIN_HEALTH = 0
LEVEL_UP_HEAL = 10
HEALTH_POTION_HEAL = 25
HEALTH_POTION = "Health Potion"

HEALTH_PENALTIES = {
    PenaltyReason.MISSED_TASK: 5,
    PenaltyReason.MISSED_DAILY: 10,
    PenaltyReason.INACTIVE_DAY: 2,
}

PERFECT_SCORE = 100

# Reaching one of these levels unlocks the paired achievement
LEVEL_MILESTONES = {
    5: AchievementType.LEVEL_5,
    10: AchievementType.LEVEL_10,
}

STREAK_MILESTONES = {
    7: AchievementType.STREAK_7,
    30: AchievementType.STREAK_30,
}
