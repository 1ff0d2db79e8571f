"""
Daily Streak Rules

A streak counts consecutive calendar days with qualifying activity
(lesson, task or game completion).

Logic:
- Activity on the same day as the last one: no change
- Activity on the next day: streak continues (+1, bonus XP)
- Gap of more than one day: streak restarts at 1
- Milestones at 7 and 30 days unlock achievements
"""

from datetime import datetime
from typing import Optional
import logging

from finedu.gamification.constants import STREAK_MILESTONES
from finedu.models.achievement import AchievementType

logger = logging.getLogger(__name__)


def calendar_day_gap(last_activity: datetime, now: datetime) -> int:
    """
    Number of calendar days between two timestamps

    Time of day is dropped before differencing, so 23:59 -> 00:01 is one
    day and 00:01 -> 23:59 on the same date is zero. When both values carry
    a timezone, last_activity is first moved into now's timezone so both
    dates are read on the same local calendar.
    """
    if last_activity.tzinfo is not None and now.tzinfo is not None:
        last_activity = last_activity.astimezone(now.tzinfo)
    elif (last_activity.tzinfo is None) != (now.tzinfo is None):
        # Mixed naive/aware values: compare wall-clock dates as stored
        logger.debug("Comparing naive and aware timestamps by their local dates")

    return (now.date() - last_activity.date()).days


def streak_milestone(streak: int) -> Optional[AchievementType]:
    """Achievement unlocked by reaching exactly this streak length, if any"""
    return STREAK_MILESTONES.get(streak)
