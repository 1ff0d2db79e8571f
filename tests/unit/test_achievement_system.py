"""Unit tests for the achievement catalog (finedu/gamification/achievement_system.py)"""
import pytest

from finedu.exceptions import UnknownAchievementError
from finedu.gamification.achievement_system import (
    ACHIEVEMENTS,
    get_achievement,
    get_user_achievements,
    resolve_achievement_id,
)
from finedu.models.achievement import AchievementType


def test_catalog_covers_every_achievement_type():
    assert set(ACHIEVEMENTS) == set(AchievementType)


def test_get_achievement_by_string():
    achievement = get_achievement("streak_7")

    assert achievement.id == AchievementType.STREAK_7
    assert achievement.name == "Week Warrior"


def test_resolve_unknown_id():
    with pytest.raises(UnknownAchievementError) as exc_info:
        resolve_achievement_id("first_million")

    assert exc_info.value.field == "achievement_id"


def test_user_achievements_unlocked_only(make_avatar):
    avatar = make_avatar(achievements=["first_lesson", "perfect_score"])

    result = get_user_achievements(avatar)

    assert [a["id"] for a in result["unlocked"]] == ["first_lesson", "perfect_score"]
    assert result["total_unlocked"] == 2
    assert "locked" not in result


def test_user_achievements_locked_progress(make_avatar):
    avatar = make_avatar(xp=300, level=4, streak=3, max_streak=5, total_lessons_completed=1,
                         achievements=["first_lesson"])

    result = get_user_achievements(avatar, include_locked=True)
    locked = {a["id"]: a["progress"] for a in result["locked"]}

    assert "first_lesson" not in locked
    assert locked["level_5"] == {"current": 4, "target": 5, "percentage": 80}
    assert locked["streak_7"]["current"] == 5
    assert locked["level_10"]["percentage"] == 40
    # Closest to completion first
    percentages = [a["progress"]["percentage"] for a in result["locked"]]
    assert percentages == sorted(percentages, reverse=True)
