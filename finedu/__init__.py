"""FinEdu learner progression: XP, levels, health, streaks, achievements"""

__version__ = "1.0.0"
