"""
Configuration module with strongly typed settings.

Usage:
    from tennis_picks.config import settings

    print(settings.scoring.round_points)
    print(settings.leaderboard.placeholder_name_template)
"""
from .settings import (
    Settings,
    ScoringSettings,
    LeaderboardSettings,
    ObservabilitySettings,
)

# Singleton instance - validates on import
settings = Settings()

__all__ = [
    "settings",
    "Settings",
    "ScoringSettings",
    "LeaderboardSettings",
    "ObservabilitySettings",
]
