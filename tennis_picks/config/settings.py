"""
Strongly typed configuration using pydantic-settings.

All settings are validated at startup and loaded from:
1. Default values defined here
2. .env file (if present)
3. Environment variables (highest priority)

Environment variable naming:
- ScoringSettings: SCORING_CHAMPION_BONUS, SCORING_ROUND_POINTS (JSON), etc.
- LeaderboardSettings: LEADERBOARD_BRACKET_BOARD_LIMIT, etc.
- ObservabilitySettings: ENVIRONMENT, LOG_LEVEL (no prefix)
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict


class ScoringSettings(BaseSettings):
    """Point awards for brackets and individual predictions."""

    model_config = SettingsConfigDict(env_prefix="SCORING_")

    # Bracket rounds (1 = final, counting back toward the first round)
    round_points: Dict[int, int] = Field(
        default={1: 10, 2: 20, 3: 40, 4: 80, 5: 160, 6: 320},
        description="Points for a correct pick, keyed by rounds-from-the-end",
    )
    default_round_points: int = Field(default=10, ge=0, description="Points for rounds missing from the table")
    champion_bonus: int = Field(default=500, ge=0, description="Bonus for a correct champion pick")

    # Individual predictions
    base_points: int = Field(default=10, ge=0, description="Points for a correct winner")
    confidence_pivot: int = Field(default=5, ge=1, le=10, description="Confidence above which a bonus is paid")
    confidence_bonus_per_level: int = Field(default=2, ge=0, description="Bonus per confidence level above pivot")
    exact_score_bonus: int = Field(default=15, ge=0, description="Bonus for an exactly-correct score")

    @field_validator('round_points')
    @classmethod
    def round_points_valid(cls, v):
        for round_num, points in v.items():
            if round_num < 1:
                raise ValueError(f'round numbers start at 1, got {round_num}')
            if points < 0:
                raise ValueError(f'points for round {round_num} must be >= 0')
        return v


class LeaderboardSettings(BaseSettings):
    """Standings settings."""

    model_config = SettingsConfigDict(env_prefix="LEADERBOARD_")

    placeholder_name_template: str = Field(
        default="User {user_id}",
        description="Display name used when a user is missing from the directory",
    )
    bracket_board_limit: int = Field(default=100, ge=1, le=10000)

    @field_validator('placeholder_name_template')
    @classmethod
    def template_has_user_id(cls, v):
        if '{user_id}' not in v:
            raise ValueError('placeholder_name_template must contain {user_id}')
        return v


class ObservabilitySettings(BaseSettings):
    """Logging and metrics settings."""

    model_config = SettingsConfigDict(env_prefix="")  # Direct: ENVIRONMENT, LOG_LEVEL

    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="console", pattern="^(console|json)$")
    enable_metrics: bool = Field(default=True)


class Settings(BaseSettings):
    """
    Root settings aggregating all subsections.

    Usage:
        from tennis_picks.config import settings

        settings.scoring.champion_bonus
        settings.leaderboard.bracket_board_limit
        settings.observability.log_level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    leaderboard: LeaderboardSettings = Field(default_factory=LeaderboardSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
