"""
Tests for typed settings.
"""
import pydantic
import pytest

from tennis_picks.config import LeaderboardSettings, ObservabilitySettings, ScoringSettings, Settings


class TestScoringSettings:

    def test_defaults(self):
        scoring = ScoringSettings()
        assert scoring.round_points == {1: 10, 2: 20, 3: 40, 4: 80, 5: 160, 6: 320}
        assert scoring.champion_bonus == 500
        assert scoring.default_round_points == 10
        assert scoring.base_points == 10
        assert scoring.exact_score_bonus == 15

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SCORING_CHAMPION_BONUS", "250")
        monkeypatch.setenv("SCORING_ROUND_POINTS", '{"1": 5, "2": 15}')
        scoring = ScoringSettings()
        assert scoring.champion_bonus == 250
        assert scoring.round_points == {1: 5, 2: 15}

    def test_round_numbers_start_at_one(self):
        with pytest.raises(pydantic.ValidationError):
            ScoringSettings(round_points={0: 10})

    def test_negative_points_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ScoringSettings(round_points={1: -5})


class TestLeaderboardSettings:

    def test_template_needs_user_id(self):
        with pytest.raises(pydantic.ValidationError):
            LeaderboardSettings(placeholder_name_template="Anonymous")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEADERBOARD_BRACKET_BOARD_LIMIT", "25")
        assert LeaderboardSettings().bracket_board_limit == 25


class TestObservabilitySettings:

    def test_environment_pattern(self):
        with pytest.raises(pydantic.ValidationError):
            ObservabilitySettings(environment="qa")

    def test_root_settings_nest_sections(self):
        settings = Settings()
        assert isinstance(settings.scoring, ScoringSettings)
        assert isinstance(settings.leaderboard, LeaderboardSettings)
        assert settings.observability.log_format in ("console", "json")
