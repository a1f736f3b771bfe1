"""
Tests for leaderboard scopes.
"""
from datetime import date, datetime

import pytest

from tennis_picks.exceptions import ValidationError
from tennis_picks.leaderboard import (
    LeaderboardScope,
    Timeframe,
    all_time_scope,
    month_scope,
    season_scope,
    tournament_scope,
)


class TestScopeBuilders:

    def test_season(self):
        scope = season_scope(2025)
        assert scope.timeframe == Timeframe.SEASON
        assert (scope.start_date, scope.end_date) == (date(2025, 1, 1), date(2025, 12, 31))

    def test_month_handles_leap_year(self):
        assert month_scope(2024, 2).end_date == date(2024, 2, 29)
        assert month_scope(2025, 2).end_date == date(2025, 2, 28)

    def test_tournament(self):
        scope = tournament_scope(9, date(2025, 5, 25), date(2025, 6, 8))
        assert scope.tournament_id == 9
        assert scope.timeframe == Timeframe.TOURNAMENT

    def test_all_time_covers_everything(self, make_prediction):
        assert all_time_scope().contains(make_prediction(1, 1, predicted=7, when=date(1990, 1, 1)))

    def test_timeframe_from_text(self):
        scope = LeaderboardScope("All-time", date(2020, 1, 1), date(2020, 1, 2))
        assert scope.timeframe == Timeframe.ALL_TIME


class TestScopeValidation:

    def test_start_after_end(self):
        with pytest.raises(ValidationError):
            LeaderboardScope(Timeframe.SEASON, date(2025, 2, 1), date(2025, 1, 1))

    def test_tournament_needs_id(self):
        with pytest.raises(ValidationError):
            LeaderboardScope(Timeframe.TOURNAMENT, date(2025, 1, 1), date(2025, 1, 14))


class TestContains:

    def test_window_is_inclusive(self, make_prediction):
        scope = month_scope(2025, 3)
        assert scope.contains(make_prediction(1, 1, predicted=7, when=datetime(2025, 3, 1, 0, 0)))
        assert scope.contains(make_prediction(1, 1, predicted=7, when=datetime(2025, 3, 31, 23, 59)))
        assert not scope.contains(make_prediction(1, 1, predicted=7, when=datetime(2025, 4, 1, 0, 0)))

    def test_tournament_filter(self, make_prediction):
        scope = tournament_scope(9, date(2025, 3, 1), date(2025, 3, 31))
        assert scope.contains(make_prediction(1, 1, predicted=7, tournament_id=9))
        assert not scope.contains(make_prediction(1, 1, predicted=7, tournament_id=10))
        assert not scope.contains(make_prediction(1, 1, predicted=7))
