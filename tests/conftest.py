# tests/conftest.py
import pytest
from datetime import date, datetime

from tennis_picks.brackets.models import Bracket, BracketPrediction, BracketStatus, ChampionPick
from tennis_picks.core import ServiceContainer
from tennis_picks.h2h.events import MatchResolution, SetGameBreakdown, SetScore
from tennis_picks.leaderboard.predictions import UserPrediction


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture(autouse=True)
def reset_container():
    """Every test starts with freshly wired services."""
    ServiceContainer.reset()
    yield
    ServiceContainer.reset()


@pytest.fixture
def clay_masters_event():
    """7 beats 3 on clay at a Masters event, reported with the higher id first."""
    return MatchResolution.create(
        match_id=1001,
        competitor_a=7,
        competitor_b=3,
        winner_id=7,
        match_date=date(2025, 4, 12),
        surface="Clay",
        tier="Masters 1000",
        tournament_name="Monte Carlo",
        round_label="Final",
        score_text="6-4 7-6",
        breakdown=SetGameBreakdown(
            sets=[SetScore(6, 4), SetScore(7, 6, a_tiebreak=7, b_tiebreak=5)],
            a_service_games_played=11,
            a_service_games_won=10,
            b_service_games_played=12,
            b_service_games_won=10,
        ),
    )


@pytest.fixture
def make_event():
    """Factory for minimal resolution events."""
    def _make(match_id, a, b, winner, day=date(2025, 1, 1), surface="Hard", tier=None):
        return MatchResolution.create(
            match_id=match_id,
            competitor_a=a,
            competitor_b=b,
            winner_id=winner,
            match_date=day,
            surface=surface,
            tier=tier,
        )
    return _make


@pytest.fixture
def three_round_bracket():
    """Final (round 1) correct, semifinal (round 2) wrong, quarterfinal unresolved."""
    return Bracket(
        bracket_id="b-1",
        user_id=42,
        tournament_id=9,
        status=BracketStatus.SUBMITTED,
        predictions=[
            BracketPrediction(match_position=1, round=1, predicted_winner_id=7,
                              match_id=501, actual_winner_id=7),
            BracketPrediction(match_position=2, round=2, predicted_winner_id=3,
                              match_id=502, actual_winner_id=5),
            BracketPrediction(match_position=3, round=3, predicted_winner_id=11,
                              match_id=503),
        ],
        champion=ChampionPick(predicted_champion_id=7),
    )


@pytest.fixture
def make_prediction():
    """Factory for user predictions."""
    counter = {"next_id": 1}

    def _make(user_id, match_id, predicted, actual=None, confidence=5,
              when=datetime(2025, 3, 10, 12, 0), tournament_id=None,
              predicted_score=None, actual_score=None):
        prediction = UserPrediction(
            prediction_id=counter["next_id"],
            user_id=user_id,
            match_id=match_id,
            predicted_winner_id=predicted,
            prediction_date=when,
            tournament_id=tournament_id,
            predicted_score=predicted_score,
            confidence_level=confidence,
            actual_winner_id=actual,
            actual_score=actual_score,
        )
        counter["next_id"] += 1
        return prediction
    return _make
