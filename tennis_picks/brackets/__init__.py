"""
Brackets module - bracket structures, the mutation boundary and scoring.
"""
from tennis_picks.brackets.models import (
    DEFAULT_CHAMPION_BONUS,
    DEFAULT_ROUND_POINTS,
    ROUND_LABELS,
    Bracket,
    BracketPrediction,
    BracketStatus,
    ChampionPick,
    RoundScore,
    round_from_label,
)
from tennis_picks.brackets.scorer import BracketScorer, score_bracket

__all__ = [
    "DEFAULT_CHAMPION_BONUS",
    "DEFAULT_ROUND_POINTS",
    "ROUND_LABELS",
    "Bracket",
    "BracketPrediction",
    "BracketStatus",
    "ChampionPick",
    "RoundScore",
    "round_from_label",
    "BracketScorer",
    "score_bracket",
]
