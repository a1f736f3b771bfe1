"""
Bracket mutation boundary.

Structural edits (adding, changing or removing picks) are only allowed while
a bracket is a draft. Recording actual results is always allowed: it feeds
re-scoring and never changes what the user picked.
"""
import logging
from typing import Optional

from .models import Bracket, BracketPrediction, BracketStatus
from tennis_picks.exceptions import BracketLockedError, ValidationError

logger = logging.getLogger(__name__)


def _ensure_editable(bracket: Bracket) -> None:
    if bracket.is_frozen:
        raise BracketLockedError(bracket.bracket_id, bracket.status.value)


def add_prediction(bracket: Bracket, prediction: BracketPrediction) -> Bracket:
    """Add a pick for an empty draw slot."""
    _ensure_editable(bracket)
    if bracket.get_prediction(prediction.match_position) is not None:
        raise ValidationError(
            f"Bracket {bracket.bracket_id} already has a pick at position {prediction.match_position}"
        )
    prediction.is_correct = None
    prediction.points_earned = 0
    bracket.predictions.append(prediction)
    bracket.predictions.sort(key=lambda p: p.match_position)
    return bracket


def update_prediction(
    bracket: Bracket,
    match_position: int,
    predicted_winner_id: int,
    predicted_score: Optional[str] = None,
) -> Bracket:
    """Change the pick at a draw slot."""
    _ensure_editable(bracket)
    prediction = bracket.get_prediction(match_position)
    if prediction is None:
        raise ValidationError(f"Bracket {bracket.bracket_id} has no pick at position {match_position}")
    prediction.predicted_winner_id = predicted_winner_id
    prediction.predicted_score = predicted_score
    return bracket


def remove_prediction(bracket: Bracket, match_position: int) -> Bracket:
    _ensure_editable(bracket)
    prediction = bracket.get_prediction(match_position)
    if prediction is None:
        raise ValidationError(f"Bracket {bracket.bracket_id} has no pick at position {match_position}")
    bracket.predictions.remove(prediction)
    return bracket


def set_champion(bracket: Bracket, champion_id: int) -> Bracket:
    _ensure_editable(bracket)
    bracket.champion.predicted_champion_id = champion_id
    return bracket


def submit(bracket: Bracket) -> Bracket:
    """Draft -> submitted."""
    _ensure_editable(bracket)
    bracket.status = BracketStatus.SUBMITTED
    logger.info(f"Bracket {bracket.bracket_id} submitted")
    return bracket


def lock(bracket: Bracket) -> Bracket:
    """Freeze a bracket once the tournament starts (idempotent)."""
    if bracket.status != BracketStatus.LOCKED:
        logger.info(f"Bracket {bracket.bracket_id} locked (was {bracket.status.value})")
    bracket.status = BracketStatus.LOCKED
    return bracket


def record_result(
    bracket: Bracket,
    match_id: int,
    winner_id: int,
    score: Optional[str] = None,
) -> Bracket:
    """
    Record the actual result of a match on every pick tied to it.

    Raises:
        ValidationError: No pick in the bracket refers to match_id
    """
    matched = [p for p in bracket.predictions if p.match_id == match_id]
    if not matched:
        raise ValidationError(f"Bracket {bracket.bracket_id} has no pick for match {match_id}")
    for prediction in matched:
        prediction.actual_winner_id = winner_id
        prediction.actual_score = score
    return bracket


def record_champion(bracket: Bracket, champion_id: int) -> Bracket:
    bracket.champion.actual_champion_id = champion_id
    return bracket
