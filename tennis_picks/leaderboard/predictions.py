"""
Individual (non-bracket) match predictions and their point rule.

A prediction earns nothing until its match resolves. A correct winner earns
the base points, plus a bonus per confidence level above the pivot, plus a
bonus when the predicted score matches the actual score exactly.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Union

from tennis_picks.exceptions import ValidationError

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 10


@dataclass
class UserPrediction:
    """A single user prediction."""
    prediction_id: int
    user_id: int
    match_id: int
    predicted_winner_id: int
    prediction_date: Union[date, datetime]
    tournament_id: Optional[int] = None
    predicted_score: Optional[str] = None
    confidence_level: int = 5
    is_public: bool = True

    # Outcome fields (filled after match completes)
    actual_winner_id: Optional[int] = None
    actual_score: Optional[str] = None
    winner_correct: Optional[bool] = None
    score_accuracy: Optional[int] = None
    points_earned: int = 0

    def __post_init__(self):
        if not MIN_CONFIDENCE <= self.confidence_level <= MAX_CONFIDENCE:
            raise ValidationError(
                f"Prediction {self.prediction_id}: confidence must be "
                f"{MIN_CONFIDENCE}-{MAX_CONFIDENCE}, got {self.confidence_level}"
            )

    @property
    def is_resolved(self) -> bool:
        return self.actual_winner_id is not None

    @property
    def prediction_day(self) -> date:
        """Calendar day the prediction was made."""
        if isinstance(self.prediction_date, datetime):
            return self.prediction_date.date()
        return self.prediction_date


@dataclass(frozen=True)
class MatchResult:
    """Actual outcome of a match, used to resolve predictions in bulk."""
    match_id: int
    winner_id: int
    score: Optional[str] = None


def _normalize_score(score: Optional[str]) -> Optional[str]:
    if score is None:
        return None
    text = " ".join(score.split())
    return text or None


@dataclass(frozen=True)
class PredictionPointsRule:
    """Points awarded to a resolved prediction."""
    base_points: int = 10
    confidence_pivot: int = 5
    confidence_bonus_per_level: int = 2
    exact_score_bonus: int = 15

    def score_accuracy(self, prediction: UserPrediction) -> Optional[int]:
        """100 for an exact score, 0 for a wrong one, None if either is unknown."""
        predicted = _normalize_score(prediction.predicted_score)
        actual = _normalize_score(prediction.actual_score)
        if predicted is None or actual is None:
            return None
        return 100 if predicted == actual else 0

    def points_for(self, prediction: UserPrediction) -> int:
        if not prediction.is_resolved:
            return 0
        if prediction.actual_winner_id != prediction.predicted_winner_id:
            return 0

        points = self.base_points
        points += self.confidence_bonus_per_level * max(0, prediction.confidence_level - self.confidence_pivot)
        if self.score_accuracy(prediction) == 100:
            points += self.exact_score_bonus
        return points

    def apply(self, prediction: UserPrediction) -> UserPrediction:
        """Recompute the outcome fields from the actual result on the prediction."""
        if not prediction.is_resolved:
            return replace(prediction, winner_correct=None, score_accuracy=None, points_earned=0)
        return replace(
            prediction,
            winner_correct=prediction.actual_winner_id == prediction.predicted_winner_id,
            score_accuracy=self.score_accuracy(prediction),
            points_earned=self.points_for(prediction),
        )


def resolve_prediction(
    prediction: UserPrediction,
    actual_winner_id: int,
    actual_score: Optional[str] = None,
    rule: Optional[PredictionPointsRule] = None,
) -> UserPrediction:
    """
    Attach a match outcome to a prediction and score it.

    Returns:
        A new UserPrediction; the input is not modified
    """
    rule = rule or PredictionPointsRule()
    resolved = rule.apply(replace(prediction, actual_winner_id=actual_winner_id, actual_score=actual_score))
    logger.debug(
        f"Resolved prediction {prediction.prediction_id} for match {prediction.match_id}: "
        f"correct={resolved.winner_correct} points={resolved.points_earned}"
    )
    return resolved
