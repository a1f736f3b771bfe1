"""
Bracket scoring.

Recomputes every derived field of a bracket from its predictions and the
actual results recorded on them. Scoring is pure: the input bracket is left
untouched and the same input always produces the same output.
"""
import copy
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from .models import (
    DEFAULT_CHAMPION_BONUS,
    DEFAULT_ROUND_POINTS,
    FALLBACK_ROUND_POINTS,
    Bracket,
    RoundScore,
)
from tennis_picks.utils.observability import get_metrics

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass
class BracketScorer:
    """
    Round-weighted bracket scorer.

    Attributes:
        round_points: Points for a correct pick, keyed by rounds-from-the-end
        champion_bonus: Flat bonus for a correct champion pick
        default_round_points: Points for rounds missing from round_points
    """
    round_points: Dict[int, int] = field(default_factory=lambda: dict(DEFAULT_ROUND_POINTS))
    champion_bonus: int = DEFAULT_CHAMPION_BONUS
    default_round_points: int = FALLBACK_ROUND_POINTS

    def points_for_round(self, round_num: int) -> int:
        return self.round_points.get(round_num, self.default_round_points)

    def score(self, bracket: Bracket) -> Bracket:
        """
        Score a bracket.

        Args:
            bracket: Bracket with actual results filled in where known

        Returns:
            A new Bracket with per-pick and aggregate fields recomputed
        """
        predictions = [copy.copy(p) for p in bracket.predictions]
        champion = copy.copy(bracket.champion)

        total_score = 0
        correct_picks = 0
        resolved_picks = 0
        points_by_round: Dict[int, int] = defaultdict(int)

        for prediction in predictions:
            if prediction.actual_winner_id is None:
                prediction.is_correct = None
                prediction.points_earned = 0
            else:
                prediction.is_correct = prediction.actual_winner_id == prediction.predicted_winner_id
                prediction.points_earned = (
                    self.points_for_round(prediction.round) if prediction.is_correct else 0
                )
                resolved_picks += 1
                if prediction.is_correct:
                    correct_picks += 1

            total_score += prediction.points_earned
            points_by_round[prediction.round] += prediction.points_earned

        if champion.predicted_champion_id is None or champion.actual_champion_id is None:
            champion.is_correct = None
            champion.points_earned = 0
        else:
            champion.is_correct = champion.actual_champion_id == champion.predicted_champion_id
            champion.points_earned = self.champion_bonus if champion.is_correct else 0
            resolved_picks += 1
            if champion.is_correct:
                correct_picks += 1
            total_score += champion.points_earned

        accuracy = round_half_up(100 * correct_picks / resolved_picks) if resolved_picks > 0 else 0

        scored = replace(
            bracket,
            predictions=predictions,
            champion=champion,
            total_score=total_score,
            correct_picks=correct_picks,
            total_resolved_picks=resolved_picks,
            accuracy_percentage=accuracy,
            round_scores=[
                RoundScore(round=round_num, points=points_by_round[round_num])
                for round_num in sorted(points_by_round)
            ],
        )

        get_metrics().brackets_scored.inc()
        logger.debug(
            f"Scored bracket {bracket.bracket_id}: {total_score} pts, "
            f"{correct_picks}/{resolved_picks} correct"
        )
        return scored


def score_bracket(
    bracket: Bracket,
    round_points_table: Optional[Mapping[int, int]] = None,
    champion_bonus: Optional[int] = None,
) -> Bracket:
    """Score a bracket with the given (or default) points table and bonus."""
    scorer = BracketScorer(
        round_points=dict(round_points_table) if round_points_table is not None else dict(DEFAULT_ROUND_POINTS),
        champion_bonus=DEFAULT_CHAMPION_BONUS if champion_bonus is None else champion_bonus,
    )
    return scorer.score(bracket)
