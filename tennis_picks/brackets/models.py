"""
Bracket data structures.

Rounds are numbered from the end of the draw: round 1 is the final, round 2
the semifinals, and so on back toward the first round. The default points
table is keyed by that numbering, so the final carries the lowest weight.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from tennis_picks.exceptions import ValidationError


class BracketStatus(str, Enum):
    """Bracket lifecycle states; only drafts accept structural edits."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    LOCKED = "locked"


# Round label to rounds-from-the-end number
ROUND_LABELS = {
    "Final": 1,
    "F": 1,
    "Semifinal": 2,
    "Semifinals": 2,
    "Semi-final": 2,
    "Semi-finals": 2,
    "SF": 2,
    "Quarterfinal": 3,
    "Quarterfinals": 3,
    "Quarter-final": 3,
    "Quarter-finals": 3,
    "QF": 3,
    "Round of 16": 4,
    "Round of 32": 5,
    "Round of 64": 6,
    "Round of 128": 7,
}

DEFAULT_ROUND_POINTS = {
    1: 10,
    2: 20,
    3: 40,
    4: 80,
    5: 160,
    6: 320,
}
FALLBACK_ROUND_POINTS = 10
DEFAULT_CHAMPION_BONUS = 500


def round_from_label(label: str) -> int:
    """Rounds-from-the-end number for a round label."""
    try:
        return ROUND_LABELS[label.strip()]
    except KeyError:
        raise ValidationError(f"Unknown round label: {label!r}") from None


@dataclass
class BracketPrediction:
    """A user's pick for one slot of the draw."""
    match_position: int
    round: int
    predicted_winner_id: int
    predicted_score: Optional[str] = None
    match_id: Optional[int] = None

    # Actual result (None until the match resolves)
    actual_winner_id: Optional[int] = None
    actual_score: Optional[str] = None

    # Computed by the scorer, never user-supplied
    is_correct: Optional[bool] = None
    points_earned: int = 0

    def __post_init__(self):
        if self.round < 1:
            raise ValidationError(f"Round must be >= 1, got {self.round}")

    @property
    def is_resolved(self) -> bool:
        return self.actual_winner_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_position": self.match_position,
            "round": self.round,
            "predicted_winner_id": self.predicted_winner_id,
            "predicted_score": self.predicted_score,
            "match_id": self.match_id,
            "actual_winner_id": self.actual_winner_id,
            "actual_score": self.actual_score,
            "is_correct": self.is_correct,
            "points_earned": self.points_earned,
        }


@dataclass
class ChampionPick:
    """The user's pick for the tournament winner."""
    predicted_champion_id: Optional[int] = None
    actual_champion_id: Optional[int] = None
    is_correct: Optional[bool] = None
    points_earned: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.actual_champion_id is not None


@dataclass
class RoundScore:
    round: int
    points: int


@dataclass
class Bracket:
    """
    One user's bracket for one tournament.

    Derived fields (total_score, correct_picks, total_resolved_picks,
    accuracy_percentage, round_scores) are owned by the scorer.
    """
    bracket_id: str
    user_id: int
    tournament_id: int
    predictions: List[BracketPrediction] = field(default_factory=list)
    champion: ChampionPick = field(default_factory=ChampionPick)
    status: BracketStatus = BracketStatus.DRAFT
    name: str = ""
    is_public: bool = True

    total_score: int = 0
    correct_picks: int = 0
    total_resolved_picks: int = 0
    accuracy_percentage: int = 0
    round_scores: List[RoundScore] = field(default_factory=list)

    def __post_init__(self):
        self.status = BracketStatus(self.status)
        positions = [p.match_position for p in self.predictions]
        duplicates = sorted({pos for pos in positions if positions.count(pos) > 1})
        if duplicates:
            raise ValidationError(
                f"Bracket {self.bracket_id} has duplicate match positions: {duplicates}"
            )
        self.predictions.sort(key=lambda p: p.match_position)

    @property
    def is_frozen(self) -> bool:
        """Submitted, completed and locked brackets accept no structural edits."""
        return self.status != BracketStatus.DRAFT

    def get_prediction(self, match_position: int) -> Optional[BracketPrediction]:
        for prediction in self.predictions:
            if prediction.match_position == match_position:
                return prediction
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "bracket_id": self.bracket_id,
            "user_id": self.user_id,
            "tournament_id": self.tournament_id,
            "name": self.name,
            "status": self.status.value,
            "is_public": self.is_public,
            "predictions": [p.to_dict() for p in self.predictions],
            "champion": {
                "predicted_champion_id": self.champion.predicted_champion_id,
                "actual_champion_id": self.champion.actual_champion_id,
                "is_correct": self.champion.is_correct,
                "points_earned": self.champion.points_earned,
            },
            "total_score": self.total_score,
            "correct_picks": self.correct_picks,
            "total_resolved_picks": self.total_resolved_picks,
            "accuracy_percentage": self.accuracy_percentage,
            "round_scores": [{"round": r.round, "points": r.points} for r in self.round_scores],
        }
