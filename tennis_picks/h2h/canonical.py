"""
Canonical ordering for head-to-head pairs.

Every pairwise record is keyed by (min id, max id). Callers never need to
know which side is which: `canonicalize` resolves the ordering and the
winner's side before any counter is touched.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
import logging

from tennis_picks.exceptions import InvalidPairError, UnknownCompetitorError, ValidationError

logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Side of a canonical pair."""
    LOW = "low"
    HIGH = "high"
    TIED = "tied"


class Surface(str, Enum):
    """Surface buckets tracked per pair."""
    HARD = "hard"
    CLAY = "clay"
    GRASS = "grass"
    INDOOR = "indoor"


class Tier(str, Enum):
    """Tournament category buckets tracked per pair."""
    GRAND_SLAM = "grand_slam"
    MASTERS_1000 = "masters_1000"
    ATP_500 = "atp_500"
    ATP_250 = "atp_250"
    OTHER = "other"


PairKey = Tuple[int, int]


@dataclass(frozen=True)
class CanonicalPair:
    """A pair of competitors in canonical (low, high) order."""
    low_id: int
    high_id: int
    winner_side: Optional[Side] = None

    @property
    def key(self) -> PairKey:
        return (self.low_id, self.high_id)

    def side_of(self, competitor_id: int) -> Side:
        """Which side of this pair a competitor sits on."""
        if competitor_id == self.low_id:
            return Side.LOW
        if competitor_id == self.high_id:
            return Side.HIGH
        raise UnknownCompetitorError(competitor_id, self.low_id, self.high_id)


def canonicalize(
    competitor_a: int,
    competitor_b: int,
    winner_id: Optional[int] = None,
) -> CanonicalPair:
    """
    Order a pair by id and work out which side won.

    Args:
        competitor_a: One competitor, in whatever order the caller had it
        competitor_b: The other competitor
        winner_id: Optional winner; must be one of the two competitors

    Returns:
        CanonicalPair with low_id < high_id

    Raises:
        InvalidPairError: competitor_a == competitor_b
        UnknownCompetitorError: winner_id is neither competitor
    """
    if competitor_a == competitor_b:
        raise InvalidPairError(competitor_a)

    low_id, high_id = min(competitor_a, competitor_b), max(competitor_a, competitor_b)
    pair = CanonicalPair(low_id=low_id, high_id=high_id)

    if winner_id is None:
        return pair
    return CanonicalPair(low_id=low_id, high_id=high_id, winner_side=pair.side_of(winner_id))


def pair_key(competitor_a: int, competitor_b: int) -> PairKey:
    """Lookup key for a pair, independent of argument order."""
    return canonicalize(competitor_a, competitor_b).key


def parse_surface(value: Union[str, Surface]) -> Surface:
    """Parse surface text to a canonical bucket."""
    if isinstance(value, Surface):
        return value
    text = (value or "").lower().strip()

    if "hard" in text:
        return Surface.HARD
    if "clay" in text:
        return Surface.CLAY
    if "grass" in text:
        return Surface.GRASS
    if "indoor" in text or "carpet" in text:
        return Surface.INDOOR
    raise ValidationError(f"Unrecognized surface: {value!r}")


def parse_tier(value: Union[str, Tier, None]) -> Tier:
    """Parse a tournament category to a canonical tier bucket."""
    if isinstance(value, Tier):
        return value
    text = (value or "").lower().strip()

    # Exact enum values first ("masters_1000", "atp_500", ...)
    for tier in Tier:
        if text == tier.value:
            return tier

    if "grand slam" in text:
        return Tier.GRAND_SLAM
    if "masters" in text:
        return Tier.MASTERS_1000
    if "500" in text:
        return Tier.ATP_500
    if "250" in text:
        return Tier.ATP_250
    return Tier.OTHER
