"""
Resolved-match events consumed by the pair store.

Per-side values in an event are relative to the event's own competitor_a /
competitor_b ordering ("a" / "b"); the store re-attributes them to the
canonical low/high sides.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from .canonical import Surface, Tier, parse_surface, parse_tier
from tennis_picks.exceptions import ValidationError


@dataclass
class SetScore:
    """Games (and tiebreak points, if one was played) for a single set."""
    a_games: int
    b_games: int
    a_tiebreak: Optional[int] = None
    b_tiebreak: Optional[int] = None

    @property
    def a_won(self) -> bool:
        return self.a_games > self.b_games

    @property
    def had_tiebreak(self) -> bool:
        if self.a_tiebreak is not None and self.b_tiebreak is not None:
            return True
        return sorted((self.a_games, self.b_games)) == [6, 7]

    @property
    def a_won_tiebreak(self) -> bool:
        if self.a_tiebreak is not None and self.b_tiebreak is not None and self.a_tiebreak != self.b_tiebreak:
            return self.a_tiebreak > self.b_tiebreak
        return self.a_won


@dataclass
class SetGameBreakdown:
    """Set-by-set scores plus service games, from the a/b perspective."""
    sets: List[SetScore] = field(default_factory=list)
    a_service_games_played: int = 0
    a_service_games_won: int = 0
    b_service_games_played: int = 0
    b_service_games_won: int = 0

    def __post_init__(self):
        for played, won, label in (
            (self.a_service_games_played, self.a_service_games_won, "a"),
            (self.b_service_games_played, self.b_service_games_won, "b"),
        ):
            if won > played:
                raise ValidationError(
                    f"Side {label} won {won} service games but only played {played}"
                )
        for set_score in self.sets:
            if set_score.a_games == set_score.b_games:
                raise ValidationError(f"Set cannot end level: {set_score.a_games}-{set_score.b_games}")


@dataclass
class MatchMeta:
    """Everything about a resolved match except who played and who won."""
    match_id: int
    match_date: date
    surface: Surface
    tier: Tier = Tier.OTHER
    tournament_name: Optional[str] = None
    round_label: Optional[str] = None
    score_text: Optional[str] = None
    breakdown: Optional[SetGameBreakdown] = None

    def __post_init__(self):
        self.surface = parse_surface(self.surface)
        self.tier = parse_tier(self.tier)


@dataclass
class MatchResolution:
    """A match that has transitioned to completed."""
    competitor_a: int
    competitor_b: int
    winner_id: int
    meta: MatchMeta

    @property
    def match_id(self) -> int:
        return self.meta.match_id

    @property
    def match_date(self) -> date:
        return self.meta.match_date

    @classmethod
    def create(
        cls,
        match_id: int,
        competitor_a: int,
        competitor_b: int,
        winner_id: int,
        match_date: date,
        surface: Union[str, Surface],
        tier: Union[str, Tier, None] = None,
        **meta_kwargs,
    ) -> "MatchResolution":
        """Flat constructor mirroring the inbound event shape."""
        meta = MatchMeta(
            match_id=match_id,
            match_date=match_date,
            surface=surface,
            tier=tier,
            **meta_kwargs,
        )
        return cls(competitor_a=competitor_a, competitor_b=competitor_b, winner_id=winner_id, meta=meta)
