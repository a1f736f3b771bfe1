"""
Head-to-head record structures.

A PairRecord holds everything known about one unordered pair of competitors.
All "per-side" counters are stored as low/high values, where low is the
competitor with the smaller id.
"""
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .canonical import PairKey, Side, Surface, Tier
from tennis_picks.exceptions import UnknownCompetitorError


def _pct(numerator: int, denominator: int) -> float:
    """Percentage rounded to 2 decimals, 0.0 for an empty denominator."""
    if denominator <= 0:
        return 0.0
    return round(100.0 * numerator / denominator, 2)


@dataclass
class WinSplit:
    """Match count and wins per side for one bucket."""
    matches: int = 0
    low_wins: int = 0
    high_wins: int = 0

    def record(self, winner_side: Side) -> None:
        self.matches += 1
        if winner_side == Side.LOW:
            self.low_wins += 1
        else:
            self.high_wins += 1

    def swap(self) -> None:
        self.low_wins, self.high_wins = self.high_wins, self.low_wins

    @property
    def is_consistent(self) -> bool:
        return self.low_wins + self.high_wins == self.matches


@dataclass
class SetStats:
    """Sets and tiebreaks won by each side."""
    low_sets_won: int = 0
    high_sets_won: int = 0
    tiebreaks_played: int = 0
    low_tiebreaks_won: int = 0
    high_tiebreaks_won: int = 0

    def swap(self) -> None:
        self.low_sets_won, self.high_sets_won = self.high_sets_won, self.low_sets_won
        self.low_tiebreaks_won, self.high_tiebreaks_won = self.high_tiebreaks_won, self.low_tiebreaks_won


@dataclass
class GameStats:
    """Games and service games won by each side."""
    low_games_won: int = 0
    high_games_won: int = 0
    low_service_games_played: int = 0
    low_service_games_won: int = 0
    high_service_games_played: int = 0
    high_service_games_won: int = 0

    @property
    def low_service_hold_pct(self) -> float:
        return _pct(self.low_service_games_won, self.low_service_games_played)

    @property
    def high_service_hold_pct(self) -> float:
        return _pct(self.high_service_games_won, self.high_service_games_played)

    def swap(self) -> None:
        self.low_games_won, self.high_games_won = self.high_games_won, self.low_games_won
        self.low_service_games_played, self.high_service_games_played = (
            self.high_service_games_played, self.low_service_games_played
        )
        self.low_service_games_won, self.high_service_games_won = (
            self.high_service_games_won, self.low_service_games_won
        )


@dataclass
class MatchSummary:
    """One resolved match between the pair, with the caller's original ids."""
    match_id: int
    match_date: date
    surface: Surface
    winner_id: int
    score_text: Optional[str] = None
    competitor_a: Optional[int] = None
    competitor_b: Optional[int] = None
    tier: Tier = Tier.OTHER
    tournament_name: Optional[str] = None
    round_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "match_date": self.match_date.isoformat(),
            "surface": self.surface.value,
            "winner_id": self.winner_id,
            "score_text": self.score_text,
            "competitor_a": self.competitor_a,
            "competitor_b": self.competitor_b,
            "tier": self.tier.value,
            "tournament_name": self.tournament_name,
            "round_label": self.round_label,
        }


def _surface_buckets() -> Dict[Surface, WinSplit]:
    return {surface: WinSplit() for surface in Surface}


def _tier_buckets() -> Dict[Tier, WinSplit]:
    return {tier: WinSplit() for tier in Tier}


@dataclass
class PairRecord:
    """
    Head-to-head statistics for one unordered pair.

    Invariants:
    - low_id < high_id (restored by the repair pass for stale records)
    - low_wins + high_wins == matches_count, and the same for every bucket
    - last_match_date / last_match_id mirror the newest history entry
    """
    low_id: int
    high_id: int
    matches_count: int = 0
    low_wins: int = 0
    high_wins: int = 0
    by_surface: Dict[Surface, WinSplit] = field(default_factory=_surface_buckets)
    by_tier: Dict[Tier, WinSplit] = field(default_factory=_tier_buckets)
    set_stats: SetStats = field(default_factory=SetStats)
    game_stats: GameStats = field(default_factory=GameStats)
    match_history: List[MatchSummary] = field(default_factory=list)
    last_match_date: Optional[date] = None
    last_match_id: Optional[int] = None
    version: int = 0
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> PairKey:
        return (self.low_id, self.high_id)

    def side_of(self, competitor_id: int) -> Side:
        if competitor_id == self.low_id:
            return Side.LOW
        if competitor_id == self.high_id:
            return Side.HIGH
        raise UnknownCompetitorError(competitor_id, self.low_id, self.high_id)

    def wins_for(self, competitor_id: int) -> int:
        """Total wins for a competitor in this pairing."""
        return self.low_wins if self.side_of(competitor_id) == Side.LOW else self.high_wins

    def win_percentage(self, side: Side) -> float:
        """Share of matches won by a side, in percent (0.0 with no matches)."""
        if side == Side.LOW:
            return _pct(self.low_wins, self.matches_count)
        if side == Side.HIGH:
            return _pct(self.high_wins, self.matches_count)
        raise ValueError(f"win_percentage needs LOW or HIGH, got {side}")

    def dominant_side(self) -> Side:
        """Side with more wins, TIED when level or never played."""
        if self.matches_count == 0 or self.low_wins == self.high_wins:
            return Side.TIED
        return Side.LOW if self.low_wins > self.high_wins else Side.HIGH

    def has_match(self, match_id: int) -> bool:
        return any(entry.match_id == match_id for entry in self.match_history)

    def is_consistent(self) -> bool:
        """Check every conservation invariant on this record."""
        if self.low_wins + self.high_wins != self.matches_count:
            return False
        buckets = list(self.by_surface.values()) + list(self.by_tier.values())
        if not all(bucket.is_consistent for bucket in buckets):
            return False
        return (
            sum(bucket.matches for bucket in self.by_surface.values()) == self.matches_count
            and sum(bucket.matches for bucket in self.by_tier.values()) == self.matches_count
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "low_id": self.low_id,
            "high_id": self.high_id,
            "matches_count": self.matches_count,
            "low_wins": self.low_wins,
            "high_wins": self.high_wins,
            "by_surface": {s.value: _split_dict(b) for s, b in self.by_surface.items()},
            "by_tier": {t.value: _split_dict(b) for t, b in self.by_tier.items()},
            "set_stats": {f.name: getattr(self.set_stats, f.name) for f in fields(SetStats)},
            "game_stats": {
                **{f.name: getattr(self.game_stats, f.name) for f in fields(GameStats)},
                "low_service_hold_pct": self.game_stats.low_service_hold_pct,
                "high_service_hold_pct": self.game_stats.high_service_hold_pct,
            },
            "match_history": [entry.to_dict() for entry in self.match_history],
            "last_match_date": self.last_match_date.isoformat() if self.last_match_date else None,
            "last_match_id": self.last_match_id,
            "version": self.version,
        }


def _split_dict(split: WinSplit) -> Dict[str, int]:
    return {"matches": split.matches, "low_wins": split.low_wins, "high_wins": split.high_wins}
