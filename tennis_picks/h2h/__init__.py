"""
Head-to-head module - canonical pair keys, pair records and the pair store.
"""
from tennis_picks.h2h.canonical import (
    CanonicalPair,
    Side,
    Surface,
    Tier,
    canonicalize,
    pair_key,
    parse_surface,
    parse_tier,
)
from tennis_picks.h2h.events import MatchMeta, MatchResolution, SetGameBreakdown, SetScore
from tennis_picks.h2h.records import GameStats, MatchSummary, PairRecord, SetStats, WinSplit
from tennis_picks.h2h.store import PairStore, pairs_to_dataframe, repair_orientation

__all__ = [
    "CanonicalPair",
    "Side",
    "Surface",
    "Tier",
    "canonicalize",
    "pair_key",
    "parse_surface",
    "parse_tier",
    "MatchMeta",
    "MatchResolution",
    "SetGameBreakdown",
    "SetScore",
    "GameStats",
    "MatchSummary",
    "PairRecord",
    "SetStats",
    "WinSplit",
    "PairStore",
    "pairs_to_dataframe",
    "repair_orientation",
]
