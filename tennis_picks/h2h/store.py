"""
Canonical pair store.

Applies resolved-match events to head-to-head records:
- Canonical (low, high) keying, winner side resolved before any mutation
- Per-pair locking so read-modify-write of one record never interleaves
- Idempotent on match_id; out-of-order events kept in (date, match_id) order
- Repair pass for records written with a stale orientation

Example:
    store = PairStore()
    store.apply(MatchResolution.create(
        match_id=1, competitor_a=7, competitor_b=3, winner_id=7,
        match_date=date(2025, 4, 12), surface="Clay", tier="Masters 1000",
    ))
    record = store.get_pair_record(3, 7)
"""
import bisect
import logging
from collections import defaultdict
from datetime import datetime
from threading import Lock
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

import polars as pl

from .canonical import PairKey, Side, Surface, Tier, canonicalize, pair_key
from .events import MatchMeta, MatchResolution, SetGameBreakdown
from .records import MatchSummary, PairRecord
from tennis_picks.exceptions import ConflictError, UnknownCompetitorError
from tennis_picks.utils.observability import get_metrics

if TYPE_CHECKING:
    from tennis_picks.core.protocols import PairRepository

logger = logging.getLogger(__name__)


def _accumulate_breakdown(record: PairRecord, breakdown: SetGameBreakdown, a_is_low: bool) -> None:
    """Add set/game totals, mapping the event's a/b sides onto low/high."""
    sets, games = record.set_stats, record.game_stats

    for set_score in breakdown.sets:
        low_games, high_games = (
            (set_score.a_games, set_score.b_games) if a_is_low
            else (set_score.b_games, set_score.a_games)
        )
        games.low_games_won += low_games
        games.high_games_won += high_games

        low_took_set = set_score.a_won == a_is_low
        if low_took_set:
            sets.low_sets_won += 1
        else:
            sets.high_sets_won += 1

        if set_score.had_tiebreak:
            sets.tiebreaks_played += 1
            if set_score.a_won_tiebreak == a_is_low:
                sets.low_tiebreaks_won += 1
            else:
                sets.high_tiebreaks_won += 1

    if a_is_low:
        games.low_service_games_played += breakdown.a_service_games_played
        games.low_service_games_won += breakdown.a_service_games_won
        games.high_service_games_played += breakdown.b_service_games_played
        games.high_service_games_won += breakdown.b_service_games_won
    else:
        games.low_service_games_played += breakdown.b_service_games_played
        games.low_service_games_won += breakdown.b_service_games_won
        games.high_service_games_played += breakdown.a_service_games_played
        games.high_service_games_won += breakdown.a_service_games_won


def _insert_history(record: PairRecord, summary: MatchSummary) -> None:
    """Insert in (match_date, match_id) order, the same order replay applies."""
    keys = [(entry.match_date, entry.match_id) for entry in record.match_history]
    position = bisect.bisect_right(keys, (summary.match_date, summary.match_id))
    record.match_history.insert(position, summary)

    newest = record.match_history[-1]
    record.last_match_date = newest.match_date
    record.last_match_id = newest.match_id


def repair_orientation(record: PairRecord) -> bool:
    """
    Restore low_id < high_id on a record written with the pair swapped.

    Every per-side counter moves together with its competitor id. History
    entries hold original competitor ids, so they stay valid; each winner is
    checked against the pair.

    Returns:
        True if the record was re-oriented, False if it was already canonical
    """
    for entry in record.match_history:
        if entry.winner_id not in (record.low_id, record.high_id):
            raise UnknownCompetitorError(entry.winner_id, record.low_id, record.high_id)

    if record.low_id < record.high_id:
        return False

    record.low_id, record.high_id = record.high_id, record.low_id
    record.low_wins, record.high_wins = record.high_wins, record.low_wins
    for bucket in record.by_surface.values():
        bucket.swap()
    for bucket in record.by_tier.values():
        bucket.swap()
    record.set_stats.swap()
    record.game_stats.swap()
    return True


class PairStore:
    """
    Head-to-head store keyed by canonical pair.

    The store owns the per-key locks; the repository only persists records.
    """

    def __init__(self, repository: Optional["PairRepository"] = None):
        if repository is None:
            from tennis_picks.core.storage import InMemoryPairRepository
            repository = InMemoryPairRepository()
        self.repository = repository
        self._locks: Dict[PairKey, Lock] = defaultdict(Lock)
        self._locks_guard = Lock()

    def _lock_for(self, key: PairKey) -> Lock:
        with self._locks_guard:
            return self._locks[key]

    def upsert_resolved_match(
        self,
        competitor_a: int,
        competitor_b: int,
        winner_id: int,
        meta: MatchMeta,
    ) -> PairRecord:
        """
        Apply one resolved match to the pair's record.

        Args:
            competitor_a: One competitor (any order)
            competitor_b: The other competitor
            winner_id: Must be competitor_a or competitor_b
            meta: Surface, tier, date, score and set/game breakdown

        Returns:
            The updated (or unchanged, for a re-delivered match) record
        """
        pair = canonicalize(competitor_a, competitor_b, winner_id)
        metrics = get_metrics()

        with self._lock_for(pair.key):
            record = self.repository.get(pair.key)
            if record is None:
                record = PairRecord(low_id=pair.low_id, high_id=pair.high_id)
                logger.debug(f"Created pair record {pair.key}")

            if record.has_match(meta.match_id):
                logger.info(f"Match {meta.match_id} already applied to pair {pair.key}, skipping")
                metrics.pair_upserts.labels(outcome="duplicate").inc()
                return record

            record.matches_count += 1
            if pair.winner_side == Side.LOW:
                record.low_wins += 1
            else:
                record.high_wins += 1

            record.by_surface[meta.surface].record(pair.winner_side)
            record.by_tier[meta.tier].record(pair.winner_side)

            if meta.breakdown is not None:
                _accumulate_breakdown(record, meta.breakdown, a_is_low=competitor_a == pair.low_id)

            is_stale = record.last_match_date is not None and meta.match_date < record.last_match_date
            _insert_history(record, MatchSummary(
                match_id=meta.match_id,
                match_date=meta.match_date,
                surface=meta.surface,
                winner_id=winner_id,
                score_text=meta.score_text,
                competitor_a=competitor_a,
                competitor_b=competitor_b,
                tier=meta.tier,
                tournament_name=meta.tournament_name,
                round_label=meta.round_label,
            ))
            if is_stale:
                logger.info(
                    f"Match {meta.match_id} ({meta.match_date}) is older than last match "
                    f"{record.last_match_id} for pair {pair.key}"
                )

            record.version += 1
            record.updated_at = datetime.now()
            self.repository.put(record)

        metrics.pair_upserts.labels(outcome="applied").inc()
        logger.debug(
            f"Applied match {meta.match_id} to pair {pair.key}: "
            f"{record.low_wins}-{record.high_wins} over {record.matches_count}"
        )
        return record

    def apply(self, resolution: MatchResolution) -> PairRecord:
        """Apply a match resolution event."""
        return self.upsert_resolved_match(
            resolution.competitor_a,
            resolution.competitor_b,
            resolution.winner_id,
            resolution.meta,
        )

    def replay(self, resolutions: Iterable[MatchResolution]) -> List[PairRecord]:
        """
        Apply a batch of events in (match_date, match_id) order.

        Returns:
            Touched records, ordered by key
        """
        ordered = sorted(resolutions, key=lambda r: (r.match_date, r.match_id))
        touched: Dict[PairKey, PairRecord] = {}
        for resolution in ordered:
            record = self.apply(resolution)
            touched[record.key] = record
        logger.info(f"Replayed {len(ordered)} match events across {len(touched)} pairs")
        return [touched[key] for key in sorted(touched)]

    def get_pair_record(self, competitor_a: int, competitor_b: int) -> Optional[PairRecord]:
        """Look up a pair in either argument order."""
        return self.repository.get(pair_key(competitor_a, competitor_b))

    def records(self) -> List[PairRecord]:
        return self.repository.list_records()

    def repair_all(self) -> int:
        """
        Re-orient and re-key every stale record in the repository.

        Returns:
            Number of records repaired
        """
        repaired = 0
        for record in self.repository.list_records():
            if record.low_id < record.high_id:
                repair_orientation(record)  # validates history only
                continue

            stale_key = record.key
            canonical = (record.high_id, record.low_id)
            with self._lock_for(canonical):
                if self.repository.get(canonical) is not None:
                    raise ConflictError(
                        f"Pair {canonical} exists in both orientations; merge required"
                    )
                repair_orientation(record)
                record.version += 1
                record.updated_at = datetime.now()
                self.repository.delete(stale_key)
                self.repository.put(record)
            repaired += 1
            get_metrics().pair_repairs.inc()
            logger.warning(f"Repaired stale pair record {stale_key} -> {record.key}")

        return repaired


def pairs_to_dataframe(records: List[PairRecord]) -> pl.DataFrame:
    """Flatten pair records to one row per pair."""
    if not records:
        return pl.DataFrame()

    rows = []
    for record in records:
        row = {
            "low_id": record.low_id,
            "high_id": record.high_id,
            "matches": record.matches_count,
            "low_wins": record.low_wins,
            "high_wins": record.high_wins,
            "low_win_pct": record.win_percentage(Side.LOW),
            "dominant_side": record.dominant_side().value,
            "last_match_date": record.last_match_date,
            "last_match_id": record.last_match_id,
        }
        for surface in Surface:
            bucket = record.by_surface[surface]
            row[f"{surface.value}_matches"] = bucket.matches
            row[f"{surface.value}_low_wins"] = bucket.low_wins
        for tier in Tier:
            row[f"{tier.value}_matches"] = record.by_tier[tier].matches
        rows.append(row)

    return pl.DataFrame(rows).sort(["low_id", "high_id"])
