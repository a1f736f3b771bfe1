"""
Leaderboard aggregation.

Standings are always rebuilt from the raw prediction population in scope;
nothing is patched incrementally, so a retroactive correction to a match
result is reflected on the next rebuild.

Ranking order: points desc, then accuracy desc, then user id asc. Every
entry gets its own rank (index + 1), ties included.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Iterable, List, Mapping, Optional

import polars as pl

from .predictions import MatchResult, PredictionPointsRule, UserPrediction, resolve_prediction
from .scopes import LeaderboardScope
from tennis_picks.brackets.models import Bracket, BracketStatus
from tennis_picks.exceptions import ConfigurationError
from tennis_picks.utils.observability import get_metrics

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_TEMPLATE = "User {user_id}"

RANKED_BRACKET_STATUSES = (BracketStatus.SUBMITTED, BracketStatus.COMPLETED, BracketStatus.LOCKED)

STANDINGS_SCHEMA = {
    "user_id": pl.Int64,
    "is_correct": pl.Boolean,
    "points": pl.Int64,
}


@dataclass
class LeaderboardEntry:
    rank: int
    user_id: int
    display_name: str
    points: int
    predictions_made: int
    correct_predictions: int
    accuracy_percentage: float
    bracket_id: Optional[str] = None


@dataclass
class Leaderboard:
    """Ranked standings for one scope."""
    scope: Optional[LeaderboardScope]
    entries: List[LeaderboardEntry] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    def entry_for(self, user_id: int) -> Optional[LeaderboardEntry]:
        for entry in self.entries:
            if entry.user_id == user_id:
                return entry
        return None

    def top(self, n: int) -> List[LeaderboardEntry]:
        return self.entries[:n]

    def to_dataframe(self) -> pl.DataFrame:
        if not self.entries:
            return pl.DataFrame()
        return pl.DataFrame([asdict(entry) for entry in self.entries])


def _accuracy_expr() -> pl.Expr:
    """100 * correct / made, rounded half-up to 2 decimals."""
    return (
        pl.when(pl.col("predictions_made") > 0)
        .then((pl.col("correct_predictions") * 10000 / pl.col("predictions_made") + 0.5).floor() / 100)
        .otherwise(0.0)
        .alias("accuracy_percentage")
    )


class LeaderboardAggregator:
    """
    Builds prediction leaderboards.

    Example:
        aggregator = LeaderboardAggregator()
        board = aggregator.build(season_scope(2025), predictions, {1: "ana"})
        board.entries[0].rank  # 1
    """

    def __init__(
        self,
        rule: Optional[PredictionPointsRule] = None,
        placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE,
    ):
        if "{user_id}" not in placeholder_template:
            raise ConfigurationError(
                f"Placeholder template must contain {{user_id}}: {placeholder_template!r}"
            )
        self.rule = rule or PredictionPointsRule()
        self.placeholder_template = placeholder_template

    def display_name(self, user_id: int, user_directory: Mapping[int, str]) -> str:
        name = user_directory.get(user_id)
        return name if name else self.placeholder_template.format(user_id=user_id)

    def _rescore(
        self,
        prediction: UserPrediction,
        results: Mapping[int, MatchResult],
    ) -> UserPrediction:
        result = results.get(prediction.match_id)
        if result is not None:
            return resolve_prediction(prediction, result.winner_id, result.score, rule=self.rule)
        return self.rule.apply(prediction)

    def build(
        self,
        scope: LeaderboardScope,
        raw_predictions: Iterable[UserPrediction],
        user_directory: Mapping[int, str],
        results: Optional[Mapping[int, MatchResult]] = None,
    ) -> Leaderboard:
        """
        Rebuild standings for a scope.

        Args:
            scope: Timeframe window and optional tournament
            raw_predictions: Raw prediction records; anything outside scope is ignored
            user_directory: user_id -> display name
            results: Optional snapshot of match results keyed by match_id; when
                given, predictions are resolved against it before scoring

        Returns:
            Fully ranked Leaderboard
        """
        metrics = get_metrics()
        results = dict(results or {})

        with metrics.leaderboard_rebuild_latency.labels(timeframe=scope.timeframe.value).time():
            in_scope = [
                self._rescore(prediction, results)
                for prediction in raw_predictions
                if scope.contains(prediction)
            ]

            df = pl.DataFrame(
                {
                    "user_id": [p.user_id for p in in_scope],
                    "is_correct": [p.winner_correct is True for p in in_scope],
                    "points": [p.points_earned for p in in_scope],
                },
                schema=STANDINGS_SCHEMA,
            )

            standings = (
                df.group_by("user_id")
                .agg(
                    pl.len().cast(pl.Int64).alias("predictions_made"),
                    pl.col("is_correct").sum().cast(pl.Int64).alias("correct_predictions"),
                    pl.col("points").sum().alias("points"),
                )
                .with_columns(_accuracy_expr())
                .sort(
                    ["points", "accuracy_percentage", "user_id"],
                    descending=[True, True, False],
                )
                .with_row_index("rank", offset=1)
            )

            entries = [
                LeaderboardEntry(
                    rank=row["rank"],
                    user_id=row["user_id"],
                    display_name=self.display_name(row["user_id"], user_directory),
                    points=row["points"],
                    predictions_made=row["predictions_made"],
                    correct_predictions=row["correct_predictions"],
                    accuracy_percentage=row["accuracy_percentage"],
                )
                for row in standings.iter_rows(named=True)
            ]

        metrics.leaderboard_entries.labels(timeframe=scope.timeframe.value).set(len(entries))
        logger.info(
            f"Built {scope.timeframe.value} leaderboard ({scope.start_date} - {scope.end_date}): "
            f"{len(in_scope)} predictions, {len(entries)} users"
        )
        return Leaderboard(scope=scope, entries=entries)

    def rank_brackets(
        self,
        brackets: Iterable[Bracket],
        user_directory: Mapping[int, str],
        tournament_id: Optional[int] = None,
        limit: int = 100,
    ) -> Leaderboard:
        """
        Standings over scored brackets (one entry per bracket).

        Drafts are excluded. Ties are broken the same way as prediction
        leaderboards, then by bracket id.
        """
        ranked = [
            b for b in brackets
            if b.status in RANKED_BRACKET_STATUSES
            and (tournament_id is None or b.tournament_id == tournament_id)
        ]
        ranked.sort(key=lambda b: (-b.total_score, -b.accuracy_percentage, b.user_id, b.bracket_id))

        entries = []
        for index, bracket in enumerate(ranked[:limit]):
            picks = len(bracket.predictions) + (1 if bracket.champion.predicted_champion_id is not None else 0)
            entries.append(LeaderboardEntry(
                rank=index + 1,
                user_id=bracket.user_id,
                display_name=self.display_name(bracket.user_id, user_directory),
                points=bracket.total_score,
                predictions_made=picks,
                correct_predictions=bracket.correct_picks,
                accuracy_percentage=float(bracket.accuracy_percentage),
                bracket_id=bracket.bracket_id,
            ))

        logger.info(f"Ranked {len(entries)} of {len(ranked)} brackets")
        return Leaderboard(scope=None, entries=entries)


def build_leaderboard(
    scope: LeaderboardScope,
    raw_predictions: Iterable[UserPrediction],
    user_directory: Mapping[int, str],
    results: Optional[Mapping[int, MatchResult]] = None,
    rule: Optional[PredictionPointsRule] = None,
) -> Leaderboard:
    """Rebuild a leaderboard with the default aggregator settings."""
    return LeaderboardAggregator(rule=rule).build(scope, raw_predictions, user_directory, results)
