"""
Leaderboard module - raw predictions, scopes and standings aggregation.
"""
from tennis_picks.leaderboard.predictions import (
    MatchResult,
    PredictionPointsRule,
    UserPrediction,
    resolve_prediction,
)
from tennis_picks.leaderboard.scopes import (
    LeaderboardScope,
    Timeframe,
    all_time_scope,
    month_scope,
    season_scope,
    tournament_scope,
)
from tennis_picks.leaderboard.aggregator import (
    Leaderboard,
    LeaderboardAggregator,
    LeaderboardEntry,
    build_leaderboard,
)

__all__ = [
    "MatchResult",
    "PredictionPointsRule",
    "UserPrediction",
    "resolve_prediction",
    "LeaderboardScope",
    "Timeframe",
    "all_time_scope",
    "month_scope",
    "season_scope",
    "tournament_scope",
    "Leaderboard",
    "LeaderboardAggregator",
    "LeaderboardEntry",
    "build_leaderboard",
]
