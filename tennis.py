#!/usr/bin/env python
"""
Tennis Picks - Scoring & aggregation CLI
"""
import sys
from pathlib import Path
import argparse
import json
import uuid
from dataclasses import asdict
from datetime import date

ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT))

import polars as pl
import pydantic

from tennis_picks.config import settings
from tennis_picks.core import ServiceContainer
from tennis_picks.exceptions import TennisPicksError
from tennis_picks.h2h import pairs_to_dataframe
from tennis_picks.leaderboard import (
    LeaderboardScope,
    Timeframe,
    all_time_scope,
    month_scope,
    season_scope,
    tournament_scope,
)
from tennis_picks.schema import BracketPayload, MatchResolutionEvent, RawPredictionRecord
from tennis_picks.utils.logging import setup_logging
from tennis_picks.utils.observability import initialize_observability, Logger

logger = Logger(__name__)


def _load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_h2h(args):
    """Replay match events into the pair store and show the result."""
    events = [MatchResolutionEvent.model_validate(e).to_resolution() for e in _load_json(args.events)]
    store = ServiceContainer.get_pair_store()
    store.replay(events)
    logger.log_event('h2h_replayed', events=len(events))

    if args.pair:
        record = store.get_pair_record(args.pair[0], args.pair[1])
        if record is None:
            print(f"No matches between {args.pair[0]} and {args.pair[1]}")
            return 1
        _print_json(record.to_dict())
        return 0

    df = pairs_to_dataframe(store.records())
    with pl.Config(tbl_rows=args.limit, tbl_cols=-1):
        print(df.head(args.limit))
    return 0


def cmd_score_bracket(args):
    """Score a bracket JSON document."""
    bracket = BracketPayload.model_validate(_load_json(args.bracket)).to_bracket()
    scored = ServiceContainer.get_bracket_scorer().score(bracket)
    logger.log_event('bracket_scored', bracket_id=scored.bracket_id, total_score=scored.total_score)
    _print_json(scored.to_dict())
    return 0


def cmd_bracket_board(args):
    """Score a list of brackets and rank them."""
    scorer = ServiceContainer.get_bracket_scorer()
    brackets = [scorer.score(BracketPayload.model_validate(b).to_bracket()) for b in _load_json(args.brackets)]
    users = {int(k): v for k, v in _load_json(args.users).items()} if args.users else {}
    limit = args.limit or ServiceContainer.get_settings().leaderboard.bracket_board_limit

    board = ServiceContainer.get_leaderboard_aggregator().rank_brackets(
        brackets, users, tournament_id=args.tournament, limit=limit
    )
    logger.log_event('bracket_board_built', brackets=len(brackets), entries=len(board.entries))
    _print_json([asdict(e) for e in board.entries])
    return 0


def _scope_from_args(args) -> LeaderboardScope:
    timeframe = Timeframe(args.timeframe)
    if timeframe == Timeframe.SEASON:
        return season_scope(args.year or date.today().year)
    if timeframe == Timeframe.MONTH:
        return month_scope(args.year or date.today().year, args.month or date.today().month)
    if timeframe == Timeframe.TOURNAMENT:
        if args.tournament is None or args.start is None or args.end is None:
            raise TennisPicksError("Tournament leaderboards need --tournament, --start and --end")
        return tournament_scope(args.tournament, date.fromisoformat(args.start), date.fromisoformat(args.end))
    return all_time_scope()


def cmd_leaderboard(args):
    """Build a leaderboard from raw predictions."""
    predictions = [RawPredictionRecord.model_validate(p).to_prediction() for p in _load_json(args.predictions)]
    users = {int(k): v for k, v in _load_json(args.users).items()} if args.users else {}
    results = None
    if args.results:
        events = [MatchResolutionEvent.model_validate(e) for e in _load_json(args.results)]
        results = {e.match_id: e.to_result() for e in events}

    scope = _scope_from_args(args)
    board = ServiceContainer.get_leaderboard_aggregator().build(scope, predictions, users, results)
    logger.log_event('leaderboard_built', timeframe=scope.timeframe.value, entries=len(board.entries))

    if args.json:
        _print_json([asdict(e) for e in board.top(args.limit)])
        return 0

    print(f"\n=== {scope.timeframe.value.upper()} LEADERBOARD ({scope.start_date} - {scope.end_date}) ===\n")
    if not board.entries:
        print("No predictions in scope.")
        return 0
    for entry in board.top(args.limit):
        print(
            f"#{entry.rank:<3} {entry.display_name:<20} {entry.points:>6} pts  "
            f"{entry.correct_predictions}/{entry.predictions_made} ({entry.accuracy_percentage:.2f}%)"
        )
    return 0


def main():
    parser = argparse.ArgumentParser(description="Tennis Picks scoring engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    h2h = subparsers.add_parser("h2h", help="Replay match events into head-to-head records")
    h2h.add_argument("events", help="JSON file with a list of match resolution events")
    h2h.add_argument("--pair", type=int, nargs=2, metavar=("A", "B"))
    h2h.add_argument("--limit", type=int, default=20)
    h2h.set_defaults(func=cmd_h2h)

    score = subparsers.add_parser("score-bracket", help="Score a bracket")
    score.add_argument("bracket", help="JSON file with one bracket")
    score.set_defaults(func=cmd_score_bracket)

    bracket_board = subparsers.add_parser("bracket-board", help="Rank scored brackets")
    bracket_board.add_argument("brackets", help="JSON file with a list of brackets")
    bracket_board.add_argument("--users", help="JSON object mapping user_id to display name")
    bracket_board.add_argument("--tournament", type=int)
    bracket_board.add_argument("--limit", type=int, help="Defaults to LEADERBOARD_BRACKET_BOARD_LIMIT")
    bracket_board.set_defaults(func=cmd_bracket_board)

    board = subparsers.add_parser("leaderboard", help="Build prediction standings")
    board.add_argument("predictions", help="JSON file with raw prediction records")
    board.add_argument("--users", help="JSON object mapping user_id to display name")
    board.add_argument("--results", help="JSON file with match resolution events")
    board.add_argument("--timeframe", choices=[t.value for t in Timeframe], default=Timeframe.SEASON.value)
    board.add_argument("--year", type=int)
    board.add_argument("--month", type=int)
    board.add_argument("--tournament", type=int)
    board.add_argument("--start", help="YYYY-MM-DD")
    board.add_argument("--end", help="YYYY-MM-DD")
    board.add_argument("--limit", type=int, default=25)
    board.add_argument("--json", action="store_true")
    board.set_defaults(func=cmd_leaderboard)

    args = parser.parse_args()

    setup_logging("tennis_picks", observability=settings.observability)
    initialize_observability(settings.observability)
    logger.with_correlation_id(str(uuid.uuid4()))

    try:
        return args.func(args)
    except (TennisPicksError, pydantic.ValidationError, ValueError) as e:
        logger.log_error('command_failed', command=args.command, error=str(e))
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
