"""
Leaderboard scopes: which predictions a standings table covers.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .predictions import UserPrediction
from tennis_picks.exceptions import ValidationError


class Timeframe(str, Enum):
    TOURNAMENT = "Tournament"
    MONTH = "Month"
    SEASON = "Season"
    ALL_TIME = "All-time"


@dataclass(frozen=True)
class LeaderboardScope:
    """Inclusive date window, optionally narrowed to one tournament."""
    timeframe: Timeframe
    start_date: date
    end_date: date
    tournament_id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "timeframe", Timeframe(self.timeframe))
        if self.start_date > self.end_date:
            raise ValidationError(
                f"Scope starts after it ends: {self.start_date} > {self.end_date}"
            )
        if self.timeframe == Timeframe.TOURNAMENT and self.tournament_id is None:
            raise ValidationError("Tournament leaderboards need a tournament_id")

    def contains(self, prediction: UserPrediction) -> bool:
        if not self.start_date <= prediction.prediction_day <= self.end_date:
            return False
        if self.tournament_id is not None and prediction.tournament_id != self.tournament_id:
            return False
        return True


def season_scope(year: int) -> LeaderboardScope:
    return LeaderboardScope(Timeframe.SEASON, date(year, 1, 1), date(year, 12, 31))


def month_scope(year: int, month: int) -> LeaderboardScope:
    last_day = calendar.monthrange(year, month)[1]
    return LeaderboardScope(Timeframe.MONTH, date(year, month, 1), date(year, month, last_day))


def tournament_scope(tournament_id: int, start_date: date, end_date: date) -> LeaderboardScope:
    return LeaderboardScope(Timeframe.TOURNAMENT, start_date, end_date, tournament_id=tournament_id)


def all_time_scope() -> LeaderboardScope:
    return LeaderboardScope(Timeframe.ALL_TIME, date.min, date.max)
