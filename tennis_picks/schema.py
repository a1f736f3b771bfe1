"""
Inbound payload schemas.

Validates the three payloads the engine receives from the surrounding layers
(match resolution events, raw prediction records, bracket structures) and
converts them into engine dataclasses. Both snake_case and camelCase keys are
accepted.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tennis_picks.brackets.models import Bracket, BracketPrediction, BracketStatus, ChampionPick, round_from_label
from tennis_picks.h2h.events import MatchResolution, MatchMeta, SetGameBreakdown, SetScore
from tennis_picks.leaderboard.predictions import MatchResult, UserPrediction


class InboundModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SetScoreSchema(InboundModel):
    a_games: int = Field(ge=0)
    b_games: int = Field(ge=0)
    a_tiebreak: Optional[int] = Field(default=None, ge=0)
    b_tiebreak: Optional[int] = Field(default=None, ge=0)


class SetGameBreakdownSchema(InboundModel):
    sets: List[SetScoreSchema] = Field(default_factory=list)
    a_service_games_played: int = Field(default=0, ge=0)
    a_service_games_won: int = Field(default=0, ge=0)
    b_service_games_played: int = Field(default=0, ge=0)
    b_service_games_won: int = Field(default=0, ge=0)

    def to_breakdown(self) -> SetGameBreakdown:
        return SetGameBreakdown(
            sets=[SetScore(**s.model_dump()) for s in self.sets],
            a_service_games_played=self.a_service_games_played,
            a_service_games_won=self.a_service_games_won,
            b_service_games_played=self.b_service_games_played,
            b_service_games_won=self.b_service_games_won,
        )


class MatchResolutionEvent(InboundModel):
    """A match that has transitioned to completed."""
    match_id: int
    competitor_a: int
    competitor_b: int
    winner_id: int
    surface: str
    tier: Optional[str] = None
    match_date: date = Field(alias="date")
    tournament_name: Optional[str] = None
    round_label: Optional[str] = Field(default=None, alias="round")
    score_text: Optional[str] = None
    set_game_breakdown: Optional[SetGameBreakdownSchema] = None

    def to_resolution(self) -> MatchResolution:
        meta = MatchMeta(
            match_id=self.match_id,
            match_date=self.match_date,
            surface=self.surface,
            tier=self.tier,
            tournament_name=self.tournament_name,
            round_label=self.round_label,
            score_text=self.score_text,
            breakdown=self.set_game_breakdown.to_breakdown() if self.set_game_breakdown else None,
        )
        return MatchResolution(
            competitor_a=self.competitor_a,
            competitor_b=self.competitor_b,
            winner_id=self.winner_id,
            meta=meta,
        )

    def to_result(self) -> MatchResult:
        return MatchResult(match_id=self.match_id, winner_id=self.winner_id, score=self.score_text)


class RawPredictionRecord(InboundModel):
    """An individual prediction as persisted by the prediction layer."""
    prediction_id: int
    user_id: int
    match_id: int
    predicted_winner_id: int
    predicted_score: Optional[str] = None
    confidence_level: int = Field(default=5, ge=1, le=10)
    prediction_date: datetime
    is_public: bool = True
    tournament_id: Optional[int] = None
    actual_winner_id: Optional[int] = None
    actual_score: Optional[str] = None

    def to_prediction(self) -> UserPrediction:
        return UserPrediction(
            prediction_id=self.prediction_id,
            user_id=self.user_id,
            match_id=self.match_id,
            predicted_winner_id=self.predicted_winner_id,
            prediction_date=self.prediction_date,
            tournament_id=self.tournament_id,
            predicted_score=self.predicted_score,
            confidence_level=self.confidence_level,
            is_public=self.is_public,
            actual_winner_id=self.actual_winner_id,
            actual_score=self.actual_score,
        )


class BracketPredictionSchema(InboundModel):
    match_position: int
    round: int = Field(ge=1)
    predicted_winner_id: int
    predicted_score: Optional[str] = None
    match_id: Optional[int] = None
    actual_winner_id: Optional[int] = None
    actual_score: Optional[str] = None

    @field_validator("round", mode="before")
    @classmethod
    def round_label_to_number(cls, v):
        # "Quarterfinal" -> 3; numeric strings are left to int coercion
        if isinstance(v, str) and not v.strip().isdigit():
            return round_from_label(v)
        return v


class ChampionPickSchema(InboundModel):
    predicted_champion_id: Optional[int] = None
    actual_champion_id: Optional[int] = None


class BracketPayload(InboundModel):
    """A bracket as stored by the bracket layer. Derived fields are ignored."""
    bracket_id: str
    user_id: int
    tournament_id: int
    name: str = ""
    status: BracketStatus = BracketStatus.DRAFT
    is_public: bool = True
    predictions: List[BracketPredictionSchema] = Field(default_factory=list)
    champion_pick: ChampionPickSchema = Field(default_factory=ChampionPickSchema)

    def to_bracket(self) -> Bracket:
        return Bracket(
            bracket_id=self.bracket_id,
            user_id=self.user_id,
            tournament_id=self.tournament_id,
            name=self.name,
            status=self.status,
            is_public=self.is_public,
            predictions=[BracketPrediction(**p.model_dump()) for p in self.predictions],
            champion=ChampionPick(**self.champion_pick.model_dump()),
        )
