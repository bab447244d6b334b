from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import MatchStatus, Side


def _clean_name(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError("name must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("name must not be empty")
    return trimmed


class PlayerCreate(BaseModel):
    name: str = Field(..., max_length=100)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _clean_name(value)


class PlayerOut(BaseModel):
    id: str
    name: str
    position: Optional[Side] = None
    busy: bool
    team_id: Optional[str] = None
    slot: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class TeamCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    players: List[str] = Field(..., min_length=2, max_length=2)

    model_config = ConfigDict(extra="forbid")

    @field_validator("players")
    @classmethod
    def _validate_players(cls, value: List[str]) -> List[str]:
        return [_clean_name(v) for v in value]


class TeamOut(BaseModel):
    id: str
    name: Optional[str] = None
    players: List[PlayerOut]

    model_config = ConfigDict(from_attributes=True)


class SetOut(BaseModel):
    id: str
    match_id: str
    number: int
    points_a: int
    points_b: int

    model_config = ConfigDict(from_attributes=True)


class MatchStart(BaseModel):
    team_a_id: str
    team_b_id: str
    serve_team_is_a: bool = True
    start_side: Side = Side.RIGHT

    model_config = ConfigDict(extra="forbid")


class MatchOut(BaseModel):
    id: str
    match_date: date
    teams: List[TeamOut]
    sets: List[SetOut]
    serving_team_id: Optional[str] = None
    winning_team_id: Optional[str] = None
    serve_side: Optional[Side] = None
    status: MatchStatus
    break_recommended: bool


class BreakRecommendation(BaseModel):
    match_id: str
    break_recommended: bool
