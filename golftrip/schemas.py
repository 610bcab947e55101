from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .fines import get_fine_type


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------------
# ---------------------------------- Players -------------------------------------
# ---------------------------------------------------------------------------------

class PlayerCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    handicap: Optional[float] = Field(default=None, allow_inf_nan=False)
    team_id: Optional[int] = None


class PlayerUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    handicap: Optional[float] = Field(default=None, allow_inf_nan=False)
    team_id: Optional[int] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_null(cls, v):
        if v is None:
            raise ValueError("a player name cannot be cleared")
        return v


class PlayerRead(ORMModel):
    id: int
    first_name: str
    last_name: str
    handicap: Optional[float] = None
    team_id: Optional[int] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------------
# ----------------------------------- Teams --------------------------------------
# ---------------------------------------------------------------------------------

class TeamCreate(BaseModel):
    name: str = Field(min_length=1)
    captain_id: Optional[int] = None
    logo_url: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    captain_id: Optional[int] = None
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("a team name cannot be cleared")
        return v


class TeamRead(ORMModel):
    id: int
    name: str
    captain_id: Optional[int] = None
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------------
# ---------------------------------- Courses -------------------------------------
# ---------------------------------------------------------------------------------

class HoleCreate(BaseModel):
    number: int = Field(ge=1, le=18)
    par: int = Field(ge=3, le=5)
    stroke_index: int = Field(ge=1, le=18)
    yardage: Optional[int] = Field(default=None, ge=0)


class HoleRead(ORMModel):
    number: int
    par: int
    stroke_index: int
    yardage: Optional[int] = None


def check_hole_set(holes: List[HoleCreate]) -> List[HoleCreate]:
    numbers = sorted(h.number for h in holes)
    if numbers != list(range(1, 19)):
        raise ValueError("a course needs exactly holes 1 to 18")
    indices = sorted(h.stroke_index for h in holes)
    if indices != list(range(1, 19)):
        raise ValueError("stroke indices must use each value 1 to 18 exactly once")
    return sorted(holes, key=lambda h: h.number)


class HoleSet(BaseModel):
    holes: List[HoleCreate]

    @field_validator("holes")
    @classmethod
    def full_course(cls, v):
        return check_hole_set(v)


class CourseCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    holes: Optional[List[HoleCreate]] = None

    @field_validator("holes")
    @classmethod
    def full_course(cls, v):
        if v is None:
            return v
        return check_hole_set(v)


class CourseRead(ORMModel):
    id: int
    name: str
    par_total: int
    description: Optional[str] = None
    holes: List[HoleRead] = []


# ---------------------------------------------------------------------------------
# ---------------------------------- Rounds --------------------------------------
# ---------------------------------------------------------------------------------

class RoundCreate(BaseModel):
    course_id: int
    date: date
    format: Literal["stroke", "betterball"] = "stroke"
    day: Optional[int] = Field(default=None, ge=1, le=3)
    players: List[str] = []


class RoundRead(ORMModel):
    id: int
    course_id: int
    date: date
    format: str
    day: Optional[int] = None
    players: List[str] = []
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------------
# ---------------------------------- Scores --------------------------------------
# ---------------------------------------------------------------------------------

class ScoreCreate(BaseModel):
    round_id: int
    player_id: int
    hole: int = Field(ge=1, le=18)
    gross: int = Field(ge=1)
    three_putt: bool = False
    picked_up: bool = False
    in_water: bool = False
    in_bunker: bool = False


class ScoreUpdate(BaseModel):
    gross: Optional[int] = Field(default=None, ge=1)
    three_putt: Optional[bool] = None
    picked_up: Optional[bool] = None
    in_water: Optional[bool] = None
    in_bunker: Optional[bool] = None


class ScoreRead(ORMModel):
    id: int
    round_id: int
    player_id: int
    hole: int
    gross: int
    three_putt: bool
    picked_up: bool
    in_water: bool
    in_bunker: bool
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------------
# ---------------------------------- Matches -------------------------------------
# ---------------------------------------------------------------------------------

class MatchCreate(BaseModel):
    round_id: int
    team_a_id: int
    team_b_id: int
    pair_a_player1_id: int
    pair_a_player2_id: int
    pair_b_player1_id: int
    pair_b_player2_id: int
    format: Literal["fourball"] = "fourball"

    @model_validator(mode="after")
    def distinct_sides(self):
        if self.team_a_id == self.team_b_id:
            raise ValueError("a match needs two different teams")
        ids = {
            self.pair_a_player1_id,
            self.pair_a_player2_id,
            self.pair_b_player1_id,
            self.pair_b_player2_id,
        }
        if len(ids) != 4:
            raise ValueError("a fourball match needs four different players")
        return self


class MatchUpdate(BaseModel):
    pair_a_player1_id: Optional[int] = None
    pair_a_player2_id: Optional[int] = None
    pair_b_player1_id: Optional[int] = None
    pair_b_player2_id: Optional[int] = None


class MatchRead(ORMModel):
    id: int
    round_id: int
    team_a_id: int
    team_b_id: int
    pair_a_player1_id: int
    pair_a_player2_id: int
    pair_b_player1_id: int
    pair_b_player2_id: int
    format: str
    status: str


class IndividualMatchCreate(BaseModel):
    round_id: int
    player_a_id: int
    player_b_id: int

    @model_validator(mode="after")
    def distinct_players(self):
        if self.player_a_id == self.player_b_id:
            raise ValueError("a player cannot play against themselves")
        return self


class IndividualMatchRead(ORMModel):
    id: int
    round_id: int
    player_a_id: int
    player_b_id: int
    status: str


class MatchStatusRead(ORMModel):
    match_id: int
    label: str
    leader: Literal["A", "B", "TIE"]
    a_won: int
    b_won: int
    holes_played: int
    a_points: int
    b_points: int


# ---------------------------------------------------------------------------------
# ------------------------------- Fines & votes ----------------------------------
# ---------------------------------------------------------------------------------

class FineTypeRead(ORMModel):
    type: str
    name: str
    amount: int
    description: str


class FineCreate(BaseModel):
    player_id: int
    type: str
    amount: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None

    @field_validator("type")
    @classmethod
    def known_type(cls, v):
        if get_fine_type(v) is None:
            raise ValueError(f"unknown fine type {v!r}")
        return v


class FineRead(ORMModel):
    id: int
    player_id: int
    type: str
    amount: int
    description: Optional[str] = None
    created_at: datetime


class VoteCast(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    activity: str = Field(min_length=1)


class VoteRead(ORMModel):
    id: int
    activity: str
    count: int


# ---------------------------------------------------------------------------------
# ------------------------------- Leaderboards -----------------------------------
# ---------------------------------------------------------------------------------

class LeaderboardRow(BaseModel):
    position: int
    key: int
    name: str
    total_strokes: int
    par_played: int
    to_par: int
    to_par_label: str
    holes_completed: int
    points: int
    rounds_played: int


class BetterballRow(BaseModel):
    match_id: int
    team_id: int
    player1_id: int
    player2_id: int
    points: int
    holes_played: int


class DayMatchRow(BaseModel):
    round_id: int
    match: MatchStatusRead
    team_a_id: int
    team_b_id: int


class DaySummary(BaseModel):
    day: int
    matches: List[DayMatchRow]
    individual_matches: List[MatchStatusRead]
    team_points: Dict[int, int]


class PlayerRoundStats(BaseModel):
    round_id: int
    player_id: int
    holes_completed: int
    gross_total: int
    net_total: int
    points_total: int
    par_played: int
    hole_in_one: int
    albatross: int
    eagles: int
    birdies: int
    pars: int
    bogeys: int
    double_bogeys: int
    worse: int
    three_putts: int
    picked_up: int
    in_water: int
    in_bunker: int
