"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, StrictInt
from typing import Optional
from datetime import datetime


# Match setup
class PlayerIn(BaseModel):
    id: StrictInt
    name: str
    role: str = "batter"


class CreateMatchRequest(BaseModel):
    team1_name: str
    team2_name: str
    team1_players: list[PlayerIn]
    team2_players: list[PlayerIn]
    overs: Optional[StrictInt] = None  # falls back to DEFAULT_OVERS
    toss_winner: str
    toss_decision: str  # "bat" or "bowl"
    venue: Optional[str] = None


class StartMatchRequest(BaseModel):
    striker_id: StrictInt
    non_striker_id: StrictInt
    bowler_id: StrictInt
    expected_version: int


# Scoring
class CommandRequest(BaseModel):
    type: str  # runs, wicket, extra, change_bowler, change_batter, swap_batters, end_innings, end_match
    expected_version: int

    # strict: "4", true and 2.0 are rejected as run values and ids
    runs: Optional[StrictInt] = None
    dismissal: Optional[str] = None
    fielder_ids: list[StrictInt] = []
    dismissed_id: Optional[StrictInt] = None
    kind: Optional[str] = None
    player_id: Optional[StrictInt] = None
    hand: Optional[str] = None
    style: Optional[str] = None

    def to_command_dict(self) -> dict:
        return self.model_dump(exclude={"expected_version"}, exclude_none=True)


# Responses
class MatchSummaryResponse(BaseModel):
    id: int
    team1_name: str
    team2_name: str
    venue: Optional[str] = None
    status: str
    version: int
    result_summary: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class MatchStateResponse(BaseModel):
    id: int
    version: int
    status: str
    score: str
    overs: str
    run_rate: float
    required_rate: Optional[float] = None
    target: Optional[int] = None
    is_free_hit: bool
    awaiting_bowler_change: bool
    awaiting_new_batter: bool
    result_summary: Optional[str] = None
    state: dict


class CommandResponse(BaseModel):
    ok: bool
    version: int
    deltas: list[dict]
    commentary: list[dict]
    match_state: MatchStateResponse


class CommentaryItem(BaseModel):
    innings: int
    over: Optional[int] = None
    ball: Optional[int] = None
    text: str
    is_ball_event: bool
