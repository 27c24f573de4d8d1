from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from scorebook.config import settings
from scorebook.database import get_db
from scorebook.engine import create_match, decide_toss, snapshot, scorecard
from scorebook.engine.commands import command_from_dict
from scorebook.engine.errors import ScoringError, ConcurrentModification, MatchNotFound
from scorebook.engine.state import MatchFormat, MatchState, Player, PlayerRole
from scorebook.models.live_match import LiveMatch
from scorebook.store import MatchStore
from scorebook.api.schemas import (
    CreateMatchRequest, StartMatchRequest, CommandRequest,
    MatchSummaryResponse, MatchStateResponse, CommandResponse, CommentaryItem,
)

router = APIRouter(prefix="/matches", tags=["Live Scoring"])


def _http_error(err: ScoringError) -> HTTPException:
    if isinstance(err, MatchNotFound):
        return HTTPException(status_code=404, detail=err.to_dict())
    if isinstance(err, ConcurrentModification):
        return HTTPException(status_code=409, detail=err.to_dict())
    return HTTPException(status_code=400, detail=err.to_dict())


def _to_player(p) -> Player:
    try:
        role = PlayerRole(p.role)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown player role: {p.role}")
    return Player(id=p.id, name=p.name, role=role)


def _state_response(match_id: int, version: int, state: MatchState) -> MatchStateResponse:
    innings = state.current_innings
    return MatchStateResponse(
        id=match_id,
        version=version,
        status=state.status.value,
        score=f"{innings.runs}/{innings.wickets}",
        overs=innings.overs_display,
        run_rate=state.current_run_rate,
        required_rate=state.required_run_rate,
        target=state.target,
        is_free_hit=state.is_free_hit,
        awaiting_bowler_change=state.awaiting_bowler_change,
        awaiting_new_batter=state.awaiting_new_batter,
        result_summary=state.result.summary if state.result else None,
        state=snapshot(state),
    )


@router.post("")
def create_live_match(request: CreateMatchRequest, db: Session = Depends(get_db)):
    """Create a match from a fixture's rosters and toss"""
    match_format = MatchFormat(
        overs_per_innings=settings.DEFAULT_OVERS if request.overs is None else request.overs,
        team1_name=request.team1_name,
        team2_name=request.team2_name,
        team1_roster=tuple(_to_player(p) for p in request.team1_players),
        team2_roster=tuple(_to_player(p) for p in request.team2_players),
    )
    try:
        toss = decide_toss(match_format, request.toss_winner, request.toss_decision)
        state = create_match(match_format, toss)
    except ScoringError as e:
        raise _http_error(e)

    row = MatchStore(db).create(state, venue=request.venue)
    return _state_response(row.id, row.version, state)


@router.get("", response_model=list[MatchSummaryResponse])
def list_live_matches(db: Session = Depends(get_db)):
    rows = db.query(LiveMatch).order_by(LiveMatch.updated_at.desc()).all()
    return [
        MatchSummaryResponse(
            id=row.id,
            team1_name=row.team1_name,
            team2_name=row.team2_name,
            venue=row.venue,
            status=row.status.value,
            version=row.version,
            result_summary=row.result_summary,
            updated_at=row.updated_at,
        )
        for row in rows
    ]


@router.get("/{match_id}")
def get_live_match(match_id: int, db: Session = Depends(get_db)):
    try:
        state, version = MatchStore(db).load(match_id)
    except ScoringError as e:
        raise _http_error(e)
    return _state_response(match_id, version, state)


@router.post("/{match_id}/start")
def start_live_match(match_id: int, request: StartMatchRequest, db: Session = Depends(get_db)):
    """Select openers and the opening bowler; the match goes live"""
    store = MatchStore(db)
    try:
        result, version = store.start(
            match_id,
            (request.striker_id, request.non_striker_id),
            request.bowler_id,
            request.expected_version,
        )
    except ScoringError as e:
        raise _http_error(e)
    if not result.ok:
        raise _http_error(result.error)

    return CommandResponse(
        ok=True,
        version=version,
        deltas=[d.to_dict() for d in result.deltas],
        commentary=[c.to_dict() for c in result.commentary],
        match_state=_state_response(match_id, version, result.state),
    )


@router.post("/{match_id}/commands")
def apply_scoring_command(match_id: int, request: CommandRequest, db: Session = Depends(get_db)):
    """Apply one scoring command against the version the scorer last saw"""
    store = MatchStore(db)
    try:
        cmd = command_from_dict(request.to_command_dict())
        result, version = store.apply_command(match_id, cmd, request.expected_version)
    except ScoringError as e:
        raise _http_error(e)
    if not result.ok:
        raise _http_error(result.error)

    return CommandResponse(
        ok=True,
        version=version,
        deltas=[d.to_dict() for d in result.deltas],
        commentary=[c.to_dict() for c in result.commentary],
        match_state=_state_response(match_id, version, result.state),
    )


@router.get("/{match_id}/scorecard")
def get_scorecard(match_id: int, db: Session = Depends(get_db)):
    try:
        state, _ = MatchStore(db).load(match_id)
    except ScoringError as e:
        raise _http_error(e)
    return scorecard(state)


@router.get("/{match_id}/commentary", response_model=list[CommentaryItem])
def get_commentary(match_id: int, limit: int = 50, db: Session = Depends(get_db)):
    """Newest first"""
    try:
        state, _ = MatchStore(db).load(match_id)
    except ScoringError as e:
        raise _http_error(e)
    return [CommentaryItem(**c.to_dict()) for c in state.commentary_feed[:limit]]
