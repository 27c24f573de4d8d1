"""
Read-only views derived from a MatchState.
"""
from scorebook.engine.state import MatchState


def _batting_rows(state: MatchState, team: str) -> list:
    rows = []
    for player in state.format.roster_for(team):
        stat = state.ledger.batting.get(player.id)
        if stat is None:
            continue
        if stat.is_out:
            dismissal = stat.dismissal
            if stat.bowler_id is not None:
                dismissal += f" b {state.player_name(stat.bowler_id)}"
        else:
            dismissal = "not out"
        rows.append({
            "player_id": player.id,
            "name": player.name,
            "dismissal": dismissal,
            "runs": stat.runs,
            "balls": stat.balls,
            "fours": stat.fours,
            "sixes": stat.sixes,
            "strike_rate": round(stat.strike_rate, 2),
        })
    return rows


def _bowling_rows(state: MatchState, team: str) -> list:
    rows = []
    for player in state.format.roster_for(team):
        stat = state.ledger.bowling.get(player.id)
        if stat is None:
            continue
        rows.append({
            "player_id": player.id,
            "name": player.name,
            "overs": stat.overs_display,
            "maidens": stat.maidens,
            "runs": stat.runs_conceded,
            "wickets": stat.wickets,
            "wides": stat.wides,
            "no_balls": stat.no_balls,
            "economy": round(stat.economy, 2),
        })
    return rows


def _player_of_match(state: MatchState):
    if state.result is None or state.result.player_of_match is None:
        return None
    player_id = state.result.player_of_match
    return {"player_id": player_id, "name": state.player_name(player_id)}


def scorecard(state: MatchState) -> dict:
    """Full scorecard; also the hand-off record for season stat aggregation"""
    innings = []
    for number, score in enumerate(state.per_innings, start=1):
        if number > state.innings:
            break
        innings.append({
            "innings": number,
            "batting_team": score.batting_team,
            "bowling_team": score.bowling_team,
            "runs": score.runs,
            "wickets": score.wickets,
            "overs": score.overs_display,
            "run_rate": round(score.run_rate, 2),
            "extras": {
                "total": score.extras,
                "wides": score.wides,
                "no_balls": score.no_balls,
                "byes": score.byes,
                "leg_byes": score.leg_byes,
            },
            "batting": _batting_rows(state, score.batting_team),
            "bowling": _bowling_rows(state, score.bowling_team),
        })

    return {
        "status": state.status.value,
        "team1": state.format.team1_name,
        "team2": state.format.team2_name,
        "toss": state.toss.to_dict(),
        "target": state.target,
        "result": state.result.to_dict() if state.result else None,
        "player_of_match": _player_of_match(state),
        "innings": innings,
    }
