"""
Ball-by-ball state transitions.

Every handler edits the working copy held by a Transition. Validation happens
before the first edit so a rejected command leaves nothing half-applied; the
state machine discards the copy on error anyway.
"""
import logging

from scorebook.engine.commands import (
    Runs, Wicket, Extra, ChangeBowler, ChangeBatter, SwapBatters, EndInnings, EndMatch,
    ExtraKind, ScoringCommand,
)
from scorebook.engine.errors import (
    InvalidCommandForState, InvalidCommandPayload, DuplicatePlayerSelection,
    RosterExhausted, UnknownPlayer,
)
from scorebook.engine.innings_controller import InningsController, CALLED
from scorebook.engine.over_tracker import BallAdvance, BALLS_PER_OVER, track_delivery
from scorebook.engine.state import MatchState, MatchStatus, DismissalType
from scorebook.engine.transition import Transition

logger = logging.getLogger(__name__)

MAX_RUNS_OFF_BAT = 6
# penalty run plus anything run or hit off a wide/no-ball
MAX_RUNS_OFF_WIDE_OR_NO_BALL = 7

# Dismissals that never credit the bowler
NOT_BOWLER_CREDITED = {DismissalType.RUN_OUT}


def _check_runs(value, lo: int, hi: int, label: str = "runs") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCommandPayload(f"{label} must be an integer, got {value!r}")
    if value < lo or value > hi:
        raise InvalidCommandPayload(f"{label} must be between {lo} and {hi}, got {value}")
    return value


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidCommandPayload(f"Unknown {label}: {value!r}") from None


def _plural_runs(n: int) -> str:
    return f"{n} run" if n == 1 else f"{n} runs"


class BallProcessor:
    """Applies one scoring command to a working copy of the match"""

    def __init__(self, innings_controller: InningsController = None):
        self.innings = innings_controller or InningsController()
        self._handlers = {
            Runs: self._runs,
            Wicket: self._wicket,
            Extra: self._extra,
            ChangeBowler: self._change_bowler,
            ChangeBatter: self._change_batter,
            SwapBatters: self._swap_batters,
            EndInnings: self._end_innings,
            EndMatch: self._end_match,
        }

    def process(self, t: Transition, cmd: ScoringCommand):
        handler = self._handlers.get(type(cmd))
        if handler is None:
            raise InvalidCommandPayload(f"Not a scoring command: {cmd!r}")
        handler(t, cmd)

    # ------------------------------------------------------------------
    # Deliveries
    # ------------------------------------------------------------------

    def _runs(self, t: Transition, cmd: Runs):
        runs = _check_runs(cmd.runs, 0, MAX_RUNS_OFF_BAT)
        state = t.state
        self._require_ball_ready(state)

        free_hit = state.is_free_hit
        striker, bowler = state.striker, state.bowler
        over_at = state.over

        state.current_innings.runs += runs
        advance = self._advance(state, is_legal=True)

        t.deltas.append(state.ledger.record_batting(
            striker, runs, ball_faced=not free_hit, is_four=runs == 4, is_six=runs == 6,
        ))
        t.deltas.append(state.ledger.record_bowling(bowler, runs, ball_bowled=not free_hit))

        self._rotate_strike(state, runs, advance)

        name = state.player_name(striker)
        if runs == 0:
            text = f"{state.player_name(bowler)} to {name}, no run"
        elif runs == 4:
            text = f"FOUR! {name} finds the boundary"
        elif runs == 6:
            text = f"SIX! {name} clears the rope"
        else:
            text = f"{_plural_runs(runs)} scored by {name}"
        if free_hit:
            text = f"Free hit: {text}"

        self._finish_delivery(t, text, over_at, advance, free_hit_next=False)

    def _wicket(self, t: Transition, cmd: Wicket):
        dismissal = _parse_enum(DismissalType, cmd.dismissal, "dismissal type")
        state = t.state
        self._require_ball_ready(state)

        free_hit = state.is_free_hit
        if free_hit and dismissal is not DismissalType.RUN_OUT:
            raise InvalidCommandForState("Only a run out can dismiss a batter on a free hit")

        out_id = cmd.dismissed_id if cmd.dismissed_id is not None else state.striker
        if out_id not in state.at_crease:
            raise InvalidCommandPayload(f"Player {out_id} is not at the crease")
        if out_id != state.striker and dismissal is not DismissalType.RUN_OUT:
            raise InvalidCommandPayload("Only a run out can dismiss the non-striker")

        fielder_ids = list(cmd.fielder_ids)
        fielding_ids = {p.id for p in state.bowling_roster}
        for fielder_id in fielder_ids:
            if fielder_id not in fielding_ids:
                raise UnknownPlayer(f"Fielder {fielder_id} is not in {state.bowling_team}")

        striker, bowler = state.striker, state.bowler
        over_at = state.over
        innings = state.current_innings
        credited = dismissal not in NOT_BOWLER_CREDITED

        innings.wickets += 1
        advance = self._advance(state, is_legal=True)

        t.deltas.append(state.ledger.record_batting(striker, 0, ball_faced=not free_hit))
        t.deltas.append(state.ledger.record_bowling(
            bowler, 0, ball_bowled=not free_hit, wicket_taken=credited,
        ))
        t.deltas.append(state.ledger.record_dismissal(
            out_id, dismissal.value, bowler_id=bowler if credited else None, fielder_ids=fielder_ids,
        ))
        state.dismissed_batters.add(out_id)

        if out_id == state.striker:
            state.striker = None
        else:
            state.non_striker = None
        if advance.over_completed:
            # ends change: the survivor faces, the new batter comes in at the other end
            state.striker, state.non_striker = state.non_striker, state.striker

        if innings.wickets < state.max_wickets:
            state.awaiting_new_batter = True

        text = f"WICKET! {state.player_name(out_id)} is out"
        if fielder_ids:
            fielders = " & ".join(state.player_name(f) for f in fielder_ids)
            if dismissal in (DismissalType.CAUGHT, DismissalType.CAUGHT_BEHIND):
                text += f" caught by {fielders}"
            elif dismissal is DismissalType.RUN_OUT:
                text += f" run out by {fielders}"
            elif dismissal is DismissalType.STUMPED:
                text += f" stumped by {fielders}"
        text += f" ({dismissal.value})"

        self._finish_delivery(t, text, over_at, advance, free_hit_next=False)

    def _extra(self, t: Transition, cmd: Extra):
        kind = _parse_enum(ExtraKind, cmd.kind, "extra kind")
        if kind.is_legal_delivery:
            runs = _check_runs(cmd.runs, 1, MAX_RUNS_OFF_BAT)
        else:
            runs = _check_runs(cmd.runs, 1, MAX_RUNS_OFF_WIDE_OR_NO_BALL)
        state = t.state
        self._require_ball_ready(state)

        free_hit = state.is_free_hit
        striker, bowler = state.striker, state.bowler
        over_at = state.over
        innings = state.current_innings
        innings.runs += runs
        extra_text = f"{runs} extra run" if runs == 1 else f"{runs} extra runs"

        if kind is ExtraKind.WIDE:
            innings.wides += runs
            advance = BallAdvance(new_over=state.over, new_ball=state.ball)
            t.deltas.append(state.ledger.record_bowling(bowler, runs, ball_bowled=False, is_wide=True))
            # a free hit carries over a wide
            free_hit_next = free_hit
            text = f"Wide ball! {extra_text}"
        elif kind is ExtraKind.NO_BALL:
            innings.no_balls += runs
            advance = BallAdvance(new_over=state.over, new_ball=state.ball)
            t.deltas.append(state.ledger.record_bowling(bowler, runs, ball_bowled=False, is_no_ball=True))
            free_hit_next = True
            text = f"No Ball! Free hit coming up. {extra_text}"
        else:
            if kind is ExtraKind.BYE:
                innings.byes += runs
                text = f"Bye! {extra_text}"
            else:
                innings.leg_byes += runs
                text = f"Leg bye! {extra_text}"
            advance = self._advance(state, is_legal=True)
            t.deltas.append(state.ledger.record_batting(striker, 0, ball_faced=not free_hit))
            t.deltas.append(state.ledger.record_bowling(bowler, 0, ball_bowled=not free_hit))
            self._rotate_strike(state, runs, advance)
            free_hit_next = False

        self._finish_delivery(t, text, over_at, advance, free_hit_next=free_hit_next)

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def _change_bowler(self, t: Transition, cmd: ChangeBowler):
        state = t.state
        if cmd.player_id not in {p.id for p in state.bowling_roster}:
            raise UnknownPlayer(f"Bowler {cmd.player_id} is not in {state.bowling_team}")

        if state.bowler is not None and state.bowler != cmd.player_id:
            state.ledger.break_over(state.bowler)

        state.bowler = cmd.player_id
        state.bowler_hand = cmd.hand
        state.bowler_style = cmd.style
        state.awaiting_bowler_change = False

        if state.status is MatchStatus.LIVE:
            t.say(f"{state.player_name(cmd.player_id)} comes on to bowl")
        self._maybe_resume(t)

    def _change_batter(self, t: Transition, cmd: ChangeBatter):
        state = t.state
        if state.status is MatchStatus.LIVE and not state.awaiting_new_batter:
            raise InvalidCommandForState("No batter is needed right now")
        if state.striker is not None and state.non_striker is not None:
            raise InvalidCommandForState("Both batters are already at the crease")

        eligible = [
            p.id for p in state.batting_roster
            if p.id not in state.dismissed_batters and p.id not in state.at_crease
        ]
        if not eligible:
            raise RosterExhausted(f"{state.batting_team} has no batters left")
        if cmd.player_id not in {p.id for p in state.batting_roster}:
            raise UnknownPlayer(f"Batter {cmd.player_id} is not in {state.batting_team}")
        if cmd.player_id in state.dismissed_batters:
            raise DuplicatePlayerSelection(f"{state.player_name(cmd.player_id)} has already been dismissed")
        if cmd.player_id in state.at_crease:
            raise DuplicatePlayerSelection(f"{state.player_name(cmd.player_id)} is already at the crease")

        if state.striker is None:
            state.striker = cmd.player_id
        else:
            state.non_striker = cmd.player_id
        state.ledger.batter(cmd.player_id)

        if state.status is MatchStatus.LIVE:
            state.awaiting_new_batter = False
            t.say(f"{state.player_name(cmd.player_id)} comes to the crease")
        self._maybe_resume(t)

    def _swap_batters(self, t: Transition, cmd: SwapBatters):
        state = t.state
        if state.striker is None or state.non_striker is None:
            raise InvalidCommandForState("Both batters must be at the crease to swap")
        state.striker, state.non_striker = state.non_striker, state.striker
        t.say("Batters have crossed over")

    def _end_innings(self, t: Transition, cmd: EndInnings):
        self.innings.end_innings(t, CALLED)

    def _end_match(self, t: Transition, cmd: EndMatch):
        if t.state.status is MatchStatus.LIVE and t.state.innings == 2:
            self.innings.end_innings(t, CALLED)
        else:
            self.innings.abandon(t)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_ball_ready(state: MatchState):
        if state.awaiting_bowler_change:
            raise InvalidCommandForState("A new bowler must be selected before the next ball")
        if state.awaiting_new_batter:
            raise InvalidCommandForState("A new batter must come in before the next ball")
        if state.striker is None or state.non_striker is None or state.bowler is None:
            raise InvalidCommandForState("Striker, non-striker and bowler must all be selected")

    @staticmethod
    def _advance(state: MatchState, is_legal: bool) -> BallAdvance:
        advance = track_delivery(state.over, state.ball, is_free_hit=state.is_free_hit, is_legal=is_legal)
        state.over, state.ball = advance.new_over, advance.new_ball
        innings = state.current_innings
        innings.overs, innings.balls = advance.new_over, advance.new_ball
        return advance

    @staticmethod
    def _rotate_strike(state: MatchState, runs: int, advance: BallAdvance):
        # at the end of an over only the change of ends applies
        if advance.over_completed or runs % 2 == 1:
            state.striker, state.non_striker = state.non_striker, state.striker

    def _finish_delivery(self, t: Transition, text: str, over_at: int, advance: BallAdvance, free_hit_next: bool):
        state = t.state
        ball_no = BALLS_PER_OVER if advance.over_completed else advance.new_ball
        if advance.over_completed:
            maiden = state.ledger.complete_over(state.bowler)
            if maiden:
                t.deltas.append(maiden)
        t.say(text, is_ball_event=True, over=over_at, ball=ball_no)

        state.is_free_hit = free_hit_next
        self.innings.update_run_rates(state)

        reason = self.innings.innings_end_reason(state)
        if reason:
            self.innings.end_innings(t, reason)
            return

        if advance.over_completed:
            state.awaiting_bowler_change = True
            on_strike = state.player_name(state.striker) if state.striker is not None else "New batter"
            t.say(f"End of over {advance.new_over}. {on_strike} on strike. Bowler change required.")

    def _maybe_resume(self, t: Transition):
        state = t.state
        if state.status is not MatchStatus.INNINGS_BREAK:
            return
        if state.striker is None or state.non_striker is None or state.bowler is None:
            return
        state.status = MatchStatus.LIVE
        t.say(
            f"{state.player_name(state.striker)} and {state.player_name(state.non_striker)} "
            f"come out to bat. {state.player_name(state.bowler)} to bowl."
        )
        logger.info("Innings 2 under way: %s batting", state.batting_team)
