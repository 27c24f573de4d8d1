"""
Innings boundaries: end detection, the first-to-second innings swap and the match result.
"""
import dataclasses
import logging
from typing import Optional

from scorebook.engine.state import MatchState, MatchStatus, MatchResult
from scorebook.engine.transition import Transition

logger = logging.getLogger(__name__)

TARGET_REACHED = "target_reached"
ALL_OUT = "all_out"
OVERS_COMPLETE = "overs_complete"
CALLED = "called"


def required_run_rate(target: int, runs: int, balls_remaining: int) -> float:
    if balls_remaining <= 0:
        return 0.0
    return (max(0, target - runs) / balls_remaining) * 6


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


class InningsController:
    """Decides when an innings is over and moves the match on"""

    @staticmethod
    def innings_end_reason(state: MatchState) -> Optional[str]:
        innings = state.current_innings
        if state.innings == 2 and state.target is not None and innings.runs >= state.target:
            return TARGET_REACHED
        if innings.wickets >= state.max_wickets:
            return ALL_OUT
        if innings.legal_balls >= state.format.max_balls:
            return OVERS_COMPLETE
        return None

    @staticmethod
    def update_run_rates(state: MatchState):
        innings = state.current_innings
        state.current_run_rate = round(innings.run_rate, 2)
        if state.innings == 2 and state.target is not None:
            state.required_run_rate = round(
                required_run_rate(state.target, innings.runs, state.balls_remaining), 2
            )

    def end_innings(self, t: Transition, reason: str):
        if t.state.innings == 1:
            self._start_innings_break(t, reason)
        else:
            self._complete_match(t, self.compute_result(t.state))

    def abandon(self, t: Transition):
        """Match called off before the chase could be decided"""
        self._complete_match(t, MatchResult(winner=None, margin_type="no_result", summary="No result"))

    def _start_innings_break(self, t: Transition, reason: str):
        state = t.state
        first = state.current_innings
        target = first.runs + 1

        t.say(f"End of first innings. {first.batting_team}: {first.runs}/{first.wickets}. Target: {target} runs")

        state.target = target
        state.innings = 2
        state.batting_team, state.bowling_team = state.bowling_team, state.batting_team
        state.over = 0
        state.ball = 0
        state.striker = None
        state.non_striker = None
        state.bowler = None
        state.bowler_hand = None
        state.bowler_style = None
        state.is_free_hit = False
        state.awaiting_bowler_change = False
        state.awaiting_new_batter = False
        state.status = MatchStatus.INNINGS_BREAK
        self.update_run_rates(state)

        t.say(f"Second innings begins. {state.batting_team} needs {target} runs to win.")
        logger.info(
            "Innings 1 closed (%s): %s %d/%d in %s overs, target %d",
            reason, first.batting_team, first.runs, first.wickets, first.overs_display, target,
        )

    def _complete_match(self, t: Transition, result: MatchResult):
        state = t.state
        state.status = MatchStatus.COMPLETED
        state.result = dataclasses.replace(result, player_of_match=state.ledger.player_of_match())
        state.is_free_hit = False
        state.awaiting_bowler_change = False
        state.awaiting_new_batter = False

        t.say(f"Match completed! {result.summary}")
        logger.info("Match completed: %s", result.summary)

    @staticmethod
    def compute_result(state: MatchState) -> MatchResult:
        if state.innings == 1 or state.target is None:
            return MatchResult(winner=None, margin_type="no_result", summary="No result")

        first, second = state.per_innings
        target = state.target

        if second.runs >= target:
            roster = state.format.roster_for(second.batting_team)
            margin = max(1, len(roster) - 1) - second.wickets
            return MatchResult(
                winner=second.batting_team,
                margin=margin,
                margin_type="wickets",
                summary=f"{second.batting_team} won by {_plural(margin, 'wicket')}",
            )
        if second.runs < target - 1:
            margin = (target - 1) - second.runs
            return MatchResult(
                winner=first.batting_team,
                margin=margin,
                margin_type="runs",
                summary=f"{first.batting_team} won by {_plural(margin, 'run')}",
            )
        return MatchResult(winner=None, margin_type="tie", summary="Match tied")
