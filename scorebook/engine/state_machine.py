"""
Match lifecycle and the public engine entry points.

NotStarted -> Live -> InningsBreak -> Live -> Completed. Completed is terminal.
"""
import copy
import logging
from typing import Tuple, Union

from scorebook.engine.ball_processor import BallProcessor
from scorebook.engine.commands import (
    ChangeBowler, ChangeBatter, SwapBatters, EndMatch, ScoringCommand, COMMAND_TYPES,
)
from scorebook.engine.errors import (
    ScoringError, InvalidCommandForState, InvalidCommandPayload, InvalidMatchSetup,
    DuplicatePlayerSelection, UnknownPlayer,
)
from scorebook.engine.state import (
    MatchState, MatchStatus, MatchFormat, Toss, TossDecision, InningsScore,
)
from scorebook.engine.transition import Transition, ApplyResult
from scorebook.validators.roster_validator import RosterValidator

logger = logging.getLogger(__name__)

ALL_COMMANDS = tuple(COMMAND_TYPES.values())


class MatchStateMachine:
    """Top-level dispatcher; every call returns a new state and never mutates its input"""

    ALLOWED_COMMANDS = {
        MatchStatus.NOT_STARTED: (),
        MatchStatus.LIVE: ALL_COMMANDS,
        MatchStatus.INNINGS_BREAK: (ChangeBatter, ChangeBowler, SwapBatters, EndMatch),
        MatchStatus.COMPLETED: (),
    }

    def __init__(self, processor: BallProcessor = None):
        self.processor = processor or BallProcessor()

    @staticmethod
    def decide_toss(match_format: MatchFormat, winner: str, decision: Union[str, TossDecision]) -> Toss:
        teams = (match_format.team1_name, match_format.team2_name)
        if winner not in teams:
            raise InvalidMatchSetup(f"Toss winner {winner!r} is not playing this match")
        try:
            decision = TossDecision(decision) if not isinstance(decision, TossDecision) else decision
        except ValueError:
            raise InvalidMatchSetup(f"Toss decision must be 'bat' or 'bowl', got {decision!r}") from None

        loser = match_format.opponent_of(winner)
        if decision is TossDecision.BAT:
            return Toss(winner=winner, decision=decision, batting_first=winner, fielding_first=loser)
        return Toss(winner=winner, decision=decision, batting_first=loser, fielding_first=winner)

    def create_match(self, match_format: MatchFormat, toss: Toss) -> MatchState:
        overs = match_format.overs_per_innings
        if isinstance(overs, bool) or not isinstance(overs, int) or overs < 1:
            raise InvalidMatchSetup(f"Overs per innings must be a positive integer, got {overs!r}")
        if match_format.team1_name == match_format.team2_name:
            raise InvalidMatchSetup("Team names must differ")

        check = RosterValidator.validate(match_format)
        if not check["valid"]:
            raise InvalidMatchSetup("; ".join(check["errors"]))

        # re-derive so a hand-built Toss cannot disagree with its own decision
        expected = self.decide_toss(match_format, toss.winner, toss.decision)
        if expected != toss:
            raise InvalidMatchSetup("Toss batting/fielding sides do not match the decision")

        return MatchState(
            format=match_format,
            toss=toss,
            per_innings=[
                InningsScore(batting_team=toss.batting_first, bowling_team=toss.fielding_first),
                InningsScore(batting_team=toss.fielding_first, bowling_team=toss.batting_first),
            ],
            batting_team=toss.batting_first,
            bowling_team=toss.fielding_first,
        )

    def start_match(self, state: MatchState, openers: Tuple[int, int], bowler: int) -> ApplyResult:
        try:
            if state.status is not MatchStatus.NOT_STARTED:
                raise InvalidCommandForState(f"Match is already {state.status.value}")
            if len(openers) != 2:
                raise InvalidCommandPayload("Exactly two openers are required")
            striker, non_striker = openers
            if striker == non_striker:
                raise DuplicatePlayerSelection("Striker and non-striker cannot be the same player")

            batting_ids = {p.id for p in state.batting_roster}
            for player_id in (striker, non_striker):
                if player_id not in batting_ids:
                    raise UnknownPlayer(f"Batter {player_id} is not in {state.batting_team}")
            if bowler not in {p.id for p in state.bowling_roster}:
                raise UnknownPlayer(f"Bowler {bowler} is not in {state.bowling_team}")
        except ScoringError as e:
            logger.debug("start_match rejected: %s", e.detail)
            return ApplyResult(state=state, error=e)

        t = Transition(state=copy.deepcopy(state))
        new = t.state
        new.striker, new.non_striker, new.bowler = striker, non_striker, bowler
        new.ledger.batter(striker)
        new.ledger.batter(non_striker)
        new.status = MatchStatus.LIVE
        t.say(
            f"Match started! {new.player_name(striker)} and {new.player_name(non_striker)} "
            f"are at the crease. {new.player_name(bowler)} to bowl."
        )
        logger.info("Match started: %s batting first", new.batting_team)
        return ApplyResult(state=new, deltas=t.deltas, commentary=t.commentary)

    def apply(self, state: MatchState, cmd: ScoringCommand) -> ApplyResult:
        try:
            if not isinstance(cmd, ALL_COMMANDS):
                raise InvalidCommandPayload(f"Not a scoring command: {cmd!r}")
            if not isinstance(cmd, self.ALLOWED_COMMANDS[state.status]):
                raise InvalidCommandForState(
                    f"{type(cmd).__name__} is not allowed while the match is {state.status.value}"
                )
            t = Transition(state=copy.deepcopy(state))
            self.processor.process(t, cmd)
        except ScoringError as e:
            logger.debug("Rejected %r: %s", cmd, e.detail)
            return ApplyResult(state=state, error=e)

        return ApplyResult(state=t.state, deltas=t.deltas, commentary=t.commentary)


_machine = MatchStateMachine()


def decide_toss(match_format: MatchFormat, winner: str, decision: Union[str, TossDecision]) -> Toss:
    return _machine.decide_toss(match_format, winner, decision)


def create_match(match_format: MatchFormat, toss: Toss) -> MatchState:
    return _machine.create_match(match_format, toss)


def start_match(state: MatchState, openers: Tuple[int, int], bowler: int) -> ApplyResult:
    return _machine.start_match(state, openers, bowler)


def apply(state: MatchState, cmd: ScoringCommand) -> ApplyResult:
    return _machine.apply(state, cmd)
