"""
Tests for innings boundaries, the chase and match results.
"""
import pytest

from scorebook.engine import apply, create_match, decide_toss, start_match
from scorebook.engine.commands import (
    Runs, Wicket, ChangeBowler, ChangeBatter, SwapBatters, EndInnings, EndMatch,
)
from scorebook.engine.innings_controller import required_run_rate
from scorebook.engine.state import MatchStatus


@pytest.fixture
def innings_break(live_match, play):
    """Lions close on 19/0 after 4 balls, target 20"""
    return play(live_match, Runs(6), Runs(6), Runs(6), Runs(1), EndInnings())


@pytest.fixture
def chase(innings_break, play):
    """Tigers openers 101 and 102, Lion 1 bowling"""
    return play(innings_break, ChangeBatter(101), ChangeBatter(102), ChangeBowler(1))


class TestRequiredRunRate:
    """Test the required run rate helper."""

    def test_rate(self):
        """Verify runs still needed per six balls."""
        assert required_run_rate(20, 5, 6) == pytest.approx(15.0)

    def test_target_passed(self):
        """Verify nothing is required once the target is passed."""
        assert required_run_rate(20, 25, 6) == 0.0

    def test_no_balls_left(self):
        """Verify no rate is reported with no balls left."""
        assert required_run_rate(20, 5, 0) == 0.0


class TestInningsBreak:
    """Test the break between innings."""

    def test_target_and_swap(self, innings_break):
        """Verify the target is set and the sides swap roles."""
        state = innings_break
        assert state.status is MatchStatus.INNINGS_BREAK
        assert state.innings == 2
        assert state.target == 20
        assert (state.batting_team, state.bowling_team) == ("Tigers", "Lions")
        assert (state.over, state.ball) == (0, 0)
        assert state.striker is None and state.non_striker is None and state.bowler is None
        assert state.required_run_rate == pytest.approx(10.0)
        assert state.commentary[-1].text == "Second innings begins. Tigers needs 20 runs to win."

    def test_toss_record_unchanged(self, innings_break, live_match):
        """Verify the toss is not rewritten at the break."""
        assert innings_break.toss == live_match.toss
        assert innings_break.toss.batting_first == "Lions"

    def test_first_innings_preserved(self, innings_break):
        """Verify the first innings totals are kept."""
        first = innings_break.per_innings[0]
        assert (first.runs, first.wickets, first.overs_display) == (19, 0, "0.4")

    def test_ball_commands_rejected(self, innings_break):
        """Verify balls and a second end of innings are refused during the break."""
        assert apply(innings_break, Runs(1)).error.code == "invalid_command_for_state"
        assert apply(innings_break, EndInnings()).error.code == "invalid_command_for_state"

    def test_new_pair_and_bowler_resume_play(self, innings_break, play):
        """Verify play resumes once both batters and a bowler are named."""
        state = play(innings_break, ChangeBatter(101), ChangeBatter(102))
        assert state.status is MatchStatus.INNINGS_BREAK
        assert (state.striker, state.non_striker) == (101, 102)

        state = play(state, SwapBatters(), ChangeBowler(1))
        assert state.status is MatchStatus.LIVE
        assert (state.striker, state.non_striker) == (102, 101)
        assert state.commentary[-1].text == "Tiger 2 and Tiger 1 come out to bat. Lion 1 to bowl."

    def test_break_picks_are_from_the_right_sides(self, innings_break):
        """Verify batters come from the chasing side and bowlers from the other."""
        assert apply(innings_break, ChangeBatter(3)).error.code == "unknown_player"
        assert apply(innings_break, ChangeBowler(101)).error.code == "unknown_player"


class TestChase:
    """Test the second innings chase."""

    def test_target_reached_wins_by_wickets(self, chase, play):
        """Verify reaching the target ends the match in a win by wickets."""
        state = play(
            chase,
            Runs(6), Runs(6), Runs(0), Runs(0), Runs(0), Runs(0),
            ChangeBowler(2),
            Runs(0), Runs(0), Runs(0), Runs(2), Runs(6),
        )
        second = state.per_innings[1]
        assert (second.runs, second.wickets, second.overs_display) == (20, 0, "1.5")
        assert state.status is MatchStatus.COMPLETED
        assert state.result.winner == "Tigers"
        assert state.result.summary == "Tigers won by 10 wickets"
        assert state.commentary[-1].text == "Match completed! Tigers won by 10 wickets"

        assert apply(state, Runs(1)).error.code == "invalid_command_for_state"

    def test_player_of_match_on_completion(self, chase, play):
        """Verify the best performance is named when the chase ends."""
        state = play(
            chase,
            Runs(6), Runs(6), Runs(0), Runs(0), Runs(0), Runs(0),
            ChangeBowler(2),
            Runs(0), Runs(0), Runs(0), Runs(2), Runs(6),
        )
        # Lion 1: 19 off 4 beats Tiger 1: 12 off 6
        assert state.result.player_of_match == 1

    def test_required_rate_tracks_chase(self, chase, play):
        """Verify current and required rates update ball by ball."""
        state = play(chase, Runs(4), Runs(2))
        assert state.current_run_rate == pytest.approx(18.0)
        assert state.required_run_rate == pytest.approx(round(14 / 10 * 6, 2))

    def test_short_chase_wins_by_runs(self, chase, play):
        """Verify ending a short chase gives the win to the side batting first."""
        state = play(chase, Runs(4), Runs(6), EndMatch())
        assert state.status is MatchStatus.COMPLETED
        assert state.result.winner == "Lions"
        assert state.result.margin == 9
        assert state.result.summary == "Lions won by 9 runs"

    def test_one_short_is_a_tie(self, chase, play):
        """Verify equal scores are a tie."""
        state = play(chase, Runs(6), Runs(6), Runs(6), Runs(1), EndMatch())
        assert state.result.winner is None
        assert state.result.margin_type == "tie"
        assert state.result.summary == "Match tied"

    def test_overs_run_out_in_chase(self, chase, play):
        """Verify the match ends when the chasing side runs out of overs."""
        state = play(chase, *[Runs(0)] * 6, ChangeBowler(2), *[Runs(0)] * 6)
        assert state.status is MatchStatus.COMPLETED
        assert state.result.summary == "Lions won by 19 runs"

    def test_single_wicket_margin(self, make_format, play):
        """Verify a one wicket margin is singular."""
        fmt = make_format(size=3)
        state = start_match(create_match(fmt, decide_toss(fmt, "Tigers", "bowl")), (1, 2), 101).state
        state = play(
            state, Runs(5), EndInnings(),
            ChangeBatter(101), ChangeBatter(102), ChangeBowler(1),
            Wicket("bowled"), ChangeBatter(103), Runs(6),
        )
        assert state.result.summary == "Tigers won by 1 wicket"


class TestAbandon:
    """Test ending a match early."""

    def test_end_match_in_first_innings(self, live_match, play):
        """Verify ending in the first innings is no result."""
        state = play(live_match, Runs(4), EndMatch())
        assert state.status is MatchStatus.COMPLETED
        assert state.result.summary == "No result"
        assert state.innings == 1
        assert state.result.player_of_match == 1

    def test_end_match_during_break(self, innings_break, play):
        """Verify ending during the break is no result."""
        state = play(innings_break, EndMatch())
        assert state.status is MatchStatus.COMPLETED
        assert state.result.margin_type == "no_result"
