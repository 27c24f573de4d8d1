"""
Tests for match setup, lifecycle gating and snapshots.
"""
import dataclasses
import json

import pytest

from scorebook.engine import create_match, decide_toss, start_match, apply, snapshot, restore, scorecard
from scorebook.engine.commands import (
    Runs, Wicket, Extra, ChangeBowler, ChangeBatter, EndInnings, EndMatch,
    command_from_dict, command_to_dict,
)
from scorebook.engine.errors import InvalidMatchSetup, InvalidCommandPayload
from scorebook.engine.state import MatchStatus, Toss, TossDecision, Player


class TestToss:
    """Test toss decisions."""

    def test_winner_bats(self, match_format):
        """Verify the winner electing to bat bats first."""
        toss = decide_toss(match_format, "Tigers", "bat")
        assert (toss.batting_first, toss.fielding_first) == ("Tigers", "Lions")

    def test_winner_bowls(self, match_format):
        """Verify the winner electing to bowl fields first."""
        toss = decide_toss(match_format, "Tigers", TossDecision.BOWL)
        assert (toss.batting_first, toss.fielding_first) == ("Lions", "Tigers")

    def test_unknown_winner(self, match_format):
        """Verify the winner must be one of the two sides."""
        with pytest.raises(InvalidMatchSetup):
            decide_toss(match_format, "Eagles", "bat")

    def test_bad_decision(self, match_format):
        """Verify only bat or bowl is accepted."""
        with pytest.raises(InvalidMatchSetup):
            decide_toss(match_format, "Lions", "field")


class TestCreateMatch:
    """Test match creation."""

    def test_initial_state(self, new_match):
        """Verify a new match waits in the first innings with no target."""
        assert new_match.status is MatchStatus.NOT_STARTED
        assert new_match.innings == 1
        assert new_match.batting_team == "Lions"
        assert new_match.target is None
        assert [inn.batting_team for inn in new_match.per_innings] == ["Lions", "Tigers"]

    @pytest.mark.parametrize("overs", [0, -5, True, 2.5])
    def test_rejects_bad_overs(self, match_format, overs):
        """Verify overs must be a positive integer."""
        fmt = dataclasses.replace(match_format, overs_per_innings=overs)
        with pytest.raises(InvalidMatchSetup):
            create_match(fmt, decide_toss(match_format, "Lions", "bat"))

    def test_rejects_same_team_names(self, match_format):
        """Verify the two sides need different names."""
        fmt = dataclasses.replace(match_format, team2_name="Lions")
        toss = Toss(winner="Lions", decision=TossDecision.BAT, batting_first="Lions", fielding_first="Lions")
        with pytest.raises(InvalidMatchSetup):
            create_match(fmt, toss)

    def test_rejects_short_roster(self, match_format):
        """Verify each side needs at least two players."""
        fmt = dataclasses.replace(match_format, team2_roster=match_format.team2_roster[:1])
        with pytest.raises(InvalidMatchSetup):
            create_match(fmt, decide_toss(fmt, "Lions", "bat"))

    def test_rejects_shared_player_ids(self, match_format):
        """Verify a player id cannot appear on both sides."""
        roster = match_format.team2_roster[:-1] + (Player(id=1, name="Ringer"),)
        fmt = dataclasses.replace(match_format, team2_roster=roster)
        with pytest.raises(InvalidMatchSetup):
            create_match(fmt, decide_toss(fmt, "Lions", "bat"))

    def test_rejects_inconsistent_toss(self, match_format):
        """Verify the toss must agree with its own decision."""
        toss = Toss(winner="Lions", decision=TossDecision.BAT, batting_first="Tigers", fielding_first="Lions")
        with pytest.raises(InvalidMatchSetup):
            create_match(match_format, toss)


class TestStartMatch:
    """Test starting play."""

    def test_goes_live(self, new_match):
        """Verify openers and bowler take their places and the match goes live."""
        result = start_match(new_match, (1, 2), 101)
        assert result.ok
        state = result.state
        assert state.status is MatchStatus.LIVE
        assert (state.striker, state.non_striker, state.bowler) == (1, 2, 101)
        assert result.commentary[0].text == "Match started! Lion 1 and Lion 2 are at the crease. Tiger 1 to bowl."
        assert new_match.status is MatchStatus.NOT_STARTED

    def test_same_opener_twice(self, new_match):
        """Verify the two openers must differ."""
        assert start_match(new_match, (1, 1), 101).error.code == "duplicate_player_selection"

    def test_openers_from_wrong_side(self, new_match):
        """Verify openers bat and the bowler fields."""
        assert start_match(new_match, (101, 2), 101).error.code == "unknown_player"
        assert start_match(new_match, (1, 2), 3).error.code == "unknown_player"

    def test_cannot_start_twice(self, live_match):
        """Verify a live match cannot be started again."""
        assert start_match(live_match, (1, 2), 101).error.code == "invalid_command_for_state"


class TestStatusGating:
    """Test which commands each status allows."""

    def test_nothing_applies_before_start(self, new_match):
        """Verify no command applies before the match starts."""
        for cmd in (Runs(1), ChangeBowler(101), EndInnings()):
            result = apply(new_match, cmd)
            assert result.error.code == "invalid_command_for_state"
            assert result.state is new_match

    def test_completed_is_terminal(self, live_match, play):
        """Verify nothing applies after the match is completed."""
        state = play(live_match, EndMatch())
        for cmd in (Runs(1), ChangeBatter(3), EndMatch()):
            assert apply(state, cmd).error.code == "invalid_command_for_state"

    def test_non_command_rejected(self, live_match):
        """Verify anything that is not a command is a payload error."""
        assert apply(live_match, "runs 4").error.code == "invalid_command_payload"


class TestSnapshot:
    """Test snapshot and restore."""

    def test_round_trip(self, live_match, play):
        """Verify restore(snapshot(state)) gives back the same state."""
        state = play(
            live_match,
            Runs(4), Extra("no_ball", 1), Runs(1), Wicket("caught", fielder_ids=(104,)),
            ChangeBatter(3), Extra("bye", 2),
        )
        assert restore(snapshot(state)) == state

    def test_round_trip_through_json(self, live_match, play):
        """Verify snapshots survive JSON encoding."""
        state = play(live_match, Runs(6), Runs(0), Runs(0), Runs(0), Runs(0), Runs(1), ChangeBowler(102))
        data = json.loads(json.dumps(snapshot(state)))
        assert restore(data) == state

    def test_round_trip_completed(self, live_match, play):
        """Verify a completed match keeps its result and player of the match."""
        state = play(live_match, Runs(2), EndMatch())
        restored = restore(json.loads(json.dumps(snapshot(state))))
        assert restored == state
        assert restored.result.summary == "No result"
        assert restored.result.player_of_match == 1

    def test_round_trip_mid_over(self, live_match, play):
        """Verify the over in progress is kept so maidens still count after a reload."""
        state = restore(json.loads(json.dumps(snapshot(play(live_match, Runs(0), Runs(0), Runs(0))))))
        state = play(state, Runs(0), Runs(0), Runs(0))
        assert state.ledger.bowling[101].maidens == 1

    def test_snapshot_is_versioned(self, new_match):
        """Verify snapshots carry their format version."""
        assert snapshot(new_match)["snapshot_version"] == 1


class TestCommandDicts:
    """Test command parsing from plain dicts."""

    def test_from_dict(self):
        """Verify each command type parses with its defaults."""
        assert command_from_dict({"type": "runs", "runs": 4}) == Runs(4)
        assert command_from_dict({"type": "extra", "kind": "wide"}) == Extra("wide", 1)
        assert command_from_dict(
            {"type": "wicket", "dismissal": "caught", "fielder_ids": [104]}
        ) == Wicket("caught", fielder_ids=(104,))

    def test_to_dict_round_trip(self):
        """Verify command_to_dict output parses back to the same command."""
        cmd = ChangeBowler(103, hand="right", style="pace")
        assert command_from_dict(command_to_dict(cmd)) == cmd

    def test_unknown_type(self):
        """Verify unknown command types are rejected."""
        with pytest.raises(InvalidCommandPayload):
            command_from_dict({"type": "declare"})

    def test_missing_field(self):
        """Verify a missing required field is rejected."""
        with pytest.raises(InvalidCommandPayload):
            command_from_dict({"type": "change_batter"})


class TestScorecard:
    """Test the scorecard view."""

    def test_batting_and_bowling_rows(self, live_match, play):
        """Verify totals, dismissal text and bowler rows."""
        state = play(live_match, Runs(4), Wicket("caught", fielder_ids=(104,)), ChangeBatter(3), Extra("wide", 1))
        card = scorecard(state)

        first = card["innings"][0]
        assert (first["runs"], first["wickets"], first["overs"]) == (5, 1, "0.2")
        assert first["extras"]["wides"] == 1
        out = next(row for row in first["batting"] if row["player_id"] == 1)
        assert out["dismissal"] == "caught b Tiger 1"
        assert out["runs"] == 4
        bowler = first["bowling"][0]
        assert (bowler["player_id"], bowler["overs"], bowler["wickets"]) == (101, "0.2", 1)
        assert len(card["innings"]) == 1
        assert card["player_of_match"] is None

    def test_maidens_column(self, live_match, play):
        """Verify a maiden over shows on the bowler's row."""
        card = scorecard(play(live_match, *[Runs(0)] * 6))
        assert card["innings"][0]["bowling"][0]["maidens"] == 1

    def test_player_of_match(self, live_match, play):
        """Verify the completed scorecard names the player of the match."""
        card = scorecard(play(live_match, Runs(2), EndMatch()))
        assert card["player_of_match"] == {"player_id": 1, "name": "Lion 1"}
