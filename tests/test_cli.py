"""
Tests for the replay command.
"""
import json

import pytest
from click.testing import CliRunner

from cli import cli


def _roster(start_id: int, prefix: str) -> list:
    return [{"id": start_id + i, "name": f"{prefix} {i + 1}", "role": "batter"} for i in range(11)]


@pytest.fixture
def script(tmp_path):
    """Write a replay script; keys named in `drop` are left out"""
    def _write(commands: list, drop: tuple = ()) -> str:
        data = {
            "format": {
                "overs_per_innings": 2,
                "team1_name": "Lions",
                "team2_name": "Tigers",
                "team1_roster": _roster(1, "Lion"),
                "team2_roster": _roster(101, "Tiger"),
            },
            "toss": {"winner": "Lions", "decision": "bat"},
            "openers": [1, 2],
            "bowler": 101,
            "commands": commands,
        }
        for key in drop:
            del data[key]
        path = tmp_path / "match.json"
        path.write_text(json.dumps(data))
        return str(path)
    return _write


class TestReplay:
    """Test replaying a scoring script."""

    def test_replays_innings(self, script):
        """Verify a full innings prints its total and the target."""
        commands = (
            [{"type": "runs", "runs": 4}, {"type": "runs", "runs": 4},
             {"type": "wicket", "dismissal": "bowled"}, {"type": "change_batter", "player_id": 3},
             {"type": "runs", "runs": 1}, {"type": "runs", "runs": 6}, {"type": "runs", "runs": 0},
             {"type": "change_bowler", "player_id": 102}]
            + [{"type": "runs", "runs": 1}] * 6
        )
        result = CliRunner().invoke(cli, ["replay", script(commands)])
        assert result.exit_code == 0, result.output
        assert "21/1" in result.output
        assert "Target: 22" in result.output

    def test_prints_player_of_match(self, script):
        """Verify a completed replay names the player of the match."""
        commands = [{"type": "runs", "runs": 4}, {"type": "end_match"}]
        result = CliRunner().invoke(cli, ["replay", script(commands)])
        assert result.exit_code == 0, result.output
        assert "No result" in result.output
        assert "Player of the match: Lion 1" in result.output

    def test_stops_at_rejected_command(self, script):
        """Verify replay stops and reports the first rejected command."""
        result = CliRunner().invoke(cli, ["replay", script([{"type": "runs", "runs": 9}])])
        assert result.exit_code == 0
        assert "rejected" in result.output

    def test_bad_command_type_fails(self, script):
        """Verify an unparseable command exits with status 1."""
        result = CliRunner().invoke(cli, ["replay", script([{"type": "declare"}])])
        assert result.exit_code == 1

    @pytest.mark.parametrize("key", ["openers", "bowler", "toss"])
    def test_missing_key_fails_cleanly(self, script, key):
        """Verify a script without a required key exits with a message, not a traceback."""
        result = CliRunner().invoke(cli, ["replay", script([], drop=(key,))])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert f"missing '{key}'" in result.output
