"""
Shared fixtures: two named sides, ids 1.. for Lions and 101.. for Tigers.
"""
import pytest

from scorebook.engine import create_match, decide_toss, start_match, apply
from scorebook.engine.state import MatchFormat, Player, PlayerRole


def make_roster(start_id: int, size: int, prefix: str) -> tuple:
    return tuple(
        Player(id=start_id + i, name=f"{prefix} {i + 1}", role=PlayerRole.BATTER)
        for i in range(size)
    )


@pytest.fixture
def make_format():
    """Build a Lions v Tigers format of any size"""
    def _make(size: int = 11, overs: int = 2) -> MatchFormat:
        return MatchFormat(
            overs_per_innings=overs,
            team1_name="Lions",
            team2_name="Tigers",
            team1_roster=make_roster(1, size, "Lion"),
            team2_roster=make_roster(101, size, "Tiger"),
        )
    return _make


@pytest.fixture
def match_format(make_format):
    return make_format()


@pytest.fixture
def new_match(match_format):
    """Lions won the toss and bat first"""
    return create_match(match_format, decide_toss(match_format, "Lions", "bat"))


@pytest.fixture
def live_match(new_match):
    """Openers 1 and 2, Tiger 1 (101) bowling"""
    result = start_match(new_match, (1, 2), 101)
    assert result.ok
    return result.state


@pytest.fixture
def play():
    """Apply commands in order, failing the test on the first rejection"""
    def _play(state, *commands):
        for cmd in commands:
            result = apply(state, cmd)
            assert result.ok, f"{cmd!r} rejected: {result.error.code}: {result.error.detail}"
            state = result.state
        return state
    return _play
