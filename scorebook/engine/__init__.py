from scorebook.engine.state_machine import (
    MatchStateMachine, create_match, start_match, apply, decide_toss,
)
from scorebook.engine.state import snapshot, restore
from scorebook.engine.scorecard import scorecard

__all__ = [
    "MatchStateMachine",
    "create_match",
    "start_match",
    "apply",
    "decide_toss",
    "snapshot",
    "restore",
    "scorecard",
]
