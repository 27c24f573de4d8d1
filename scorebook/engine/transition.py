from dataclasses import dataclass, field
from typing import Optional, List

from scorebook.engine.errors import ScoringError
from scorebook.engine.stat_ledger import StatDelta
from scorebook.engine.state import MatchState, CommentaryEntry


@dataclass
class Transition:
    """Working copy of a match plus everything one command produced"""
    state: MatchState
    deltas: List[StatDelta] = field(default_factory=list)
    commentary: List[CommentaryEntry] = field(default_factory=list)

    def say(self, text: str, is_ball_event: bool = False, over: Optional[int] = None, ball: Optional[int] = None):
        entry = CommentaryEntry(
            innings=self.state.innings,
            text=text,
            over=over if is_ball_event else None,
            ball=ball if is_ball_event else None,
            is_ball_event=is_ball_event,
        )
        self.state.commentary.append(entry)
        self.commentary.append(entry)


@dataclass
class ApplyResult:
    """Outcome of one engine call. On error `state` is the caller's state, untouched."""
    state: MatchState
    deltas: List[StatDelta] = field(default_factory=list)
    commentary: List[CommentaryEntry] = field(default_factory=list)
    error: Optional[ScoringError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error.to_dict() if self.error else None,
            "deltas": [d.to_dict() for d in self.deltas],
            "commentary": [c.to_dict() for c in self.commentary],
        }
