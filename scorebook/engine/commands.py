"""
Scoring commands accepted by the engine.
"""
import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from scorebook.engine.errors import InvalidCommandPayload


class ExtraKind(enum.Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"

    @property
    def is_legal_delivery(self) -> bool:
        return self in (ExtraKind.BYE, ExtraKind.LEG_BYE)


@dataclass(frozen=True)
class Runs:
    runs: int


@dataclass(frozen=True)
class Wicket:
    dismissal: str
    fielder_ids: Tuple[int, ...] = field(default_factory=tuple)
    dismissed_id: Optional[int] = None  # defaults to the striker


@dataclass(frozen=True)
class Extra:
    kind: str
    runs: int = 1


@dataclass(frozen=True)
class ChangeBowler:
    player_id: int
    hand: Optional[str] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class ChangeBatter:
    player_id: int


@dataclass(frozen=True)
class SwapBatters:
    pass


@dataclass(frozen=True)
class EndInnings:
    pass


@dataclass(frozen=True)
class EndMatch:
    pass


ScoringCommand = Union[
    Runs, Wicket, Extra, ChangeBowler, ChangeBatter, SwapBatters, EndInnings, EndMatch
]

BALL_COMMANDS = (Runs, Wicket, Extra)

COMMAND_TYPES = {
    "runs": Runs,
    "wicket": Wicket,
    "extra": Extra,
    "change_bowler": ChangeBowler,
    "change_batter": ChangeBatter,
    "swap_batters": SwapBatters,
    "end_innings": EndInnings,
    "end_match": EndMatch,
}


def command_from_dict(d: dict) -> ScoringCommand:
    """Build a command from a plain dict such as {"type": "runs", "runs": 4}."""
    kind = d.get("type")
    if kind not in COMMAND_TYPES:
        raise InvalidCommandPayload(f"Unknown command type: {kind!r}")

    try:
        if kind == "runs":
            return Runs(runs=d["runs"])
        if kind == "wicket":
            return Wicket(
                dismissal=d["dismissal"],
                fielder_ids=tuple(d.get("fielder_ids") or ()),
                dismissed_id=d.get("dismissed_id"),
            )
        if kind == "extra":
            return Extra(kind=d["kind"], runs=d.get("runs", 1))
        if kind == "change_bowler":
            return ChangeBowler(player_id=d["player_id"], hand=d.get("hand"), style=d.get("style"))
        if kind == "change_batter":
            return ChangeBatter(player_id=d["player_id"])
    except KeyError as e:
        raise InvalidCommandPayload(f"Missing field {e.args[0]!r} for {kind} command") from e

    return COMMAND_TYPES[kind]()


def command_to_dict(cmd: ScoringCommand) -> dict:
    for name, cls in COMMAND_TYPES.items():
        if type(cmd) is cls:
            break
    else:
        raise InvalidCommandPayload(f"Not a scoring command: {cmd!r}")

    data = {"type": name}
    if isinstance(cmd, Runs):
        data["runs"] = cmd.runs
    elif isinstance(cmd, Wicket):
        data.update(dismissal=cmd.dismissal, fielder_ids=list(cmd.fielder_ids), dismissed_id=cmd.dismissed_id)
    elif isinstance(cmd, Extra):
        data.update(kind=cmd.kind, runs=cmd.runs)
    elif isinstance(cmd, ChangeBowler):
        data.update(player_id=cmd.player_id, hand=cmd.hand, style=cmd.style)
    elif isinstance(cmd, ChangeBatter):
        data["player_id"] = cmd.player_id
    return data
