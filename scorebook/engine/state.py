"""
Match state dataclasses with lossless serialization support.
"""
import enum
from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Set

from scorebook.engine.over_tracker import legal_balls, overs_display
from scorebook.engine.stat_ledger import StatLedger

SNAPSHOT_VERSION = 1


class MatchStatus(enum.Enum):
    NOT_STARTED = "not_started"
    LIVE = "live"
    INNINGS_BREAK = "innings_break"
    COMPLETED = "completed"


class PlayerRole(enum.Enum):
    BATTER = "batter"
    BOWLER = "bowler"
    ALL_ROUNDER = "all_rounder"
    KEEPER = "keeper"


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class DismissalType(enum.Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    CAUGHT_BEHIND = "caught_behind"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    role: PlayerRole = PlayerRole.BATTER

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "role": self.role.value}

    @classmethod
    def from_dict(cls, d: dict) -> "Player":
        return cls(
            id=d["id"],
            name=d["name"],
            role=PlayerRole(d.get("role", PlayerRole.BATTER.value)),
        )


@dataclass(frozen=True)
class MatchFormat:
    """Fixture details supplied by the roster provider; read-only to the engine"""
    overs_per_innings: int
    team1_name: str
    team2_name: str
    team1_roster: Tuple[Player, ...]
    team2_roster: Tuple[Player, ...]

    def roster_for(self, team_name: str) -> Tuple[Player, ...]:
        if team_name == self.team1_name:
            return self.team1_roster
        if team_name == self.team2_name:
            return self.team2_roster
        raise KeyError(team_name)

    def opponent_of(self, team_name: str) -> str:
        return self.team2_name if team_name == self.team1_name else self.team1_name

    def player(self, player_id: int) -> Optional[Player]:
        for p in self.team1_roster + self.team2_roster:
            if p.id == player_id:
                return p
        return None

    @property
    def max_balls(self) -> int:
        return self.overs_per_innings * 6

    def to_dict(self) -> dict:
        return {
            "overs_per_innings": self.overs_per_innings,
            "team1_name": self.team1_name,
            "team2_name": self.team2_name,
            "team1_roster": [p.to_dict() for p in self.team1_roster],
            "team2_roster": [p.to_dict() for p in self.team2_roster],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MatchFormat":
        return cls(
            overs_per_innings=d["overs_per_innings"],
            team1_name=d["team1_name"],
            team2_name=d["team2_name"],
            team1_roster=tuple(Player.from_dict(p) for p in d["team1_roster"]),
            team2_roster=tuple(Player.from_dict(p) for p in d["team2_roster"]),
        )


@dataclass(frozen=True)
class Toss:
    winner: str
    decision: TossDecision
    batting_first: str
    fielding_first: str

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "decision": self.decision.value,
            "batting_first": self.batting_first,
            "fielding_first": self.fielding_first,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Toss":
        return cls(
            winner=d["winner"],
            decision=TossDecision(d["decision"]),
            batting_first=d["batting_first"],
            fielding_first=d["fielding_first"],
        )


@dataclass
class InningsScore:
    """Team total for one innings"""
    batting_team: str
    bowling_team: str
    runs: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0

    @property
    def extras(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes

    @property
    def legal_balls(self) -> int:
        return legal_balls(self.overs, self.balls)

    @property
    def overs_display(self) -> str:
        return overs_display(self.overs, self.balls)

    @property
    def run_rate(self) -> float:
        total_balls = self.legal_balls
        if total_balls == 0:
            return 0.0
        return (self.runs / total_balls) * 6

    def to_dict(self) -> dict:
        return {
            "batting_team": self.batting_team,
            "bowling_team": self.bowling_team,
            "runs": self.runs,
            "wickets": self.wickets,
            "overs": self.overs,
            "balls": self.balls,
            "wides": self.wides,
            "no_balls": self.no_balls,
            "byes": self.byes,
            "leg_byes": self.leg_byes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "InningsScore":
        return cls(
            batting_team=d["batting_team"],
            bowling_team=d["bowling_team"],
            runs=d.get("runs", 0),
            wickets=d.get("wickets", 0),
            overs=d.get("overs", 0),
            balls=d.get("balls", 0),
            wides=d.get("wides", 0),
            no_balls=d.get("no_balls", 0),
            byes=d.get("byes", 0),
            leg_byes=d.get("leg_byes", 0),
        )

    def __repr__(self):
        return f"<InningsScore {self.batting_team}: {self.runs}/{self.wickets} ({self.overs_display})>"


@dataclass(frozen=True)
class CommentaryEntry:
    innings: int
    text: str
    over: Optional[int] = None
    ball: Optional[int] = None
    is_ball_event: bool = True

    def to_dict(self) -> dict:
        return {
            "innings": self.innings,
            "over": self.over,
            "ball": self.ball,
            "text": self.text,
            "is_ball_event": self.is_ball_event,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CommentaryEntry":
        return cls(
            innings=d["innings"],
            text=d["text"],
            over=d.get("over"),
            ball=d.get("ball"),
            is_ball_event=d.get("is_ball_event", True),
        )


@dataclass(frozen=True)
class MatchResult:
    winner: Optional[str]  # None for a tie or no result
    margin: int = 0
    margin_type: str = ""  # "runs", "wickets", "tie", "no_result"
    summary: str = ""
    player_of_match: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "margin": self.margin,
            "margin_type": self.margin_type,
            "summary": self.summary,
            "player_of_match": self.player_of_match,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MatchResult":
        return cls(
            winner=d.get("winner"),
            margin=d.get("margin", 0),
            margin_type=d.get("margin_type", ""),
            summary=d.get("summary", ""),
            player_of_match=d.get("player_of_match"),
        )


@dataclass
class MatchState:
    """Root aggregate for a live match"""
    format: MatchFormat
    toss: Toss
    status: MatchStatus = MatchStatus.NOT_STARTED
    innings: int = 1
    per_innings: List[InningsScore] = field(default_factory=list)

    batting_team: str = ""
    bowling_team: str = ""

    over: int = 0
    ball: int = 0

    striker: Optional[int] = None
    non_striker: Optional[int] = None
    bowler: Optional[int] = None
    bowler_hand: Optional[str] = None
    bowler_style: Optional[str] = None

    is_free_hit: bool = False
    target: Optional[int] = None
    current_run_rate: float = 0.0
    required_run_rate: Optional[float] = None

    dismissed_batters: Set[int] = field(default_factory=set)
    awaiting_bowler_change: bool = False
    awaiting_new_batter: bool = False

    ledger: StatLedger = field(default_factory=StatLedger)
    commentary: List[CommentaryEntry] = field(default_factory=list)
    result: Optional[MatchResult] = None

    @property
    def current_innings(self) -> InningsScore:
        return self.per_innings[self.innings - 1]

    @property
    def batting_roster(self) -> Tuple[Player, ...]:
        return self.format.roster_for(self.batting_team)

    @property
    def bowling_roster(self) -> Tuple[Player, ...]:
        return self.format.roster_for(self.bowling_team)

    @property
    def max_wickets(self) -> int:
        # one batter is always left not out
        return max(1, len(self.batting_roster) - 1)

    @property
    def at_crease(self) -> Set[int]:
        return {p for p in (self.striker, self.non_striker) if p is not None}

    @property
    def balls_remaining(self) -> int:
        return max(0, self.format.max_balls - self.current_innings.legal_balls)

    @property
    def commentary_feed(self) -> List[CommentaryEntry]:
        """Newest first, for display"""
        return list(reversed(self.commentary))

    def player_name(self, player_id: Optional[int]) -> str:
        if player_id is None:
            return ""
        player = self.format.player(player_id)
        return player.name if player else str(player_id)

    def to_dict(self) -> dict:
        return {
            "snapshot_version": SNAPSHOT_VERSION,
            "format": self.format.to_dict(),
            "toss": self.toss.to_dict(),
            "status": self.status.value,
            "innings": self.innings,
            "per_innings": [inn.to_dict() for inn in self.per_innings],
            "batting_team": self.batting_team,
            "bowling_team": self.bowling_team,
            "over": self.over,
            "ball": self.ball,
            "striker": self.striker,
            "non_striker": self.non_striker,
            "bowler": self.bowler,
            "bowler_hand": self.bowler_hand,
            "bowler_style": self.bowler_style,
            "is_free_hit": self.is_free_hit,
            "target": self.target,
            "current_run_rate": self.current_run_rate,
            "required_run_rate": self.required_run_rate,
            "dismissed_batters": sorted(self.dismissed_batters),
            "awaiting_bowler_change": self.awaiting_bowler_change,
            "awaiting_new_batter": self.awaiting_new_batter,
            "ledger": self.ledger.to_dict(),
            "commentary": [c.to_dict() for c in self.commentary],
            "result": self.result.to_dict() if self.result else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MatchState":
        return cls(
            format=MatchFormat.from_dict(d["format"]),
            toss=Toss.from_dict(d["toss"]),
            status=MatchStatus(d["status"]),
            innings=d["innings"],
            per_innings=[InningsScore.from_dict(inn) for inn in d["per_innings"]],
            batting_team=d["batting_team"],
            bowling_team=d["bowling_team"],
            over=d["over"],
            ball=d["ball"],
            striker=d.get("striker"),
            non_striker=d.get("non_striker"),
            bowler=d.get("bowler"),
            bowler_hand=d.get("bowler_hand"),
            bowler_style=d.get("bowler_style"),
            is_free_hit=d.get("is_free_hit", False),
            target=d.get("target"),
            current_run_rate=d.get("current_run_rate", 0.0),
            required_run_rate=d.get("required_run_rate"),
            dismissed_batters=set(d.get("dismissed_batters", [])),
            awaiting_bowler_change=d.get("awaiting_bowler_change", False),
            awaiting_new_batter=d.get("awaiting_new_batter", False),
            ledger=StatLedger.from_dict(d.get("ledger", {})),
            commentary=[CommentaryEntry.from_dict(c) for c in d.get("commentary", [])],
            result=MatchResult.from_dict(d["result"]) if d.get("result") else None,
        )

    def __repr__(self):
        inn = self.per_innings[self.innings - 1] if self.per_innings else None
        score = f"{inn.runs}/{inn.wickets} ({inn.overs_display})" if inn else "-"
        return f"<MatchState {self.format.team1_name} vs {self.format.team2_name} [{self.status.value}] {score}>"


def snapshot(state: MatchState) -> dict:
    """Plain structured record for the persistence collaborator"""
    return state.to_dict()


def restore(data: dict) -> MatchState:
    return MatchState.from_dict(data)
