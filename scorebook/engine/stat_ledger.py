"""
Per-player batting and bowling rows for a live match.
Rates are derived on read so they can never drift from the counters.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict


@dataclass
class BattingStat:
    """Tracks a batter's innings"""
    player_id: int
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal: str = ""
    bowler_id: Optional[int] = None
    fielder_ids: List[int] = field(default_factory=list)

    @property
    def strike_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * 100

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "runs": self.runs,
            "balls": self.balls,
            "fours": self.fours,
            "sixes": self.sixes,
            "is_out": self.is_out,
            "dismissal": self.dismissal,
            "bowler_id": self.bowler_id,
            "fielder_ids": list(self.fielder_ids),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BattingStat":
        return cls(
            player_id=d["player_id"],
            runs=d.get("runs", 0),
            balls=d.get("balls", 0),
            fours=d.get("fours", 0),
            sixes=d.get("sixes", 0),
            is_out=d.get("is_out", False),
            dismissal=d.get("dismissal", ""),
            bowler_id=d.get("bowler_id"),
            fielder_ids=list(d.get("fielder_ids", [])),
        )


@dataclass
class BowlingStat:
    """Tracks a bowler's spell"""
    player_id: int
    balls: int = 0  # legal deliveries, all overs
    runs_conceded: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0
    maidens: int = 0
    # running totals for the over in progress
    over_balls: int = 0
    over_runs: int = 0

    @property
    def overs(self) -> int:
        return self.balls // 6

    @property
    def overs_display(self) -> str:
        return f"{self.balls // 6}.{self.balls % 6}"

    @property
    def economy(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs_conceded / self.balls) * 6

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "balls": self.balls,
            "runs_conceded": self.runs_conceded,
            "wickets": self.wickets,
            "wides": self.wides,
            "no_balls": self.no_balls,
            "maidens": self.maidens,
            "over_balls": self.over_balls,
            "over_runs": self.over_runs,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BowlingStat":
        return cls(
            player_id=d["player_id"],
            balls=d.get("balls", 0),
            runs_conceded=d.get("runs_conceded", 0),
            wickets=d.get("wickets", 0),
            wides=d.get("wides", 0),
            no_balls=d.get("no_balls", 0),
            maidens=d.get("maidens", 0),
            over_balls=d.get("over_balls", 0),
            over_runs=d.get("over_runs", 0),
        )


@dataclass(frozen=True)
class StatDelta:
    """One change applied to a ledger row, reported back to the caller"""
    player_id: int
    kind: str  # "batting" or "bowling"
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0
    maidens: int = 0
    dismissed: bool = False

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "kind": self.kind,
            "runs": self.runs,
            "balls": self.balls,
            "fours": self.fours,
            "sixes": self.sixes,
            "wickets": self.wickets,
            "wides": self.wides,
            "no_balls": self.no_balls,
            "maidens": self.maidens,
            "dismissed": self.dismissed,
        }


@dataclass
class StatLedger:
    """Batting and bowling rows keyed by player id"""
    batting: Dict[int, BattingStat] = field(default_factory=dict)
    bowling: Dict[int, BowlingStat] = field(default_factory=dict)

    def batter(self, player_id: int) -> BattingStat:
        return self.batting.setdefault(player_id, BattingStat(player_id=player_id))

    def bowler(self, player_id: int) -> BowlingStat:
        return self.bowling.setdefault(player_id, BowlingStat(player_id=player_id))

    def record_batting(
        self,
        player_id: int,
        runs_added: int = 0,
        ball_faced: bool = True,
        is_four: bool = False,
        is_six: bool = False,
    ) -> StatDelta:
        row = self.batter(player_id)
        row.runs += runs_added
        if ball_faced:
            row.balls += 1
        if is_four:
            row.fours += 1
        if is_six:
            row.sixes += 1
        return StatDelta(
            player_id=player_id,
            kind="batting",
            runs=runs_added,
            balls=1 if ball_faced else 0,
            fours=1 if is_four else 0,
            sixes=1 if is_six else 0,
        )

    def record_bowling(
        self,
        player_id: int,
        runs_conceded: int = 0,
        ball_bowled: bool = True,
        wicket_taken: bool = False,
        is_wide: bool = False,
        is_no_ball: bool = False,
    ) -> StatDelta:
        row = self.bowler(player_id)
        row.runs_conceded += runs_conceded
        row.over_runs += runs_conceded
        if ball_bowled:
            row.balls += 1
            row.over_balls += 1
        if wicket_taken:
            row.wickets += 1
        if is_wide:
            row.wides += 1
        if is_no_ball:
            row.no_balls += 1
        return StatDelta(
            player_id=player_id,
            kind="bowling",
            runs=runs_conceded,
            balls=1 if ball_bowled else 0,
            wickets=1 if wicket_taken else 0,
            wides=1 if is_wide else 0,
            no_balls=1 if is_no_ball else 0,
        )

    def record_dismissal(
        self,
        player_id: int,
        dismissal: str,
        bowler_id: Optional[int] = None,
        fielder_ids: Optional[List[int]] = None,
    ) -> StatDelta:
        row = self.batter(player_id)
        row.is_out = True
        row.dismissal = dismissal
        row.bowler_id = bowler_id
        row.fielder_ids = list(fielder_ids or [])
        return StatDelta(player_id=player_id, kind="batting", dismissed=True)

    def complete_over(self, player_id: int) -> Optional[StatDelta]:
        """
        Close the over for its bowler. A full over with nothing charged to the
        bowler is a maiden; byes and leg byes do not spoil it.
        """
        row = self.bowler(player_id)
        maiden = row.over_balls == 6 and row.over_runs == 0
        row.over_balls = 0
        row.over_runs = 0
        if not maiden:
            return None
        row.maidens += 1
        return StatDelta(player_id=player_id, kind="bowling", maidens=1)

    def break_over(self, player_id: int):
        """Bowler taken off mid-over; the part-over can never be a maiden"""
        row = self.bowling.get(player_id)
        if row is not None:
            row.over_balls = 0
            row.over_runs = 0

    def player_of_match(self) -> Optional[int]:
        """
        Best single performance across both innings.

        Batting scores runs plus a 10% bonus when the strike rate is above 100;
        bowling scores 20 per wicket plus 5 per run of economy under 6.
        Ties go to the lower player id.
        """
        scores = {}
        for row in self.batting.values():
            bonus = row.runs * 0.1 if row.strike_rate > 100 else 0
            scores[row.player_id] = max(scores.get(row.player_id, 0.0), row.runs + bonus)
        for row in self.bowling.values():
            if row.balls == 0:
                continue
            bonus = (6 - row.economy) * 5 if row.economy < 6 else 0
            scores[row.player_id] = max(scores.get(row.player_id, 0.0), row.wickets * 20 + bonus)

        if not scores:
            return None
        return min(scores, key=lambda player_id: (-scores[player_id], player_id))

    def is_out(self, player_id: int) -> bool:
        row = self.batting.get(player_id)
        return bool(row and row.is_out)

    def to_dict(self) -> dict:
        return {
            "batting": [row.to_dict() for row in self.batting.values()],
            "bowling": [row.to_dict() for row in self.bowling.values()],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "StatLedger":
        ledger = cls()
        for row in d.get("batting", []):
            stat = BattingStat.from_dict(row)
            ledger.batting[stat.player_id] = stat
        for row in d.get("bowling", []):
            stat = BowlingStat.from_dict(row)
            ledger.bowling[stat.player_id] = stat
        return ledger
