"""
Persistence boundary for live matches.

One writer per match: callers read a snapshot together with its version, apply
exactly one command and write back only if the stored version is unchanged.
"""
import json
import logging
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from scorebook.engine import apply, start_match, snapshot, restore
from scorebook.engine.commands import ScoringCommand
from scorebook.engine.errors import ConcurrentModification, MatchNotFound
from scorebook.engine.state import MatchState
from scorebook.engine.transition import ApplyResult
from scorebook.models.live_match import LiveMatch

logger = logging.getLogger(__name__)


class MatchStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, state: MatchState, venue: Optional[str] = None) -> LiveMatch:
        row = LiveMatch(
            team1_name=state.format.team1_name,
            team2_name=state.format.team2_name,
            venue=venue,
            status=state.status,
            version=1,
            state_json=json.dumps(snapshot(state)),
        )
        self.db.add(row)
        self.db.commit()
        logger.info("Created match %d: %s vs %s", row.id, row.team1_name, row.team2_name)
        return row

    def get(self, match_id: int) -> LiveMatch:
        row = self.db.get(LiveMatch, match_id, populate_existing=True)
        if row is None:
            raise MatchNotFound(f"Match {match_id} not found")
        return row

    def load(self, match_id: int) -> Tuple[MatchState, int]:
        row = self.get(match_id)
        return restore(json.loads(row.state_json)), row.version

    def save(self, match_id: int, state: MatchState, expected_version: int) -> int:
        """Conditional write; returns the new version"""
        new_version = expected_version + 1
        stmt = (
            update(LiveMatch)
            .where(LiveMatch.id == match_id, LiveMatch.version == expected_version)
            .values(
                state_json=json.dumps(snapshot(state)),
                status=state.status,
                result_summary=state.result.summary if state.result else None,
                version=new_version,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            self.db.rollback()
            current = self.get(match_id)
            logger.warning(
                "Version conflict on match %d: expected v%d, stored v%d",
                match_id, expected_version, current.version,
            )
            raise ConcurrentModification(
                f"Match {match_id} is at version {current.version}, not {expected_version}; reload and retry"
            )
        self.db.commit()
        return new_version

    def _checked_load(self, match_id: int, expected_version: int) -> MatchState:
        state, version = self.load(match_id)
        if version != expected_version:
            logger.warning("Stale write on match %d: v%d requested, v%d stored", match_id, expected_version, version)
            raise ConcurrentModification(
                f"Match {match_id} is at version {version}, not {expected_version}; reload and retry"
            )
        return state

    def start(self, match_id: int, openers: Tuple[int, int], bowler: int, expected_version: int) -> Tuple[ApplyResult, int]:
        state = self._checked_load(match_id, expected_version)
        result = start_match(state, openers, bowler)
        if not result.ok:
            return result, expected_version
        return result, self.save(match_id, result.state, expected_version)

    def apply_command(self, match_id: int, cmd: ScoringCommand, expected_version: int) -> Tuple[ApplyResult, int]:
        """Read, apply one command, write back. Rejected commands leave the stored match untouched."""
        state = self._checked_load(match_id, expected_version)
        result = apply(state, cmd)
        if not result.ok:
            return result, expected_version
        return result, self.save(match_id, result.state, expected_version)
