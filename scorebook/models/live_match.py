from typing import Optional
from sqlalchemy import String, Integer, Enum, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from scorebook.database import Base
from scorebook.engine.state import MatchStatus


class LiveMatch(Base):
    __tablename__ = "live_matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Fixture info, denormalised for listing
    team1_name: Mapped[str] = mapped_column(String(100))
    team2_name: Mapped[str] = mapped_column(String(100))
    venue: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.NOT_STARTED)
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Optimistic concurrency token, bumped on every write
    version: Mapped[int] = mapped_column(Integer, default=1)

    # Serialized MatchState (JSON)
    state_json: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<LiveMatch {self.id}: {self.team1_name} vs {self.team2_name} v{self.version}>"
