from sqlalchemy import String, Integer, Float, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from fantasy_league.db.session import Base
from datetime import datetime


class LeaderboardEntryRow(Base):
    """Fully derived; rewritten from scratch by every recompute."""
    __tablename__ = "leaderboard_entries"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    total_points: Mapped[float] = mapped_column(Float, default=0)
    rank: Mapped[int] = mapped_column(Integer, index=True)
    # {"gp": .., "sprint": .., "quali": .., "fl": ..}
    breakdown: Mapped[dict] = mapped_column(JSON, default=dict)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True))
