from sqlalchemy import String, ForeignKey, JSON, DateTime
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from fantasy_league.db.session import Base
from datetime import datetime


class UserPicks(Base):
    """
    One document per user: {event_id: PickSelection (camelCase dict)}.
    Overwritten per event by the submission workflow.
    """
    __tablename__ = "user_picks"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), primary_key=True)
    picks: Mapped[dict] = mapped_column(MutableDict.as_mutable(JSON), default=dict)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    user: Mapped["User"] = relationship("User", back_populates="picks")
