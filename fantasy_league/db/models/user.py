from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import TYPE_CHECKING
from fantasy_league.db.session import Base
from datetime import datetime

if TYPE_CHECKING:
    from fantasy_league.db.models.user_picks import UserPicks


class User(Base):
    __tablename__ = "users"

    # Ids come from the external auth provider (string uids)
    id: Mapped[str] = mapped_column(String, primary_key=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    picks: Mapped["UserPicks"] = relationship("UserPicks", back_populates="user", uselist=False)
