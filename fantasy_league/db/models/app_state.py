from sqlalchemy import String, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from fantasy_league.db.session import Base
from datetime import datetime

# Known document keys
RACE_RESULTS = "race_results"
SCORING_CONFIG = "scoring_config"
ENTITIES = "entities"
SCHEDULE = "schedule"


class AppState(Base):
    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
