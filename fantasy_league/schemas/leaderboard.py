from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from fantasy_league.schemas.scoring import Number


def whole_number(value: Number) -> Number:
    """Float columns hand back 25.0; whole values are returned as int."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


Points = Annotated[Number, AfterValidator(whole_number)]


class Breakdown(BaseModel):
    gp: Points = 0
    sprint: Points = 0
    quali: Points = 0
    fl: Points = 0


class LeaderboardEntry(BaseModel):
    user_id: str
    total_points: Points
    rank: int
    breakdown: Breakdown
    last_updated: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
