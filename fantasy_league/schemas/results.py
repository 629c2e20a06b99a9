from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from fantasy_league.schemas.scoring import PointsSystem


class EventResult(BaseModel):
    """
    Official outcome of one event. A None slot means no classified finisher
    was recorded for that place and matches no pick.

    `driver_teams` is frozen on the first save so roster changes never move
    past team credit. `scoring_snapshot` is only present on older documents;
    when set it overrides the active points table for this event.
    """

    grand_prix_finish: list[Optional[str]] = Field(default_factory=lambda: [None] * 10, max_length=10)
    gp_qualifying: list[Optional[str]] = Field(default_factory=lambda: [None] * 3, max_length=3)
    fastest_lap: Optional[str] = None
    sprint_finish: Optional[list[Optional[str]]] = Field(default=None, max_length=8)
    sprint_qualifying: Optional[list[Optional[str]]] = Field(default=None, max_length=3)
    driver_teams: Optional[dict[str, str]] = None
    scoring_snapshot: Optional[PointsSystem] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def has_data(self) -> bool:
        lists = [
            self.grand_prix_finish,
            self.gp_qualifying,
            self.sprint_finish or [],
            self.sprint_qualifying or [],
        ]
        return bool(self.fastest_lap) or any(any(slot for slot in lst) for lst in lists)
