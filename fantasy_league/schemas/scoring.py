from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class PointsSystem(BaseModel):
    """
    Position -> points tables. Index i awards the (i+1)-th place;
    places beyond the table score nothing.
    """

    grand_prix_finish: list[Number] = Field(default_factory=list)
    sprint_finish: list[Number] = Field(default_factory=list)
    gp_qualifying: list[Number] = Field(default_factory=list)
    sprint_qualifying: list[Number] = Field(default_factory=list)
    fastest_lap: Number = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True


DEFAULT_POINTS_SYSTEM = PointsSystem(
    grand_prix_finish=[25, 18, 15, 12, 10, 8, 6, 4, 2, 1],
    sprint_finish=[8, 7, 6, 5, 4, 3, 2, 1],
    gp_qualifying=[3, 2, 1],
    sprint_qualifying=[3, 2, 1],
    fastest_lap=3,
)


class ScoringProfile(BaseModel):
    id: str
    name: str
    config: PointsSystem

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ScoringSettingsDoc(BaseModel):
    profiles: list[ScoringProfile] = Field(default_factory=list)
    active_profile_id: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def get_profile(self, profile_id: str) -> Optional[ScoringProfile]:
        return next((p for p in self.profiles if p.id == profile_id), None)

    def active_profile(self) -> Optional[ScoringProfile]:
        if self.active_profile_id is None:
            return None
        return self.get_profile(self.active_profile_id)
