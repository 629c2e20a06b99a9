from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class PickSelection(BaseModel):
    """One user's selection for one event (stored with camelCase keys)."""

    a_teams: list[Optional[str]] = Field(default_factory=lambda: [None, None], max_length=2)
    b_team: Optional[str] = None
    a_drivers: list[Optional[str]] = Field(default_factory=lambda: [None, None, None], max_length=3)
    b_drivers: list[Optional[str]] = Field(default_factory=lambda: [None, None], max_length=2)
    fastest_lap: Optional[str] = None
    # Fraction of the event total deducted by an admin
    penalty: Optional[float] = None
    penalty_reason: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def empty(cls) -> "PickSelection":
        return cls()

    def team_ids(self) -> list[str]:
        return [t for t in [*self.a_teams, self.b_team] if t]

    def driver_ids(self) -> list[str]:
        return [d for d in [*self.a_drivers, *self.b_drivers] if d]


class PickSubmission(BaseModel):
    """Payload of a user submission; penalties are admin-only."""

    a_teams: list[Optional[str]] = Field(min_length=2, max_length=2)
    b_team: Optional[str] = None
    a_drivers: list[Optional[str]] = Field(min_length=3, max_length=3)
    b_drivers: list[Optional[str]] = Field(min_length=2, max_length=2)
    fastest_lap: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_selection(self) -> PickSelection:
        return PickSelection(**self.model_dump())


class PenaltyUpdate(BaseModel):
    penalty: float = Field(ge=0, le=1)
    reason: str = ""
