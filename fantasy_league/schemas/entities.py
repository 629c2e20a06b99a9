from __future__ import annotations

import enum
from datetime import datetime, timezone
from functools import cached_property
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class EntityClass(str, enum.Enum):
    A = "A"
    B = "B"


class Constructor(BaseModel):
    id: str
    name: str
    class_of: EntityClass = Field(validation_alias=AliasChoices("classOf", "class", "class_of"))
    is_active: bool = True

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class Driver(BaseModel):
    id: str
    name: str
    class_of: EntityClass = Field(validation_alias=AliasChoices("classOf", "class", "class_of"))
    constructor_id: Optional[str] = None
    is_active: bool = True

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class Event(BaseModel):
    id: str
    round: int
    name: str
    country: str
    has_sprint: bool = False
    lock_at_utc: datetime
    soft_deadline_utc: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True

    @field_validator("lock_at_utc", "soft_deadline_utc")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Stored schedules may carry naive timestamps; they are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Roster(BaseModel):
    """
    Immutable snapshot of the grid (drivers + constructors).

    It is passed explicitly to the scoring functions; `effective_as_of`
    records when this driver -> team assignment was valid.
    """

    drivers: tuple[Driver, ...] = ()
    constructors: tuple[Constructor, ...] = ()
    effective_as_of: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True

    @cached_property
    def drivers_by_id(self) -> dict[str, Driver]:
        return {d.id: d for d in self.drivers}

    @cached_property
    def constructors_by_id(self) -> dict[str, Constructor]:
        return {c.id: c for c in self.constructors}

    def driver(self, driver_id: str) -> Optional[Driver]:
        return self.drivers_by_id.get(driver_id)

    def constructor(self, constructor_id: str) -> Optional[Constructor]:
        return self.constructors_by_id.get(constructor_id)

    def team_of(self, driver_id: str) -> Optional[str]:
        driver = self.driver(driver_id)
        return driver.constructor_id if driver else None

    def class_of(self, entity_id: str) -> Optional[EntityClass]:
        entity = self.driver(entity_id) or self.constructor(entity_id)
        return entity.class_of if entity else None

    def driver_teams(self) -> dict[str, str]:
        """Frozen {driver_id: constructor_id} map embedded in event results."""
        return {d.id: d.constructor_id for d in self.drivers if d.constructor_id}
