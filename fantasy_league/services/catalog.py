"""
Entity catalog: the 2026 grid, the calendar and the season usage limits.

The built-in data is only a fallback; admins can store their own grid in the
`entities` document and their own calendar in the `schedule` document.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from fantasy_league.db.models.app_state import ENTITIES, SCHEDULE
from fantasy_league.schemas.entities import Constructor, Driver, EntityClass, Event, Roster
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.services.store import get_document

logger = logging.getLogger(__name__)

# (id, name, class)
CONSTRUCTORS_2026 = [
    ("ferrari", "Ferrari", EntityClass.A),
    ("mclaren", "McLaren", EntityClass.A),
    ("red_bull", "Red Bull Racing", EntityClass.A),
    ("mercedes", "Mercedes", EntityClass.A),
    ("williams", "Williams", EntityClass.A),
    ("aston_martin", "Aston Martin", EntityClass.B),
    ("audi", "Audi F1 Team", EntityClass.B),
    ("alpine", "Alpine", EntityClass.B),
    ("racing_bulls", "Racing Bulls", EntityClass.B),
    ("haas", "Haas F1 Team", EntityClass.B),
    ("cadillac", "Cadillac F1 Team", EntityClass.B),
]

# (id, name, constructor)
DRIVERS_2026 = [
    ("lec", "Charles Leclerc", "ferrari"),
    ("ham", "Lewis Hamilton", "ferrari"),
    ("nor", "Lando Norris", "mclaren"),
    ("pia", "Oscar Piastri", "mclaren"),
    ("ver", "Max Verstappen", "red_bull"),
    ("law", "Liam Lawson", "red_bull"),
    ("rus", "George Russell", "mercedes"),
    ("ant", "Andrea Kimi Antonelli", "mercedes"),
    ("alb", "Alexander Albon", "williams"),
    ("sai", "Carlos Sainz Jr.", "williams"),
    ("alo", "Fernando Alonso", "aston_martin"),
    ("str", "Lance Stroll", "aston_martin"),
    ("hul", "Nico Hulkenberg", "audi"),
    ("bor", "Gabriel Bortoleto", "audi"),
    ("gas", "Pierre Gasly", "alpine"),
    ("doo", "Jack Doohan", "alpine"),
    ("tsu", "Yuki Tsunoda", "racing_bulls"),
    ("had", "Isack Hadjar", "racing_bulls"),
    ("oco", "Esteban Ocon", "haas"),
    ("bea", "Oliver Bearman", "haas"),
    ("her", "Colton Herta", "cadillac"),
    ("pow", "Pato O'Ward", "cadillac"),
]

# (id, round, name, country, sprint, race day)
EVENTS_2026 = [
    ("aus_26", 1, "Australian GP", "Australia", False, "2026-03-15"),
    ("chn_26", 2, "Chinese GP", "China", True, "2026-03-29"),
    ("jpn_26", 3, "Japanese GP", "Japan", False, "2026-04-12"),
    ("bhr_26", 4, "Bahrain GP", "Bahrain", False, "2026-04-19"),
    ("sau_26", 5, "Saudi Arabian GP", "Saudi Arabia", False, "2026-04-26"),
    ("mia_26", 6, "Miami GP", "USA", True, "2026-05-03"),
    ("emi_26", 7, "Emilia-Romagna GP", "Italy", False, "2026-05-17"),
    ("mco_26", 8, "Monaco GP", "Monaco", False, "2026-05-24"),
    ("esp_26", 9, "Spanish GP", "Spain", False, "2026-06-07"),
    ("can_26", 10, "Canadian GP", "Canada", False, "2026-06-21"),
    ("aut_26", 11, "Austrian GP", "Austria", False, "2026-06-28"),
    ("gbr_26", 12, "British GP", "Great Britain", False, "2026-07-12"),
    ("bel_26", 13, "Belgian GP", "Belgium", True, "2026-07-26"),
    ("hun_26", 14, "Hungarian GP", "Hungary", False, "2026-08-02"),
    ("nld_26", 15, "Dutch GP", "Netherlands", False, "2026-08-30"),
    ("ita_26", 16, "Italian GP", "Italy", False, "2026-09-06"),
    ("aze_26", 17, "Azerbaijan GP", "Azerbaijan", False, "2026-09-20"),
    ("sgp_26", 18, "Singapore GP", "Singapore", False, "2026-10-04"),
    ("usa_26", 19, "United States GP", "USA", True, "2026-10-18"),
    ("mex_26", 20, "Mexico City GP", "Mexico", False, "2026-10-25"),
    ("bra_26", 21, "Sao Paulo GP", "Brazil", True, "2026-11-08"),
    ("las_26", 22, "Las Vegas GP", "USA", False, "2026-11-21"),
    ("qat_26", 23, "Qatar GP", "Qatar", True, "2026-11-29"),
    ("abu_26", 24, "Abu Dhabi GP", "Abu Dhabi", False, "2026-12-06"),
]

# Selections allowed per entity over a whole season
USAGE_LIMITS = {
    EntityClass.A: {"teams": 10, "drivers": 8},
    EntityClass.B: {"teams": 5, "drivers": 5},
}


def default_roster() -> Roster:
    constructors = tuple(
        Constructor(id=cid, name=name, class_of=cls) for cid, name, cls in CONSTRUCTORS_2026
    )
    classes = {c.id: c.class_of for c in constructors}
    drivers = tuple(
        Driver(id=did, name=name, constructor_id=team, class_of=classes[team])
        for did, name, team in DRIVERS_2026
    )
    return Roster(drivers=drivers, constructors=constructors)


def _event_dates(race_day: str) -> tuple[datetime, datetime]:
    # Picks lock at 14:00 UTC on race day; the soft deadline is two hours before
    lock_at = datetime.fromisoformat(f"{race_day}T14:00:00").replace(tzinfo=timezone.utc)
    return lock_at, lock_at - timedelta(hours=2)


def default_events() -> list[Event]:
    events = []
    for eid, rnd, name, country, sprint, race_day in EVENTS_2026:
        lock_at, soft_deadline = _event_dates(race_day)
        events.append(Event(
            id=eid,
            round=rnd,
            name=name,
            country=country,
            has_sprint=sprint,
            lock_at_utc=lock_at,
            soft_deadline_utc=soft_deadline,
        ))
    return events


def load_roster(db: Session) -> Roster:
    data = get_document(db, ENTITIES)
    if not data:
        return default_roster()
    try:
        return Roster.model_validate(data)
    except ValidationError as e:
        logger.warning("Malformed entities document, using the built-in grid: %s", e)
        return default_roster()


def load_events(db: Session) -> list[Event]:
    data = get_document(db, SCHEDULE)
    if not data or not data.get("events"):
        return default_events()
    try:
        events = [Event.model_validate(e) for e in data["events"]]
    except ValidationError as e:
        logger.warning("Malformed schedule document, using the built-in calendar: %s", e)
        return default_events()
    return sorted(events, key=lambda e: e.round)


def get_event(db: Session, event_id: str) -> Optional[Event]:
    return next((e for e in load_events(db) if e.id == event_id), None)


# -----------------------
# Usage limits
# -----------------------
def usage_rollup(season_picks: dict[str, PickSelection]) -> dict[str, dict[str, int]]:
    """How many times each team and driver was picked across the season."""
    teams = Counter()
    drivers = Counter()

    for picks in season_picks.values():
        teams.update(picks.team_ids())
        drivers.update(picks.driver_ids())

    return {"teams": dict(teams), "drivers": dict(drivers)}


def check_usage(
    season_picks: dict[str, PickSelection],
    event_id: str,
    picks: PickSelection,
    roster: Roster,
) -> list[str]:
    """
    Ids that would go over their class limit if `picks` replaced the stored
    pick for `event_id`. Ids unknown to the roster are not limited.
    """
    projected = dict(season_picks)
    projected[event_id] = picks
    usage = usage_rollup(projected)

    violations = []
    for kind, ids in (("teams", picks.team_ids()), ("drivers", picks.driver_ids())):
        for entity_id in dict.fromkeys(ids):
            entity_class = roster.class_of(entity_id)
            if entity_class is None:
                continue
            if usage[kind][entity_id] > USAGE_LIMITS[entity_class][kind]:
                violations.append(entity_id)

    return violations
