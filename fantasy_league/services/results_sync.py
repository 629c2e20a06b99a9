"""
Official classification import through FastF1.

The admin console shows the returned log lines, so every step appends a
human-readable message besides the regular logger output.
"""

import logging
import os
from typing import Optional

import fastf1
import pandas as pd
from sqlalchemy.orm import Session

from fantasy_league.core.config import get_settings
from fantasy_league.schemas.entities import Event, Roster
from fantasy_league.schemas.results import EventResult
from fantasy_league.services.catalog import get_event, load_roster
from fantasy_league.services.results import save_event_result

logger = logging.getLogger(__name__)

GRAND_PRIX_SIZE = 10
SPRINT_SIZE = 8
QUALIFYING_SIZE = 3

# Calendar country -> FastF1 event name, where they differ
EVENT_NAME_MAP = {
    "USA": "United States",
}

# Events that share a country with another round
EVENT_ID_MAP = {
    "mia_26": "Miami",
    "las_26": "Las Vegas",
    "emi_26": "Emilia Romagna",
    "bra_26": "Sao Paulo",
    "mex_26": "Mexico City",
}

_cache_ready = False


def enable_cache() -> None:
    global _cache_ready
    if _cache_ready:
        return
    cache_dir = get_settings().fastf1_cache_dir
    os.makedirs(cache_dir, exist_ok=True)
    fastf1.Cache.enable_cache(cache_dir)
    _cache_ready = True


def api_event_name(event: Event) -> str:
    return EVENT_ID_MAP.get(event.id) or EVENT_NAME_MAP.get(event.country, event.country)


def resolve_abbreviation(abbreviation, roster: Roster) -> Optional[str]:
    """'VER' -> 'ver' when the roster knows that driver id, else None."""
    if not isinstance(abbreviation, str) or not abbreviation:
        return None
    driver_id = abbreviation.lower()
    if roster.driver(driver_id):
        return driver_id
    if roster.driver(abbreviation):
        return abbreviation
    return None


def load_session(year: int, event_name: str, identifier: str, laps: bool = False):
    session = fastf1.get_session(year, event_name, identifier)
    session.load(laps=laps, telemetry=False, weather=False, messages=False)
    return session


def classification(results: pd.DataFrame, size: int, roster: Roster, log) -> list[Optional[str]]:
    """Top `size` of a session, padded with None, in finishing order."""
    ordered = results
    if "Position" in results.columns:
        ordered = results.sort_values("Position", na_position="last")

    slots: list[Optional[str]] = []
    for _, row in ordered.head(size).iterrows():
        position = row.get("Position")
        if pd.isna(position):
            # Not classified
            slots.append(None)
            continue

        driver_id = resolve_abbreviation(row.get("Abbreviation"), roster)
        if driver_id is None:
            log(f"Unknown driver {row.get('Abbreviation')!r}, stored as empty slot")
        slots.append(driver_id)

    return slots + [None] * (size - len(slots))


def fastest_lap_holder(laps: pd.DataFrame, roster: Roster, log) -> Optional[str]:
    if laps is None or laps.empty:
        log("No lap data, fastest lap left empty")
        return None
    fastest = laps.pick_fastest()
    if fastest is None or (hasattr(fastest, "empty") and fastest.empty):
        log("Could not determine the fastest lap")
        return None
    driver_id = resolve_abbreviation(fastest["Driver"], roster)
    if driver_id is None:
        log(f"Fastest lap holder {fastest['Driver']!r} is not on the roster")
    return driver_id


def build_event_result(year: int, event: Event, roster: Roster, log) -> EventResult:
    event_name = api_event_name(event)
    log(f"API target: '{event_name}' ({year})")

    race = load_session(year, event_name, "R", laps=True)
    if race.results.empty:
        raise ValueError("Race classification is empty")
    log(f"Race classification: {len(race.results)} drivers")

    qualifying = load_session(year, event_name, "Q")

    result = EventResult(
        grand_prix_finish=classification(race.results, GRAND_PRIX_SIZE, roster, log),
        gp_qualifying=classification(qualifying.results, QUALIFYING_SIZE, roster, log),
        fastest_lap=fastest_lap_holder(race.laps, roster, log),
    )
    log(f"Fastest lap: {result.fastest_lap or '-'}")

    if event.has_sprint:
        sprint = load_session(year, event_name, "S")
        sprint_qualifying = load_session(year, event_name, "SQ")
        result.sprint_finish = classification(sprint.results, SPRINT_SIZE, roster, log)
        result.sprint_qualifying = classification(sprint_qualifying.results, QUALIFYING_SIZE, roster, log)
        log("Sprint weekend: sprint and sprint qualifying imported")

    return result


def sync_event_result(db: Session, admin_id: str, event_id: str, year: Optional[int] = None) -> tuple[bool, list[str]]:
    logs: list[str] = []

    def log(msg: str) -> None:
        logs.append(msg)
        logger.info(msg)

    log(f"Starting results import for {event_id}")

    event = get_event(db, event_id)
    if not event:
        log("Error: event not found on the calendar")
        return False, logs

    year = year or event.lock_at_utc.year
    roster = load_roster(db)
    enable_cache()

    try:
        result = build_event_result(year, event, roster, log)
    except Exception as e:
        # Any FastF1 failure aborts the import
        logger.exception("FastF1 import failed for %s", event_id)
        log(f"Error: {e}")
        return False, logs

    save_event_result(db, admin_id, event_id, result)
    log("Results saved, leaderboard recalculated")
    return True, logs
