"""
Document access on top of SQLAlchemy.

The league keeps its state as JSON documents (one picks document per user
and a few keyed app_state documents). These helpers hide the row mapping.
"""

import copy

from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_league.db.models.app_state import AppState, RACE_RESULTS
from fantasy_league.db.models.user_picks import UserPicks
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.schemas.results import EventResult


def get_document(db: Session, key: str) -> dict | None:
    row = db.get(AppState, key)
    # Deep copy: nested edits must not leak into the committed state
    return copy.deepcopy(row.data) if row and row.data is not None else None


def set_document(db: Session, key: str, data: dict) -> None:
    """Overwrites the whole document (caller commits)."""
    row = db.get(AppState, key)
    if not row:
        row = AppState(key=key, data=data)
        db.add(row)
    else:
        row.data = data


def get_user_picks(db: Session, user_id: str) -> dict:
    row = db.get(UserPicks, user_id)
    return copy.deepcopy(dict(row.picks)) if row and row.picks else {}


def set_event_picks(db: Session, user_id: str, event_id: str, picks: PickSelection) -> None:
    """Merges one event into the user's picks document (caller commits)."""
    row = db.get(UserPicks, user_id)
    if not row:
        row = UserPicks(user_id=user_id, picks={})
        db.add(row)
    row.picks[event_id] = picks.model_dump(by_alias=True)


def all_user_picks(db: Session) -> dict[str, dict]:
    """{user_id: {event_id: raw pick dict}} ordered by user id."""
    rows = db.execute(select(UserPicks).order_by(UserPicks.user_id)).scalars().all()
    return {row.user_id: copy.deepcopy(dict(row.picks or {})) for row in rows}


def parse_season_picks(raw: dict) -> dict[str, PickSelection]:
    return {event_id: PickSelection.model_validate(p or {}) for event_id, p in raw.items()}


def get_race_results(db: Session) -> dict[str, EventResult]:
    raw = get_document(db, RACE_RESULTS) or {}
    return {event_id: EventResult.model_validate(r) for event_id, r in raw.items() if r}


def set_race_results(db: Session, results: dict[str, EventResult]) -> None:
    set_document(
        db,
        RACE_RESULTS,
        {event_id: r.model_dump(by_alias=True, exclude_none=True) for event_id, r in results.items()},
    )
