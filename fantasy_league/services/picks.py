import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from fantasy_league.core.exceptions import (
    InvalidPenaltyError,
    PicksLockedError,
    UnknownEventError,
    UsageLimitError,
)
from fantasy_league.schemas.picks import PickSelection
from fantasy_league.services.catalog import check_usage, get_event, load_roster
from fantasy_league.services.leaderboard import recompute_leaderboard
from fantasy_league.services.results import log_admin_action
from fantasy_league.services.store import get_race_results, get_user_picks, parse_season_picks, set_event_picks

logger = logging.getLogger(__name__)

PENALTY_APPLIED = "PENALTY_APPLIED"


def submit_picks(
    db: Session,
    user_id: str,
    event_id: str,
    picks: PickSelection,
    now: Optional[datetime] = None,
) -> PickSelection:
    """Replaces the user's pick for one event while the event is open."""
    now = now or datetime.now(timezone.utc)

    event = get_event(db, event_id)
    if not event:
        raise UnknownEventError(f"Event {event_id!r} is not on the calendar")

    if now >= event.lock_at_utc:
        raise PicksLockedError(f"Picks for {event_id} are locked")

    result = get_race_results(db).get(event_id)
    if result is not None and result.has_data():
        raise PicksLockedError(f"Results for {event_id} are already published")

    season_picks = parse_season_picks(get_user_picks(db, user_id))

    violations = check_usage(season_picks, event_id, picks, load_roster(db))
    if violations:
        raise UsageLimitError(violations)

    # Admin penalties survive a resubmission
    existing = season_picks.get(event_id)
    if existing and existing.penalty:
        picks = picks.model_copy(update={
            "penalty": existing.penalty,
            "penalty_reason": existing.penalty_reason,
        })

    set_event_picks(db, user_id, event_id, picks)
    db.commit()
    logger.info("Picks saved for %s on %s", user_id, event_id)
    return picks


def apply_penalty(
    db: Session,
    admin_id: str,
    user_id: str,
    event_id: str,
    penalty: float,
    reason: str = "",
) -> PickSelection:
    if not 0 <= penalty <= 1:
        raise InvalidPenaltyError(f"Penalty must be between 0 and 1, got {penalty}")

    season_picks = parse_season_picks(get_user_picks(db, user_id))
    current = season_picks.get(event_id) or PickSelection.empty()

    updated = current.model_copy(update={"penalty": penalty, "penalty_reason": reason or None})
    set_event_picks(db, user_id, event_id, updated)

    log_admin_action(db, admin_id, event_id, PENALTY_APPLIED, {
        "user_id": user_id,
        "penalty": {"from": current.penalty, "to": penalty},
        "reason": reason,
    })
    db.commit()
    logger.info("Penalty %.2f applied to %s on %s by %s", penalty, user_id, event_id, admin_id)

    recompute_leaderboard(db)
    return updated
