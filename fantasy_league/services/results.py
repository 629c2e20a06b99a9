"""
Results entry workflow used by officials (manual form or FastF1 import).

Saving a result freezes the driver -> team map the first time an event is
saved, so a later roster change never moves past team credit. The points
table is not frozen: activating another scoring profile rescores every event,
except those whose document already carries a `scoringSnapshot`.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from fantasy_league.db.models.admin_log import AdminLog
from fantasy_league.schemas.results import EventResult
from fantasy_league.services.catalog import load_roster
from fantasy_league.services.leaderboard import LeaderboardRun, recompute_leaderboard
from fantasy_league.services.store import get_race_results, set_race_results

logger = logging.getLogger(__name__)

RESULTS_SAVED = "RESULTS_SAVED"
RESULTS_DELETED = "RESULTS_DELETED"

# Fields an official can edit (snapshots are not part of the diff)
EDITABLE_FIELDS = ("grand_prix_finish", "gp_qualifying", "fastest_lap", "sprint_finish", "sprint_qualifying")


def diff_results(previous: Optional[EventResult], current: EventResult) -> dict:
    """{field: {"from": old, "to": new}} for every edited field that changed."""
    changes = {}
    for name in EDITABLE_FIELDS:
        old = getattr(previous, name) if previous else None
        new = getattr(current, name)
        if old != new:
            changes[name] = {"from": old, "to": new}
    return changes


def log_admin_action(db: Session, admin_id: str, event_id: Optional[str], action: str, changes: dict) -> AdminLog:
    entry = AdminLog(admin_id=admin_id, event_id=event_id, action=action, changes=changes)
    db.add(entry)
    return entry


def save_event_result(
    db: Session,
    admin_id: str,
    event_id: str,
    result: EventResult,
    recompute: bool = True,
) -> tuple[EventResult, Optional[LeaderboardRun]]:
    # 1. Current state of the results document
    results = get_race_results(db)
    previous = results.get(event_id)

    # 2. Team snapshot: keep the frozen one, otherwise freeze now.
    # A stored points table survives edits; none is created here.
    update = {}
    if previous and previous.driver_teams:
        update["driver_teams"] = previous.driver_teams
    else:
        update["driver_teams"] = load_roster(db).driver_teams()

    update["scoring_snapshot"] = previous.scoring_snapshot if previous else None

    stored = result.model_copy(update=update)

    # 3. Write the whole document + audit entry
    results[event_id] = stored
    set_race_results(db, results)
    log_admin_action(db, admin_id, event_id, RESULTS_SAVED, diff_results(previous, stored))
    db.commit()
    logger.info("Results saved for %s by %s", event_id, admin_id)

    # 4. Leaderboard
    run = recompute_leaderboard(db) if recompute else None
    return stored, run


def delete_event_result(db: Session, admin_id: str, event_id: str, recompute: bool = True) -> bool:
    results = get_race_results(db)
    previous = results.pop(event_id, None)
    if previous is None:
        return False

    set_race_results(db, results)
    log_admin_action(db, admin_id, event_id, RESULTS_DELETED, diff_results(None, previous))
    db.commit()
    logger.info("Results deleted for %s by %s", event_id, admin_id)

    if recompute:
        recompute_leaderboard(db)
    return True
