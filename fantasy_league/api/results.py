from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fantasy_league.core.deps import get_db, require_admin
from fantasy_league.schemas.results import EventResult
from fantasy_league.services.catalog import get_event
from fantasy_league.services.results import delete_event_result, save_event_result
from fantasy_league.services.results_sync import sync_event_result
from fantasy_league.services.store import get_race_results

router = APIRouter(prefix="/results", tags=["Race Results"])


def _dump(result: EventResult) -> dict:
    return result.model_dump(by_alias=True, exclude_none=True)


@router.get("")
def list_results(db: Session = Depends(get_db)):
    return {event_id: _dump(result) for event_id, result in get_race_results(db).items()}


@router.get("/{event_id}")
def read_result(event_id: str, db: Session = Depends(get_db)):
    result = get_race_results(db).get(event_id)
    if not result:
        raise HTTPException(status_code=404, detail="Results not available yet")
    return _dump(result)


@router.put("/{event_id}")
def upsert_result(
    event_id: str,
    result: EventResult,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    if not get_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    stored, run = save_event_result(db, current_user.id, event_id, result)
    return {
        "message": "Results saved and leaderboard recalculated",
        "result": _dump(stored),
        "usersRanked": run.users if run else 0,
    }


@router.delete("/{event_id}")
def remove_result(event_id: str, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    if not delete_event_result(db, current_user.id, event_id):
        raise HTTPException(status_code=404, detail="Results not available yet")
    return {"message": "Results deleted and leaderboard recalculated"}


@router.post("/{event_id}/sync")
def sync_result(
    event_id: str,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    success, logs = sync_event_result(db, current_user.id, event_id, year)
    return {"success": success, "logs": logs}
