from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fantasy_league.core.deps import get_current_user, get_db, require_admin
from fantasy_league.core.exceptions import (
    InvalidPenaltyError,
    PicksLockedError,
    UnknownEventError,
    UsageLimitError,
)
from fantasy_league.db.models.app_state import SCORING_CONFIG
from fantasy_league.db.models.user import User
from fantasy_league.schemas.picks import PenaltyUpdate, PickSubmission
from fantasy_league.services.catalog import load_roster, usage_rollup
from fantasy_league.services.picks import apply_penalty, submit_picks
from fantasy_league.services.scoring import SeasonScore, score_user_events
from fantasy_league.services.scoring_config import active_points_system
from fantasy_league.services.store import get_document, get_race_results, get_user_picks, parse_season_picks

router = APIRouter(prefix="/picks", tags=["Picks"])


@router.get("/me")
def read_my_picks(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_user_picks(db, current_user.id)


@router.put("/me/{event_id}")
def upsert_my_picks(
    event_id: str,
    submission: PickSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        stored = submit_picks(db, current_user.id, event_id, submission.to_selection())
    except UnknownEventError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PicksLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UsageLimitError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "violations": e.violations})

    return stored.model_dump(by_alias=True)


@router.get("/me/score")
def read_my_score(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    season_picks = parse_season_picks(get_user_picks(db, current_user.id))
    config = active_points_system(get_document(db, SCORING_CONFIG))

    season = SeasonScore()
    events = {}
    for event_id, score in score_user_events(season_picks, get_race_results(db), config, load_roster(db)):
        season.add(score)
        season.events_scored.append(event_id)
        events[event_id] = {**score.breakdown, "penalty": score.penalty, "total": score.total}

    return {
        "totalPoints": season.total_points,
        "breakdown": season.breakdown,
        "events": events,
        "usage": usage_rollup(season_picks),
    }


@router.patch("/{user_id}/{event_id}/penalty")
def set_penalty(
    user_id: str,
    event_id: str,
    update: PenaltyUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    try:
        picks = apply_penalty(db, current_user.id, user_id, event_id, update.penalty, update.reason)
    except InvalidPenaltyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return picks.model_dump(by_alias=True)
