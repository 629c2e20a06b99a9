from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fantasy_league.core.deps import get_db, require_admin
from fantasy_league.core.exceptions import ActiveProfileError, ProfileNotFoundError
from fantasy_league.schemas.scoring import PointsSystem, ScoringProfile
from fantasy_league.services.leaderboard import recompute_leaderboard
from fantasy_league.services.scoring_config import (
    activate_profile,
    delete_profile,
    load_settings,
    save_profile,
)

router = APIRouter(prefix="/scoring", tags=["Scoring"])


class ProfilePayload(PointsSystem):
    name: str


@router.get("/settings")
def read_settings(db: Session = Depends(get_db)):
    return load_settings(db).model_dump(by_alias=True)


@router.put("/profiles/{profile_id}")
def upsert_profile(
    profile_id: str,
    payload: ProfilePayload,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    profile = ScoringProfile(
        id=profile_id,
        name=payload.name,
        config=PointsSystem(**payload.model_dump(exclude={"name"})),
    )
    settings = save_profile(db, profile)

    # Only the active table changes past scores
    if settings.active_profile_id == profile_id:
        recompute_leaderboard(db)

    return settings.model_dump(by_alias=True)


@router.post("/profiles/{profile_id}/activate")
def activate(profile_id: str, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    try:
        settings = activate_profile(db, profile_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    recompute_leaderboard(db)
    return settings.model_dump(by_alias=True)


@router.delete("/profiles/{profile_id}")
def remove_profile(profile_id: str, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    try:
        settings = delete_profile(db, profile_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ActiveProfileError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return settings.model_dump(by_alias=True)
