from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fantasy_league.core.deps import get_db, require_admin
from fantasy_league.core.exceptions import LeaderboardWriteError
from fantasy_league.services.leaderboard import get_leaderboard, recompute_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("")
def read_leaderboard(db: Session = Depends(get_db)):
    return [entry.model_dump(by_alias=True) for entry in get_leaderboard(db)]


@router.post("/recompute")
def rerun_leaderboard(db: Session = Depends(get_db), current_user=Depends(require_admin)):
    try:
        run = recompute_leaderboard(db)
    except LeaderboardWriteError as e:
        # Earlier chunks are already written; a rerun repairs the board
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "message": "Leaderboard recalculated",
        "users": run.users,
        "chunks": run.chunks,
    }
