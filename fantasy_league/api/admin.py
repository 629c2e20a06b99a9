from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_league.core.deps import get_db, require_admin
from fantasy_league.db.models.admin_log import AdminLog
from fantasy_league.db.models.user import User

router = APIRouter(prefix="/admin", tags=["Admin"])


# -----------------------
# Users
# -----------------------
@router.get("/users")
def list_users(db: Session = Depends(get_db), current_user=Depends(require_admin)):
    users = db.execute(select(User).order_by(User.id)).scalars().all()
    return [
        {"id": u.id, "displayName": u.display_name, "email": u.email, "isAdmin": u.is_admin}
        for u in users
    ]


# -----------------------
# Audit trail
# -----------------------
@router.get("/logs")
def list_logs(
    event_id: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    query = select(AdminLog).order_by(AdminLog.timestamp.desc(), AdminLog.id.desc()).limit(limit)
    if event_id:
        query = query.where(AdminLog.event_id == event_id)

    logs = db.execute(query).scalars().all()
    return [
        {
            "id": log.id,
            "adminId": log.admin_id,
            "eventId": log.event_id,
            "action": log.action,
            "changes": log.changes,
            "timestamp": log.timestamp,
        }
        for log in logs
    ]
