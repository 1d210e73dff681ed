from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from db import get_db
from models.activity import Activity
from utils.jwt_utils import get_current_user_id

router = APIRouter(prefix="/api/activities", tags=["Activities"])


def serialize_activity(activity: Activity) -> dict:
    file = activity.file
    return {
        "id": activity.id,
        "userId": activity.user_id,
        "fileId": activity.file_id,
        "action": activity.action.value,
        "createdAt": activity.created_at,
        # file is gone once it has been hard-deleted
        "file": {"id": file.id, "title": file.title} if file else None,
    }


@router.get("")
def list_activities(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    query = db.query(Activity).filter(Activity.user_id == user_id)
    total = query.count()
    activities = (
        query.order_by(Activity.created_at.desc(), Activity.id.desc())
        .offset(offset).limit(limit).all()
    )
    return {"activities": [serialize_activity(a) for a in activities], "total": total}


@router.get("/{activity_id}")
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    if activity.user_id != user_id:
        raise HTTPException(status_code=403, detail="You don't have permission to view this activity")
    return {"activity": serialize_activity(activity)}
