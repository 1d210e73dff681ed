from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from db import get_db
from models.activity import Activity
from models.favourite import Favourite
from models.file import File as FileModel
from models.friendship import Friendship
from models.share import FileShare
from models.trash import Trash
from models.user import User
from services.serializers import file_fields
from utils.jwt_utils import get_current_admin

router = APIRouter(prefix="/api/all", tags=["Admin"])


@router.get("/all-files")
def all_files(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    files = db.query(FileModel).order_by(FileModel.created_at.asc(), FileModel.id.asc()).all()
    return {
        "files": [dict(file_fields(f), userId=f.owner_id, owner=f.owner.summary()) for f in files],
        "total": len(files),
    }


@router.get("/all-activities")
def all_activities(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    full: bool = Query(default=False),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    """
    Every activity in the system, oldest first. `full=true` embeds the acting
    user and the complete file instead of just ids and titles.
    """
    query = db.query(Activity).order_by(Activity.created_at.asc(), Activity.id.asc())
    total = query.count()
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    rows = []
    for a in query.all():
        row = {
            "id": a.id,
            "userId": a.user_id,
            "fileId": a.file_id,
            "action": a.action.value,
            "createdAt": a.created_at,
        }
        if full:
            row["user"] = a.user.summary()
            row["file"] = file_fields(a.file) if a.file else None
        else:
            row["username"] = a.user.username
            row["fileTitle"] = a.file.title if a.file else None
        rows.append(row)
    return {"activities": rows, "total": total}


@router.get("/all-favourites")
def all_favourites(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    favourites = db.query(Favourite).order_by(Favourite.created_at.asc(), Favourite.id.asc()).all()
    return {
        "favourites": [
            {
                "id": f.id,
                "userId": f.user_id,
                "fileId": f.file_id,
                "createdAt": f.created_at,
                "username": f.user.username,
                "fileTitle": f.file.title,
            }
            for f in favourites
        ],
        "total": len(favourites),
    }


@router.get("/all-shared")
def all_shared(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    shares = db.query(FileShare).order_by(FileShare.created_at.asc(), FileShare.id.asc()).all()
    return {
        "shares": [
            {
                "id": s.id,
                "fileId": s.file_id,
                "fileTitle": s.file.title,
                "permission": s.permission.value,
                "createdAt": s.created_at,
                "owner": s.owner.summary(),
                "sharedWith": s.shared_with.summary(),
            }
            for s in shares
        ],
        "total": len(shares),
    }


@router.get("/all-trash")
def all_trash(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    entries = db.query(Trash).order_by(Trash.deleted_at.asc(), Trash.id.asc()).all()
    return {
        "trash": [
            {
                "id": t.id,
                "userId": t.user_id,
                "fileId": t.file_id,
                "deletedAt": t.deleted_at,
                "username": t.user.username,
                "fileTitle": t.file.title,
            }
            for t in entries
        ],
        "total": len(entries),
    }


@router.get("/all-friends")
def all_friends(db: Session = Depends(get_db), admin: User = Depends(get_current_admin)):
    friendships = db.query(Friendship).order_by(Friendship.created_at.asc(), Friendship.id.asc()).all()

    # one row per side of every edge
    rows = []
    for f in friendships:
        for me, other in ((f.user, f.friend), (f.friend, f.user)):
            rows.append({
                "friendshipId": f.id,
                "status": f.status.value,
                "createdAt": f.created_at,
                "user": me.summary(),
                "friend": other.summary(),
            })
    return {"friends": rows, "total": len(rows)}
