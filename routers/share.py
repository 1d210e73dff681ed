from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from models.activity import ActivityType
from models.favourite import Favourite
from models.file import File as FileModel
from models.share import FileShare, SharePermission
from models.user import User
from schemas.share import ShareCreate, ShareUpdate, ShareBulkAction, ShareBulkRemove
from services.access import get_file_or_404, find_share, require_owner, parse_permission
from services.serializers import file_fields, is_favourite, is_trashed, serialize_share, paginate
from utils.activity import log_activity, log_activities
from utils.identifier import find_user_by_identifier
from utils.jwt_utils import get_current_user_id

router = APIRouter(prefix="/api/shares", tags=["Shares"])

BULK_ACTIONS = ["remove", "favorite"]


def _permission_filter(permission: Optional[str]) -> Optional[SharePermission]:
    # unknown values are ignored rather than rejected, matching the list views
    if permission in (SharePermission.VIEW.value, SharePermission.EDIT.value):
        return SharePermission(permission)
    return None


def _permission_stats(db: Session, column, user_id: int, total: int) -> dict:
    base = db.query(FileShare).filter(column == user_id)
    return {
        "total": total,
        "viewOnly": base.filter(FileShare.permission == SharePermission.VIEW).count(),
        "canEdit": base.filter(FileShare.permission == SharePermission.EDIT).count(),
    }


def _get_share_or_404(db: Session, share_id: int) -> FileShare:
    share = db.query(FileShare).filter(FileShare.id == share_id).first()
    if not share:
        raise HTTPException(status_code=404, detail="Share not found")
    return share


# ─────────────────────────────────────────────
# 공유 생성 / 받은 공유 목록
# ─────────────────────────────────────────────
@router.post("", status_code=status.HTTP_201_CREATED)
def create_share(
    req: ShareCreate,
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Share a file with the user named by a free-text identifier. Sharing the
    same file with the same user again only updates the permission.
    """
    if not req.fileId or not req.identifier or not req.identifier.strip():
        raise HTTPException(status_code=400, detail="File ID and a username or email are required")
    permission = parse_permission(req.permission or SharePermission.VIEW.value)

    file = get_file_or_404(db, req.fileId)
    require_owner(file, user_id, "Only the owner can share this file")

    recipient = find_user_by_identifier(db, req.identifier)
    if not recipient:
        raise HTTPException(status_code=404, detail="User not found")
    if recipient.id == user_id:
        raise HTTPException(status_code=400, detail="You cannot share a file with yourself")

    share = find_share(db, file.id, recipient.id)
    if share:
        share.permission = permission
        message = "Share permission updated successfully"
        response.status_code = status.HTTP_200_OK
    else:
        share = FileShare(file_id=file.id, owner_id=user_id, shared_with_id=recipient.id, permission=permission)
        db.add(share)
        message = "File shared successfully"
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request created the share first; fall through to an update
        db.rollback()
        share = (
            db.query(FileShare)
            .filter(FileShare.file_id == file.id, FileShare.shared_with_id == recipient.id)
            .one()
        )
        share.permission = permission
        db.commit()
        message = "Share permission updated successfully"
        response.status_code = status.HTTP_200_OK
    db.refresh(share)
    log_activity(db, user_id, ActivityType.FILE_SHARED, file.id)

    return {"message": message, "share": serialize_share(share)}


@router.get("")
@router.get("/with-me")
def shared_with_me(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    permission: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    query = db.query(FileShare).filter(FileShare.shared_with_id == user_id)
    perm = _permission_filter(permission)
    if perm:
        query = query.filter(FileShare.permission == perm)
    if search:
        like = f"%{search}%"
        query = query.filter(FileShare.file.has(
            or_(FileModel.title.ilike(like), FileModel.content.ilike(like))
        ))

    total = query.count()
    shares = (
        query.order_by(FileShare.created_at.desc(), FileShare.id.desc())
        .offset(offset).limit(limit).all()
    )

    rows = []
    for share in shares:
        file = share.file
        rows.append({
            "shareId": share.id,
            "permission": share.permission.value,
            "sharedAt": share.created_at,
            "sharedBy": share.owner.summary(with_email=False),
            "file": dict(
                file_fields(file),
                isFavorite=is_favourite(db, file.id, user_id),
                isTrashed=is_trashed(db, file.id, user_id),
                isShared=True,
                canEdit=share.permission == SharePermission.EDIT,
                owner=file.owner.summary(),
            ),
        })

    return {
        "shares": rows,
        "total": total,
        "pagination": paginate(total, limit, offset),
        "stats": _permission_stats(db, FileShare.shared_with_id, user_id, total),
    }


@router.post("/with-me")
def bulk_action_on_received(
    req: ShareBulkAction,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    share_ids = req.shareIds or []
    received = db.query(FileShare).filter(FileShare.id.in_(share_ids), FileShare.shared_with_id == user_id)

    if req.action == "remove" and req.shareIds is not None:
        removed = received.delete(synchronize_session=False)
        db.commit()
        return {"message": f"Successfully removed {removed} share(s)", "removedCount": removed}

    if req.action == "favorite" and req.shareIds is not None:
        file_ids = [s.file_id for s in received.all()]
        for file_id in file_ids:
            if not is_favourite(db, file_id, user_id):
                db.add(Favourite(user_id=user_id, file_id=file_id))
        db.commit()
        log_activities(db, user_id, ActivityType.FILE_FAVOURITED, file_ids)
        return {
            "message": f"Successfully added {len(file_ids)} shared file(s) to favorites",
            "favoritedCount": len(file_ids),
        }

    raise HTTPException(status_code=400, detail=f"No action specified. Available actions: {', '.join(BULK_ACTIONS)}")


@router.delete("/with-me")
def remove_received(
    req: Optional[ShareBulkRemove] = Body(default=None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    share_ids = req.shareIds if req else []
    query = db.query(FileShare).filter(FileShare.shared_with_id == user_id)
    if share_ids:
        query = query.filter(FileShare.id.in_(share_ids))
    removed = query.delete(synchronize_session=False)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_UNSHARED)

    if share_ids:
        message = f"Successfully removed {removed} share(s)"
    else:
        message = f"Successfully cleared all {removed} shared file(s)"
    return {"message": message, "removedCount": removed}


@router.get("/by-me")
def shared_by_me(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    permission: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    query = db.query(FileShare).filter(FileShare.owner_id == user_id)
    perm = _permission_filter(permission)
    if perm:
        query = query.filter(FileShare.permission == perm)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            FileShare.file.has(FileModel.title.ilike(like)),
            FileShare.shared_with.has(User.username.ilike(like)),
            FileShare.shared_with.has(User.name.ilike(like)),
        ))

    total = query.count()
    shares = (
        query.order_by(FileShare.created_at.desc(), FileShare.id.desc())
        .offset(offset).limit(limit).all()
    )
    rows = [
        {
            "shareId": share.id,
            "permission": share.permission.value,
            "sharedAt": share.created_at,
            "sharedWith": share.shared_with.summary(),
            "file": file_fields(share.file),
        }
        for share in shares
    ]

    return {
        "shares": rows,
        "total": total,
        "pagination": paginate(total, limit, offset),
        "stats": _permission_stats(db, FileShare.owner_id, user_id, total),
    }


# ─────────────────────────────────────────────
# 단일 공유
# ─────────────────────────────────────────────
@router.get("/{share_id}")
def get_share(
    share_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    share = _get_share_or_404(db, share_id)
    if user_id not in (share.owner_id, share.shared_with_id):
        raise HTTPException(status_code=403, detail="You don't have permission to view this share")
    return {"share": serialize_share(share)}


@router.patch("/{share_id}")
def update_share(
    share_id: int,
    req: ShareUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    permission = parse_permission(req.permission)
    share = _get_share_or_404(db, share_id)
    if share.owner_id != user_id:
        raise HTTPException(status_code=403, detail="You don't have permission to update this share")

    share.permission = permission
    db.commit()
    db.refresh(share)
    log_activity(db, user_id, ActivityType.FILE_SHARED, share.file_id)

    return {"message": "Share permission updated successfully", "share": serialize_share(share)}


@router.delete("/{share_id}")
def delete_share(
    share_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    share = _get_share_or_404(db, share_id)
    # either side may end a share
    if user_id not in (share.owner_id, share.shared_with_id):
        raise HTTPException(status_code=403, detail="You don't have permission to remove this share")

    file_id, file_title = share.file_id, share.file.title
    recipient = share.shared_with.username
    db.delete(share)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_UNSHARED, file_id)

    return {
        "message": "Share removed successfully",
        "fileId": file_id,
        "fileTitle": file_title,
        "sharedWithUser": recipient,
    }
