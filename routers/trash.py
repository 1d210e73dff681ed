import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import get_db
from models.activity import Activity, ActivityType
from models.favourite import Favourite
from models.file import File as FileModel
from models.share import FileShare
from models.trash import Trash
from schemas.trash import TrashCreate, TrashBulkDelete, TrashBulkRestore
from services.access import get_file_or_404, require_owner
from services.serializers import file_fields, is_favourite
from utils.activity import log_activity, log_activities
from utils.jwt_utils import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trash", tags=["Trash"])


def _trash_fields(entry: Trash) -> dict:
    return {
        "id": entry.id,
        "fileId": entry.file_id,
        "userId": entry.user_id,
        "deletedAt": entry.deleted_at,
    }


def _get_own_entry(db: Session, trash_id: int, user_id: int, detail: str) -> Trash:
    entry = db.query(Trash).filter(Trash.id == trash_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Trash entry not found")
    if entry.user_id != user_id:
        raise HTTPException(status_code=403, detail=detail)
    return entry


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def empty_trash(db: Session, user_id: int) -> dict:
    """
    Permanently delete every trashed file the caller owns.

    Files in the caller's trash that belong to someone else are left alone
    and reported as skipped. Dependent rows and the files themselves are
    removed in a single transaction.
    """
    trashed = db.query(Trash).filter(Trash.user_id == user_id).all()
    if not trashed:
        return {
            "message": "Trash is already empty",
            "deletedCount": 0,
            "skippedCount": 0,
            "totalProcessed": 0,
        }

    file_ids = [t.file_id for t in trashed if t.file.owner_id == user_id]
    deleted_count = 0

    if file_ids:
        try:
            db.query(Favourite).filter(Favourite.file_id.in_(file_ids)).delete(synchronize_session=False)
            db.query(FileShare).filter(FileShare.file_id.in_(file_ids)).delete(synchronize_session=False)
            db.query(Activity).filter(Activity.file_id.in_(file_ids)).delete(synchronize_session=False)
            db.query(Trash).filter(Trash.file_id.in_(file_ids)).delete(synchronize_session=False)
            deleted_count = (
                db.query(FileModel)
                .filter(FileModel.id.in_(file_ids), FileModel.owner_id == user_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Emptying trash failed for user %s", user_id)
            raise
        db.expire_all()
        log_activity(db, user_id, ActivityType.FILE_DELETED)

    skipped_count = len(trashed) - deleted_count
    message = f"Successfully emptied trash. {deleted_count} file(s) permanently deleted."
    if skipped_count > 0:
        message += f" {skipped_count} file(s) skipped (not owned by you)."
    return {
        "message": message,
        "deletedCount": deleted_count,
        "skippedCount": skipped_count,
        "totalProcessed": len(trashed),
    }


def _restore(db: Session, trash_id: int, user_id: int) -> dict:
    entry = _get_own_entry(db, trash_id, user_id, "You don't have permission to restore this file")
    file_id, file_title = entry.file_id, entry.file.title

    db.delete(entry)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_RESTORED, file_id)
    return {"message": "File restored from trash successfully", "fileId": file_id, "fileTitle": file_title}


# ─────────────────────────────────────────────
# 휴지통 목록 / 일괄 처리
# ─────────────────────────────────────────────
@router.get("")
def list_trash(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    entries = (
        db.query(Trash)
        .filter(Trash.user_id == user_id)
        .order_by(Trash.deleted_at.desc(), Trash.id.desc())
        .all()
    )
    files = []
    for entry in entries:
        item = file_fields(entry.file)
        item.update({
            "isFavorite": is_favourite(db, entry.file_id, user_id),
            "isTrashed": True,
            "deletedAt": entry.deleted_at,
            "userId": entry.file.owner_id,
            "trashId": entry.id,
            "owner": entry.file.owner.summary(),
        })
        files.append(item)
    return {"files": files, "total": len(files)}


@router.post("", status_code=status.HTTP_201_CREATED)
def move_to_trash(
    req: TrashCreate,
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if not req.fileId:
        raise HTTPException(status_code=400, detail="File ID is required")
    file = get_file_or_404(db, req.fileId)
    require_owner(file, user_id, "You don't have permission to trash this file")

    existing = db.query(Trash).filter(Trash.user_id == user_id, Trash.file_id == file.id).first()
    if existing:
        response.status_code = status.HTTP_200_OK
        return {"message": "File is already in trash", "trash": _trash_fields(existing), "isTrashed": True}

    entry = Trash(user_id=user_id, file_id=file.id)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    log_activity(db, user_id, ActivityType.FILE_TRASHED, file.id)

    body = _trash_fields(entry)
    body["file"] = dict(
        file_fields(file),
        isFavorite=is_favourite(db, file.id, user_id),
        isTrashed=True,
        owner=file.owner.summary(with_email=False),
    )
    return {"message": "File moved to trash successfully", "trash": body, "isTrashed": True}


@router.delete("")
def delete_from_trash(
    req: Optional[TrashBulkDelete] = Body(default=None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if req is None or (not req.emptyTrash and not req.fileIds):
        raise HTTPException(status_code=400, detail="Please specify fileIds or emptyTrash: true")

    if req.emptyTrash:
        result = empty_trash(db, user_id)
        return {
            "message": f"Successfully emptied trash ({result['deletedCount']} file(s) permanently deleted)",
            "deletedCount": result["deletedCount"],
            "restoredCount": 0,
        }

    entries = (
        db.query(Trash)
        .filter(Trash.user_id == user_id, Trash.file_id.in_(req.fileIds))
        .all()
    )
    owned_files = [e.file for e in entries if e.file.owner_id == user_id]
    for file in owned_files:
        db.delete(file)
    db.commit()
    if owned_files:
        log_activities(db, user_id, ActivityType.FILE_DELETED, [None] * len(owned_files))

    return {
        "message": f"Successfully deleted {len(owned_files)} file(s) permanently from trash",
        "deletedCount": len(owned_files),
        "restoredCount": 0,
    }


@router.patch("")
def restore_many(
    req: TrashBulkRestore,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if not req.fileIds:
        raise HTTPException(status_code=400, detail="fileIds array is required")

    query = db.query(Trash).filter(Trash.user_id == user_id, Trash.file_id.in_(req.fileIds))
    restored_ids: List[int] = [t.file_id for t in query.all()]
    restored_count = query.delete(synchronize_session=False)
    db.commit()
    log_activities(db, user_id, ActivityType.FILE_RESTORED, restored_ids)

    return {
        "message": f"Successfully restored {restored_count} file(s) from trash",
        "restoredCount": restored_count,
    }


# ─────────────────────────────────────────────
# 휴지통 비우기
# ─────────────────────────────────────────────
@router.api_route("/empty", methods=["POST", "DELETE"])
def empty(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return empty_trash(db, user_id)


@router.get("/empty")
def trash_stats(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    trashed = db.query(Trash).filter(Trash.user_id == user_id).all()
    deletable = [t for t in trashed if t.file.owner_id == user_id]
    total_size = sum(len(t.file.content or "") for t in deletable)
    dates = sorted(t.deleted_at for t in trashed)

    return {
        "totalTrashed": len(trashed),
        "deletableFiles": len(deletable),
        "nonDeletableFiles": len(trashed) - len(deletable),
        "approximateSize": format_size(total_size),
        "approximateSizeBytes": total_size,
        "oldestTrashedAt": dates[0] if dates else None,
        "newestTrashedAt": dates[-1] if dates else None,
        "isEmpty": not trashed,
        "canEmpty": bool(deletable),
    }


# ─────────────────────────────────────────────
# 단일 항목
# ─────────────────────────────────────────────
@router.get("/{trash_id}")
def get_trash_entry(
    trash_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    entry = _get_own_entry(db, trash_id, user_id, "You don't have permission to view this trash entry")
    file = entry.file
    return {
        "trash": {
            "id": entry.id,
            "userId": entry.user_id,
            "deletedAt": entry.deleted_at,
            "user": entry.user.summary(with_email=False),
            "file": dict(
                file_fields(file),
                isFavorite=is_favourite(db, file.id, user_id),
                isTrashed=True,
                owner=file.owner.summary(),
            ),
        }
    }


@router.delete("/{trash_id}")
def delete_trash_entry(
    trash_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    entry = _get_own_entry(db, trash_id, user_id, "You don't have permission to delete this trash entry")
    file = entry.file
    if file.owner_id != user_id:
        raise HTTPException(status_code=403, detail="You can only permanently delete files you own")
    file_id, file_title = file.id, file.title

    db.delete(file)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_DELETED)

    return {"message": "File permanently deleted from trash", "fileId": file_id, "fileTitle": file_title}


@router.patch("/{trash_id}")
def restore_trash_entry(
    trash_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return _restore(db, trash_id, user_id)


@router.api_route("/{trash_id}/restore", methods=["POST", "PATCH"])
def restore_via_action(
    trash_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    body = _restore(db, trash_id, user_id)
    body["restoredAt"] = datetime.now(timezone.utc)
    return body
