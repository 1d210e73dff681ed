from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from db import get_db
from models.activity import ActivityType
from models.favourite import Favourite
from models.file import File as FileModel
from models.share import FileShare
from models.trash import Trash
from schemas.file import (
    FileCreate, FileUpdate, FileEnvelope,
    FavoriteToggleResponse, TrashToggleResponse,
)
from services.access import (
    get_file_or_404, find_share, require_owner, require_read_access, require_edit_access,
)
from services.serializers import serialize_file, access_label
from utils.activity import log_activity
from utils.jwt_utils import get_current_user_id

router = APIRouter(prefix="/api/files", tags=["Files"])


def _clean(value: Optional[str], label: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{label} cannot be empty")
    return cleaned


# ─────────────────────────────────────────────
# 목록/CRUD
# ─────────────────────────────────────────────
@router.get("")
def list_files(
    q: Optional[str] = Query(default=None, description="Optional search query (title or content)"),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    query = db.query(FileModel).filter(FileModel.owner_id == user_id)
    if q and q.strip():
        like = f"%{q.strip()}%"
        query = query.filter((FileModel.title.ilike(like)) | (FileModel.content.ilike(like)))

    files = query.order_by(FileModel.updated_at.desc(), FileModel.id.desc()).all()
    return {"files": [serialize_file(db, f, user_id) for f in files]}


@router.post("", response_model=FileEnvelope, status_code=status.HTTP_201_CREATED)
def create_file(
    req: FileCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if not req.title or not req.content:
        raise HTTPException(status_code=400, detail="Title and content are required")
    title = _clean(req.title, "Title")
    content = _clean(req.content, "Content")

    file = FileModel(owner_id=user_id, title=title, content=content)
    db.add(file)
    db.commit()
    db.refresh(file)
    log_activity(db, user_id, ActivityType.FILE_CREATED, file.id)

    return FileEnvelope(message="File created successfully", file=serialize_file(db, file, user_id))


@router.get("/recent")
def recent_files(
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Owned files the caller has not trashed, merged with files shared with
    the caller that nobody has trashed, newest update first.
    """
    owned = (
        db.query(FileModel)
        .filter(FileModel.owner_id == user_id, ~FileModel.trash_items.any(Trash.user_id == user_id))
        .all()
    )
    shared = (
        db.query(FileModel)
        .filter(FileModel.shares.any(FileShare.shared_with_id == user_id), ~FileModel.trash_items.any())
        .all()
    )
    merged = sorted(owned + shared, key=lambda f: (f.updated_at, f.id), reverse=True)
    page = merged[offset:offset + limit]

    items = []
    for f in page:
        share = None if f.owner_id == user_id else find_share(db, f.id, user_id)
        data = serialize_file(db, f, user_id).model_dump()
        data.update({
            "isShared": f.owner_id != user_id,
            "permission": access_label(f, user_id, share),
            "owner": f.owner.summary(with_email=False),
        })
        items.append(data)

    total = len(merged)
    return {
        "files": items,
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }


@router.get("/{file_id}", response_model=FileEnvelope)
def get_file(
    file_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    file = get_file_or_404(db, file_id)
    require_read_access(db, file, user_id, "You don't have permission to view this file")
    return FileEnvelope(file=serialize_file(db, file, user_id))


@router.patch("/{file_id}", response_model=FileEnvelope)
def update_file(
    file_id: int,
    req: FileUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    file = get_file_or_404(db, file_id)
    require_edit_access(db, file, user_id)

    if req.title is not None:
        file.title = _clean(req.title, "Title")
    if req.content is not None:
        file.content = _clean(req.content, "Content")

    db.commit()
    db.refresh(file)
    log_activity(db, user_id, ActivityType.FILE_UPDATED, file.id)

    return FileEnvelope(message="File updated successfully", file=serialize_file(db, file, user_id))


@router.delete("/{file_id}")
def delete_file(
    file_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    file = get_file_or_404(db, file_id)
    require_owner(file, user_id, "You don't have permission to delete this file")

    # favourites, trash rows and shares go with the file
    db.delete(file)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_DELETED)

    return {"message": "File deleted successfully"}


# ─────────────────────────────────────────────
# 즐겨찾기 / 휴지통 토글
# ─────────────────────────────────────────────
@router.patch("/{file_id}/favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(
    file_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    file = get_file_or_404(db, file_id)
    require_read_access(db, file, user_id, "You don't have access to this file")

    existing = (
        db.query(Favourite)
        .filter(Favourite.user_id == user_id, Favourite.file_id == file.id)
        .first()
    )
    if existing:
        db.delete(existing)
        action, is_favorite = ActivityType.FILE_UNFAVOURITED, False
    else:
        db.add(Favourite(user_id=user_id, file_id=file.id))
        action, is_favorite = ActivityType.FILE_FAVOURITED, True
    db.commit()
    log_activity(db, user_id, action, file.id)

    return FavoriteToggleResponse(
        message="Added to favorites" if is_favorite else "Removed from favorites",
        isFavorite=is_favorite,
    )


@router.patch("/{file_id}/trash", response_model=TrashToggleResponse)
def toggle_trash(
    file_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    file = get_file_or_404(db, file_id)
    require_owner(file, user_id, "You don't have permission to modify this file")

    existing = (
        db.query(Trash)
        .filter(Trash.user_id == user_id, Trash.file_id == file.id)
        .first()
    )
    if existing:
        db.delete(existing)
        action, is_trashed = ActivityType.FILE_RESTORED, False
    else:
        db.add(Trash(user_id=user_id, file_id=file.id))
        action, is_trashed = ActivityType.FILE_TRASHED, True
    db.commit()
    log_activity(db, user_id, action, file.id)

    return TrashToggleResponse(
        message="Moved to trash" if is_trashed else "Restored from trash",
        isTrashed=is_trashed,
    )
