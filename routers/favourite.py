from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from models.activity import ActivityType
from models.favourite import Favourite
from schemas.favourite import FavouriteCreate, FavouriteBulkDelete
from services.access import get_file_or_404, require_read_access, find_share
from services.serializers import file_fields, is_trashed, access_label
from utils.activity import log_activity, log_activities
from utils.jwt_utils import get_current_user_id

router = APIRouter(prefix="/api/favourites", tags=["Favourites"])


def _favourite_fields(fav: Favourite) -> dict:
    return {
        "id": fav.id,
        "fileId": fav.file_id,
        "userId": fav.user_id,
        "createdAt": fav.created_at,
    }


def _find_favourite(db: Session, user_id: int, file_id: int) -> Optional[Favourite]:
    return (
        db.query(Favourite)
        .filter(Favourite.user_id == user_id, Favourite.file_id == file_id)
        .first()
    )


def _get_own_favourite(db: Session, favourite_id: int, user_id: int, verb: str) -> Favourite:
    fav = db.query(Favourite).filter(Favourite.id == favourite_id).first()
    if not fav:
        raise HTTPException(status_code=404, detail="Favourite not found")
    if fav.user_id != user_id:
        raise HTTPException(status_code=403, detail=f"You don't have permission to {verb} this favourite")
    return fav


def _already_favourite(fav: Favourite) -> dict:
    return {
        "message": "File is already in favourites",
        "favourite": _favourite_fields(fav),
        "isFavorite": True,
    }


@router.get("")
def list_favourites(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    favourites = (
        db.query(Favourite)
        .filter(Favourite.user_id == user_id)
        .order_by(Favourite.created_at.desc(), Favourite.id.desc())
        .all()
    )
    files = []
    for fav in favourites:
        item = file_fields(fav.file)
        item.update({
            "isFavorite": True,
            "isTrashed": is_trashed(db, fav.file_id, user_id),
            "userId": fav.file.owner_id,
            "favouritedAt": fav.created_at,
            "favouriteId": fav.id,
            "owner": fav.file.owner.summary(),
        })
        files.append(item)
    return {"files": files, "total": len(files)}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_favourite(
    req: FavouriteCreate,
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if not req.fileId:
        raise HTTPException(status_code=400, detail="File ID is required")
    file = get_file_or_404(db, req.fileId)
    require_read_access(db, file, user_id, "You don't have access to this file")

    existing = _find_favourite(db, user_id, file.id)
    if existing:
        response.status_code = status.HTTP_200_OK
        return _already_favourite(existing)

    fav = Favourite(user_id=user_id, file_id=file.id)
    db.add(fav)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with an identical request
        db.rollback()
        response.status_code = status.HTTP_200_OK
        return _already_favourite(
            db.query(Favourite).filter(Favourite.user_id == user_id, Favourite.file_id == req.fileId).one()
        )
    db.refresh(fav)
    log_activity(db, user_id, ActivityType.FILE_FAVOURITED, file.id)

    body = _favourite_fields(fav)
    body["file"] = dict(
        file_fields(file),
        isFavorite=True,
        isTrashed=is_trashed(db, file.id, user_id),
        owner=file.owner.summary(with_email=False),
    )
    return {"message": "File added to favourites successfully", "favourite": body, "isFavorite": True}


@router.delete("")
def remove_favourites(
    req: Optional[FavouriteBulkDelete] = Body(default=None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """Remove the listed files from favourites, or every favourite when no ids are given."""
    file_ids = req.fileIds if req else []
    query = db.query(Favourite).filter(Favourite.user_id == user_id)
    if file_ids:
        query = query.filter(Favourite.file_id.in_(file_ids))
    removed = [fav.file_id for fav in query.all()]
    deleted_count = query.delete(synchronize_session=False)
    db.commit()

    if file_ids:
        log_activities(db, user_id, ActivityType.FILE_UNFAVOURITED, removed)
    else:
        log_activity(db, user_id, ActivityType.FILE_UNFAVOURITED)

    return {
        "message": f"Successfully removed {deleted_count} file(s) from favourites",
        "deletedCount": deleted_count,
    }


@router.get("/{favourite_id}")
def get_favourite(
    favourite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    fav = _get_own_favourite(db, favourite_id, user_id, "view")
    file = fav.file
    share = None if file.owner_id == user_id else find_share(db, file.id, user_id)

    body = _favourite_fields(fav)
    body["user"] = fav.user.summary(with_email=False)
    body["file"] = dict(
        file_fields(file),
        isFavorite=True,
        isTrashed=is_trashed(db, file.id, user_id),
        isShared=file.owner_id != user_id,
        permission=access_label(file, user_id, share),
        owner=file.owner.summary(),
    )
    return {"favourite": body}


@router.patch("/{favourite_id}")
def update_favourite(
    favourite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    # favourites carry no editable metadata yet; this only checks ownership
    fav = _get_own_favourite(db, favourite_id, user_id, "update")
    return {"message": "Favourite metadata updated successfully", "favourite": _favourite_fields(fav)}


@router.delete("/{favourite_id}")
def delete_favourite(
    favourite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    fav = _get_own_favourite(db, favourite_id, user_id, "delete")
    file_id, file_title = fav.file_id, fav.file.title

    db.delete(fav)
    db.commit()
    log_activity(db, user_id, ActivityType.FILE_UNFAVOURITED, file_id)

    return {"message": "Removed from favourites successfully", "fileId": file_id, "fileTitle": file_title}
