from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.file import File
from models.share import FileShare, SharePermission


def get_file_or_404(db: Session, file_id: int) -> File:
    file = db.query(File).filter(File.id == file_id).first()
    if not file:
        raise HTTPException(status_code=404, detail="File not found")
    return file


def find_share(db: Session, file_id: int, user_id: int) -> Optional[FileShare]:
    return (
        db.query(FileShare)
        .filter(FileShare.file_id == file_id, FileShare.shared_with_id == user_id)
        .first()
    )


def require_owner(file: File, user_id: int, detail: str) -> None:
    if file.owner_id != user_id:
        raise HTTPException(status_code=403, detail=detail)


def require_read_access(db: Session, file: File, user_id: int, detail: str) -> Optional[FileShare]:
    """Owner or any share recipient may read. Returns the caller's share, if any."""
    if file.owner_id == user_id:
        return None
    share = find_share(db, file.id, user_id)
    if not share:
        raise HTTPException(status_code=403, detail=detail)
    return share


def require_edit_access(db: Session, file: File, user_id: int) -> None:
    if file.owner_id == user_id:
        return
    share = find_share(db, file.id, user_id)
    if not share or share.permission != SharePermission.EDIT:
        raise HTTPException(status_code=403, detail="You don't have permission to edit this file")


def parse_permission(value: Optional[str]) -> SharePermission:
    try:
        return SharePermission(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid permission. Must be VIEW or EDIT")
