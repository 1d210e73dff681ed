from typing import Optional

from sqlalchemy.orm import Session

from models.favourite import Favourite
from models.file import File
from models.share import FileShare
from models.trash import Trash
from schemas.file import FileResponse


def is_favourite(db: Session, file_id: int, user_id: int) -> bool:
    return db.query(Favourite.id).filter(
        Favourite.file_id == file_id, Favourite.user_id == user_id
    ).first() is not None


def is_trashed(db: Session, file_id: int, user_id: int) -> bool:
    return db.query(Trash.id).filter(
        Trash.file_id == file_id, Trash.user_id == user_id
    ).first() is not None


def serialize_file(db: Session, file: File, user_id: int) -> FileResponse:
    """File with favourite/trash flags scoped to the calling user."""
    return FileResponse(
        id=file.id,
        title=file.title,
        content=file.content,
        isFavorite=is_favourite(db, file.id, user_id),
        isTrashed=is_trashed(db, file.id, user_id),
        createdAt=file.created_at,
        updatedAt=file.updated_at,
        userId=file.owner_id,
    )


def file_fields(file: File) -> dict:
    return {
        "id": file.id,
        "title": file.title,
        "content": file.content,
        "createdAt": file.created_at,
        "updatedAt": file.updated_at,
    }


def access_label(file: File, user_id: int, share: Optional[FileShare]) -> str:
    if file.owner_id == user_id:
        return "OWNER"
    return share.permission.value if share else "VIEW"


def serialize_user(user) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "phone": user.phone,
        "name": user.name,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


def serialize_share(share: FileShare) -> dict:
    return {
        "id": share.id,
        "fileId": share.file_id,
        "ownerId": share.owner_id,
        "sharedWithId": share.shared_with_id,
        "permission": share.permission.value,
        "createdAt": share.created_at,
        "file": file_fields(share.file),
        "owner": share.owner.summary(),
        "sharedWith": share.shared_with.summary(),
    }


def serialize_friendship(friendship, with_users: bool = False) -> dict:
    data = {
        "id": friendship.id,
        "userId": friendship.user_id,
        "friendId": friendship.friend_id,
        "status": friendship.status.value,
        "createdAt": friendship.created_at,
        "updatedAt": friendship.updated_at,
    }
    if with_users:
        data["user"] = friendship.user.summary()
        data["friend"] = friendship.friend.summary()
    return data


def paginate(total: int, limit: int, offset: int) -> dict:
    return {"limit": limit, "offset": offset, "hasMore": offset + limit < total}
