from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FileCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class FileUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class FileResponse(BaseModel):
    id: int
    title: str
    content: str
    isFavorite: bool
    isTrashed: bool
    createdAt: datetime
    updatedAt: datetime
    userId: int


class FileEnvelope(BaseModel):
    file: FileResponse
    message: Optional[str] = None


class FavoriteToggleResponse(BaseModel):
    message: str
    isFavorite: bool


class TrashToggleResponse(BaseModel):
    message: str
    isTrashed: bool
