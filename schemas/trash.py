from typing import List, Optional

from pydantic import BaseModel, Field


class TrashCreate(BaseModel):
    fileId: Optional[int] = None


class TrashBulkDelete(BaseModel):
    fileIds: List[int] = Field(default_factory=list)
    emptyTrash: bool = False


class TrashBulkRestore(BaseModel):
    fileIds: Optional[List[int]] = None
