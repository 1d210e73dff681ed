from typing import List, Optional

from pydantic import BaseModel, Field


class ShareCreate(BaseModel):
    fileId: Optional[int] = None
    # free text: "alice", "Alice <alice@example.com>", ...
    identifier: Optional[str] = None
    permission: Optional[str] = "VIEW"


class ShareUpdate(BaseModel):
    permission: Optional[str] = None


class ShareBulkAction(BaseModel):
    action: Optional[str] = None
    shareIds: Optional[List[int]] = None


class ShareBulkRemove(BaseModel):
    shareIds: List[int] = Field(default_factory=list)
