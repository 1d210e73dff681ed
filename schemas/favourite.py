from typing import List, Optional

from pydantic import BaseModel, Field


class FavouriteCreate(BaseModel):
    fileId: Optional[int] = None


class FavouriteBulkDelete(BaseModel):
    fileIds: List[int] = Field(default_factory=list)
