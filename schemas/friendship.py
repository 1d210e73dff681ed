from typing import Optional

from pydantic import BaseModel


class FriendRequestCreate(BaseModel):
    identifier: Optional[str] = None
    friendUsername: Optional[str] = None
    friendEmail: Optional[str] = None

    def raw_identifier(self) -> Optional[str]:
        return self.identifier or self.friendUsername or self.friendEmail
