import enum

from sqlalchemy import Column, Integer, Enum, ForeignKey, TIMESTAMP, text
from sqlalchemy.orm import relationship
from .base import Base


class ActivityType(str, enum.Enum):
    FILE_CREATED = "FILE_CREATED"
    FILE_UPDATED = "FILE_UPDATED"
    FILE_DELETED = "FILE_DELETED"
    FILE_SHARED = "FILE_SHARED"
    FILE_UNSHARED = "FILE_UNSHARED"
    FILE_FAVOURITED = "FILE_FAVOURITED"
    FILE_UNFAVOURITED = "FILE_UNFAVOURITED"
    FILE_TRASHED = "FILE_TRASHED"
    FILE_RESTORED = "FILE_RESTORED"
    FRIEND_REQUEST_SENT = "FRIEND_REQUEST_SENT"
    FRIEND_REQUEST_ACCEPTED = "FRIEND_REQUEST_ACCEPTED"
    FRIEND_REQUEST_REJECTED = "FRIEND_REQUEST_REJECTED"
    FRIENDSHIP_BLOCKED = "FRIENDSHIP_BLOCKED"


class Activity(Base):
    __tablename__ = "activity"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    user_id    = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    file_id    = Column(Integer, ForeignKey("file.id", ondelete="SET NULL"), nullable=True)
    action     = Column(Enum(ActivityType, name="activity_type_enum"), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    user = relationship("User", back_populates="activities")
    file = relationship("File", back_populates="activities")
