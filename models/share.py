import enum

from sqlalchemy import Column, Integer, Enum, ForeignKey, TIMESTAMP, UniqueConstraint, text
from sqlalchemy.orm import relationship
from .base import Base


class SharePermission(str, enum.Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"


class FileShare(Base):
    __tablename__ = "file_share"
    __table_args__ = (
        UniqueConstraint("file_id", "shared_with_id", name="uq_file_share_recipient"),
    )

    id             = Column(Integer, primary_key=True, autoincrement=True)
    file_id        = Column(Integer, ForeignKey("file.id", ondelete="CASCADE"), nullable=False)
    owner_id       = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    shared_with_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    permission     = Column(Enum(SharePermission, name="share_permission_enum"),
                            nullable=False, default=SharePermission.VIEW)
    created_at     = Column(TIMESTAMP, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    file        = relationship("File", back_populates="shares")
    owner       = relationship("User", foreign_keys=[owner_id], back_populates="shares_owned")
    shared_with = relationship("User", foreign_keys=[shared_with_id], back_populates="shares_received")
