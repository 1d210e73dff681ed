from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint, text
from sqlalchemy.orm import relationship
from .base import Base


class Trash(Base):
    """A file sitting in one user's trash view. Removing the row restores the file."""
    __tablename__ = "trash"
    __table_args__ = (
        UniqueConstraint("user_id", "file_id", name="uq_trash_user_file"),
    )

    id         = Column(Integer, primary_key=True, autoincrement=True)
    user_id    = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    file_id    = Column(Integer, ForeignKey("file.id", ondelete="CASCADE"), nullable=False)
    deleted_at = Column(TIMESTAMP, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    user = relationship("User", back_populates="trash_items")
    file = relationship("File", back_populates="trash_items")
