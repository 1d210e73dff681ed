from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, text
from sqlalchemy.orm import relationship
from .base import Base


class User(Base):
    __tablename__ = "user"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    username   = Column(String(50),  nullable=False, unique=True)
    email      = Column(String(150), nullable=True, unique=True)
    phone      = Column(String(30),  nullable=True, unique=True)
    password   = Column(String(255), nullable=False)
    name       = Column(String(100), nullable=True)
    is_admin   = Column(Boolean, nullable=False, server_default=text("0"))
    created_at = Column(TIMESTAMP, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, nullable=False,
                        server_default=text("CURRENT_TIMESTAMP"),
                        onupdate=text("CURRENT_TIMESTAMP"))

    # relations
    files       = relationship("File", back_populates="owner", cascade="all, delete-orphan")
    favourites  = relationship("Favourite", back_populates="user", cascade="all, delete-orphan")
    trash_items = relationship("Trash", back_populates="user", cascade="all, delete-orphan")
    activities  = relationship("Activity", back_populates="user", cascade="all, delete-orphan")
    shares_owned = relationship("FileShare", foreign_keys="FileShare.owner_id",
                                back_populates="owner", cascade="all, delete-orphan")
    shares_received = relationship("FileShare", foreign_keys="FileShare.shared_with_id",
                                   back_populates="shared_with", cascade="all, delete-orphan")
    friendships_sent = relationship("Friendship", foreign_keys="Friendship.user_id",
                                    back_populates="user", cascade="all, delete-orphan")
    friendships_received = relationship("Friendship", foreign_keys="Friendship.friend_id",
                                        back_populates="friend", cascade="all, delete-orphan")

    def summary(self, with_email: bool = True) -> dict:
        """Public display fields used wherever another user is embedded in a response."""
        data = {"id": self.id, "username": self.username, "name": self.name}
        if with_email:
            data["email"] = self.email
        return data
