import enum

from sqlalchemy import Column, Integer, Enum, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint, text
from sqlalchemy.orm import relationship, validates
from .base import Base


class FriendshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    BLOCKED = "BLOCKED"


_TRANSITIONS = {
    FriendshipStatus.PENDING: {
        FriendshipStatus.ACCEPTED,
        FriendshipStatus.REJECTED,
        FriendshipStatus.BLOCKED,
    },
    FriendshipStatus.ACCEPTED: {FriendshipStatus.BLOCKED},
}


def can_transition(current: FriendshipStatus, target: FriendshipStatus) -> bool:
    return target in _TRANSITIONS.get(FriendshipStatus(current), set())


class Friendship(Base):
    """
    Directed edge: user_id sent the request, friend_id receives it.
    pair_low/pair_high hold the unordered pair so A->B and B->A cannot coexist.
    """
    __tablename__ = "friendship"
    __table_args__ = (
        UniqueConstraint("pair_low", "pair_high", name="uq_friendship_pair"),
        CheckConstraint("user_id <> friend_id", name="ck_friendship_not_self"),
    )

    id         = Column(Integer, primary_key=True, autoincrement=True)
    user_id    = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    friend_id  = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    pair_low   = Column(Integer, nullable=False)
    pair_high  = Column(Integer, nullable=False)
    status     = Column(Enum(FriendshipStatus, name="friendship_status_enum"),
                        nullable=False, default=FriendshipStatus.PENDING)
    created_at = Column(TIMESTAMP, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(TIMESTAMP, nullable=False,
                        server_default=text("CURRENT_TIMESTAMP"),
                        onupdate=text("CURRENT_TIMESTAMP"))

    user   = relationship("User", foreign_keys=[user_id], back_populates="friendships_sent")
    friend = relationship("User", foreign_keys=[friend_id], back_populates="friendships_received")

    @validates("user_id", "friend_id")
    def _track_pair(self, key, value):
        other = self.friend_id if key == "user_id" else self.user_id
        if value is not None and other is not None:
            self.pair_low, self.pair_high = min(value, other), max(value, other)
        return value

    def involves(self, user_id: int) -> bool:
        return user_id in (self.user_id, self.friend_id)
