import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from models.activity import ActivityType
from models.friendship import Friendship, FriendshipStatus, can_transition
from schemas.friendship import FriendRequestCreate
from services.serializers import serialize_friendship, paginate
from utils.activity import log_activity
from utils.identifier import find_user_by_identifier
from utils.jwt_utils import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/friendships", tags=["Friendships"])

ALREADY_EXISTS = "Friendship or request already exists"


def _get_friendship_or_404(db: Session, friendship_id: int) -> Friendship:
    friendship = db.query(Friendship).filter(Friendship.id == friendship_id).first()
    if not friendship:
        raise HTTPException(status_code=404, detail="Friendship not found")
    return friendship


def _other_user_row(friendship: Friendship, user_id: int) -> dict:
    other = friendship.friend if friendship.user_id == user_id else friendship.user
    return {
        "id": other.id,
        "username": other.username,
        "name": other.name,
        "email": other.email,
        "status": friendship.status.value,
        "friendshipId": friendship.id,
        "createdAt": friendship.created_at,
        "updatedAt": friendship.updated_at,
    }


def _respond_to_request(
    db: Session,
    friendship_id: int,
    user_id: int,
    target: FriendshipStatus,
    action: ActivityType,
) -> Friendship:
    friendship = _get_friendship_or_404(db, friendship_id)
    # only the addressee answers a request
    if friendship.friend_id != user_id:
        raise HTTPException(status_code=403, detail="Only the recipient can respond to this friend request")
    if friendship.status != FriendshipStatus.PENDING:
        raise HTTPException(status_code=400, detail="This friend request is no longer pending")

    friendship.status = target
    db.commit()
    db.refresh(friendship)
    log_activity(db, user_id, action)
    return friendship


@router.post("", status_code=status.HTTP_201_CREATED)
def send_request(
    req: FriendRequestCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    raw = req.raw_identifier()
    if not raw or not raw.strip():
        raise HTTPException(status_code=400, detail="A username or email is required")

    friend = find_user_by_identifier(db, raw)
    if not friend:
        raise HTTPException(status_code=404, detail="User not found")
    if friend.id == user_id:
        raise HTTPException(status_code=400, detail="You cannot send a friend request to yourself")

    existing = db.query(Friendship).filter(or_(
        (Friendship.user_id == user_id) & (Friendship.friend_id == friend.id),
        (Friendship.user_id == friend.id) & (Friendship.friend_id == user_id),
    )).first()
    if existing:
        raise HTTPException(status_code=400, detail=ALREADY_EXISTS)

    friendship = Friendship(user_id=user_id, friend_id=friend.id, status=FriendshipStatus.PENDING)
    db.add(friendship)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request for the same pair won the race
        db.rollback()
        raise HTTPException(status_code=400, detail=ALREADY_EXISTS)
    db.refresh(friendship)
    log_activity(db, user_id, ActivityType.FRIEND_REQUEST_SENT)
    logger.info("User %s sent a friend request to %s", user_id, friend.id)

    return {"message": "Friend request sent", "friendship": serialize_friendship(friendship, with_users=True)}


@router.get("")
def list_friendships(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    sent: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    if sent:
        query = db.query(Friendship).filter(Friendship.user_id == user_id)
    else:
        query = db.query(Friendship).filter(
            or_(Friendship.user_id == user_id, Friendship.friend_id == user_id)
        )

    if status_filter:
        try:
            query = query.filter(Friendship.status == FriendshipStatus(status_filter.upper()))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status. Must be PENDING, ACCEPTED, REJECTED or BLOCKED")

    total = query.count()
    friendships = (
        query.order_by(Friendship.updated_at.desc(), Friendship.id.desc())
        .offset(offset).limit(limit).all()
    )
    return {
        "friends": [_other_user_row(f, user_id) for f in friendships],
        "total": total,
        "pagination": paginate(total, limit, offset),
    }


@router.get("/pending")
def pending_requests(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    query = db.query(Friendship).filter(
        Friendship.friend_id == user_id,
        Friendship.status == FriendshipStatus.PENDING,
    )
    total = query.count()
    requests = (
        query.order_by(Friendship.created_at.desc(), Friendship.id.desc())
        .offset(offset).limit(limit).all()
    )
    return {
        "requests": [
            {
                "id": f.id,
                "status": f.status.value,
                "createdAt": f.created_at,
                "from": f.user.summary(),
            }
            for f in requests
        ],
        "total": total,
        "pagination": paginate(total, limit, offset),
    }


@router.get("/{friendship_id}")
def get_friendship(
    friendship_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    friendship = _get_friendship_or_404(db, friendship_id)
    if not friendship.involves(user_id):
        raise HTTPException(status_code=403, detail="You don't have permission to view this friendship")
    return {"friendship": serialize_friendship(friendship, with_users=True)}


@router.delete("/{friendship_id}")
def delete_friendship(
    friendship_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    friendship = _get_friendship_or_404(db, friendship_id)
    if not friendship.involves(user_id):
        raise HTTPException(status_code=403, detail="You don't have permission to delete this friendship")

    db.delete(friendship)
    db.commit()
    log_activity(db, user_id, ActivityType.FRIEND_REQUEST_REJECTED)

    return {"message": "Friendship removed", "friendshipId": friendship_id}


@router.api_route("/{friendship_id}/accept", methods=["POST", "PATCH"])
def accept_request(
    friendship_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    friendship = _respond_to_request(
        db, friendship_id, user_id, FriendshipStatus.ACCEPTED, ActivityType.FRIEND_REQUEST_ACCEPTED
    )
    return {"message": "Friend request accepted", "friendship": serialize_friendship(friendship, with_users=True)}


@router.api_route("/{friendship_id}/reject", methods=["POST", "PATCH"])
def reject_request(
    friendship_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    friendship = _respond_to_request(
        db, friendship_id, user_id, FriendshipStatus.REJECTED, ActivityType.FRIEND_REQUEST_REJECTED
    )
    return {"message": "Friend request rejected", "friendship": serialize_friendship(friendship, with_users=True)}


@router.api_route("/{friendship_id}/block", methods=["POST", "PATCH"])
def block(
    friendship_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    friendship = _get_friendship_or_404(db, friendship_id)
    if not friendship.involves(user_id):
        raise HTTPException(status_code=403, detail="You don't have permission to block this user")
    if not can_transition(friendship.status, FriendshipStatus.BLOCKED):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot block a friendship that is {friendship.status.value}",
        )

    friendship.status = FriendshipStatus.BLOCKED
    db.commit()
    db.refresh(friendship)
    log_activity(db, user_id, ActivityType.FRIENDSHIP_BLOCKED)

    return {"message": "User blocked", "friendship": serialize_friendship(friendship, with_users=True)}
