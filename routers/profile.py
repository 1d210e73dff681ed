import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from db import get_db
from models.user import User
from routers.auth import clear_token_cookie
from schemas.user import ProfileUpdate
from services.serializers import serialize_user
from utils.email_utils import normalize_email
from utils.jwt_utils import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _taken(db: Session, column, value: str, user_id: int) -> bool:
    return db.query(User.id).filter(column == value, User.id != user_id).first() is not None


@router.get("")
def get_profile(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return {"user": serialize_user(_get_user_or_404(db, user_id))}


@router.patch("")
def update_profile(
    req: ProfileUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Update display name, email and phone. Username, password and the admin
    flag are never touched here; an empty string clears email or phone.
    """
    user = _get_user_or_404(db, user_id)

    if req.name is not None:
        user.name = req.name.strip() or None
    if req.email is not None:
        email = normalize_email(req.email) if req.email.strip() else None
        if email and _taken(db, func.lower(User.email), email.lower(), user_id):
            raise HTTPException(status_code=409, detail="Email already exists")
        user.email = email
    if req.phone is not None:
        phone = req.phone.strip() or None
        if phone and _taken(db, User.phone, phone, user_id):
            raise HTTPException(status_code=409, detail="Phone number already exists")
        user.phone = phone

    if not user.email and not user.phone:
        db.rollback()
        raise HTTPException(status_code=400, detail="Either email or phone number is required")

    db.commit()
    db.refresh(user)
    return {"message": "Profile updated successfully", "user": serialize_user(user)}


@router.delete("")
def delete_account(
    response: Response,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted account %s", user_id)

    clear_token_cookie(response)
    return {"message": "Account deleted successfully"}


# ─────────────────────────────────────────────
# 다른 사용자 프로필 (읽기 전용)
# ─────────────────────────────────────────────
@router.get("/{profile_id}")
def get_public_profile(profile_id: int, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, profile_id)
    return {"user": {**user.summary(with_email=False), "createdAt": user.created_at}}


@router.patch("/{profile_id}")
@router.delete("/{profile_id}")
def modify_other_profile(profile_id: int):
    raise HTTPException(status_code=403, detail="Not allowed")
