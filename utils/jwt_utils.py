# utils/jwt_utils.py

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from fastapi import Cookie, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from models.user import User
from db import get_db

logger = logging.getLogger(__name__)

# Loaded from the environment; tokens live for 7 days unless overridden
SECRET_KEY                  = os.getenv("SECRET_KEY", "change_this_in_production")
ALGORITHM                   = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
TOKEN_COOKIE_NAME           = "token"

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user: User,
    expires_delta: timedelta | None = None
) -> str:
    """
    Sign a JWT for the user. The id travels both as the standard `sub`
    claim and as `userId`; username and email ride along for display.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {
        "sub": str(user.id),
        "userId": user.id,
        "username": user.username,
        "email": user.email,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_user_id(token: str) -> Optional[int]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        return None
    user_id = payload.get("userId") or payload.get("sub")
    try:
        return int(user_id)
    except (TypeError, ValueError):
        return None


def get_current_user_id(
    token: Optional[str] = Cookie(default=None, alias=TOKEN_COOKIE_NAME),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """
    Resolve the caller from the `token` cookie, falling back to an
    Authorization: Bearer header. Fails with 401 before any database access.
    """
    raw = token or (credentials.credentials if credentials else None)
    if not raw:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user_id = decode_user_id(raw)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user_id


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user


def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user
