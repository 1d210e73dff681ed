# routers/auth.py

import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from db import get_db
from models.user import User
from schemas.user import RegisterRequest, LoginRequest, AuthResponse
from services.serializers import serialize_user
from utils.email_utils import normalize_email
from utils.jwt_utils import create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES, TOKEN_COOKIE_NAME
from utils.password import check_password_strength, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def admin_usernames() -> set:
    raw = os.getenv("ADMIN_USERNAMES", "")
    return {name.strip().lower() for name in raw.split(",") if name.strip()}


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=os.getenv("ENVIRONMENT") == "production",
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


def clear_token_cookie(response: Response) -> None:
    response.delete_cookie(key=TOKEN_COOKIE_NAME, path="/", httponly=True, samesite="lax")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    if not req.username or not req.password:
        raise HTTPException(status_code=400, detail="Username and password are required")
    if not req.email and not req.phone:
        raise HTTPException(status_code=400, detail="Either email or phone number is required")
    check_password_strength(req.password)
    email = normalize_email(req.email) if req.email else None

    # uniqueness checks are case-insensitive: usernames and emails also serve as share/friend identifiers
    if db.query(User).filter(func.lower(User.username) == req.username.lower()).first():
        raise HTTPException(status_code=409, detail="Username already exists")
    if email and db.query(User).filter(func.lower(User.email) == email.lower()).first():
        raise HTTPException(status_code=409, detail="Email already exists")
    if req.phone and db.query(User).filter(User.phone == req.phone).first():
        raise HTTPException(status_code=409, detail="Phone number already exists")

    user = User(
        username=req.username,
        email=email,
        phone=req.phone or None,
        name=req.name or None,
        password=hash_password(req.password),
        is_admin=req.username.lower() in admin_usernames(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)

    token = create_access_token(user)
    set_token_cookie(response, token)
    return {"message": "Registration successful", "user": serialize_user(user), "token": token}


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    if not req.identifier or not req.password:
        raise HTTPException(status_code=400, detail="Identifier and password are required")

    identifier = req.identifier.strip()
    user = db.query(User).filter(or_(
        func.lower(User.username) == identifier.lower(),
        func.lower(User.email) == identifier.lower(),
        User.phone == identifier,
    )).first()
    if not user or not verify_password(req.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user)
    set_token_cookie(response, token)
    return {"message": "Login successful", "user": serialize_user(user), "token": token}


@router.post("/logout")
def logout(response: Response):
    clear_token_cookie(response)
    return {"message": "Logged out"}
