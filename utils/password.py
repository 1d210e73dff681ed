import bcrypt
from fastapi import HTTPException

MIN_PASSWORD_LENGTH = 8
BCRYPT_ROUNDS = 12


def check_password_strength(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(candidate: str, hashed: str) -> bool:
    """Constant-time bcrypt comparison; malformed hashes count as a mismatch."""
    try:
        return bcrypt.checkpw(candidate.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
