import re
from typing import NamedTuple, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.user import User

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
TOKEN_SPLIT_RE = re.compile(r"[,\s]+")
WRAPPER_RE = re.compile(r"^[<\"'(]+|[>\"')]+$")


class Identifier(NamedTuple):
    email: Optional[str] = None
    username: Optional[str] = None


def parse_identifier(raw: Optional[str]) -> Identifier:
    """
    Pull a recipient out of free text such as ``Harsh <harsh@x.com> - note``.

    An email address anywhere in the text wins and is lower-cased. Otherwise
    the first whitespace/comma separated token is taken as a username, with
    surrounding quotes, angle brackets and parentheses stripped.
    """
    text = (raw or "").strip()
    match = EMAIL_RE.search(text)
    if match:
        return Identifier(email=match.group(0).lower())

    tokens = [t for t in TOKEN_SPLIT_RE.split(text) if t]
    if tokens:
        username = WRAPPER_RE.sub("", tokens[0])
        if username:
            return Identifier(username=username)
    return Identifier()


def find_user_by_identifier(db: Session, raw: Optional[str]) -> Optional[User]:
    """Case-insensitive lookup of the user named by ``raw``."""
    ident = parse_identifier(raw)
    if ident.email:
        return db.query(User).filter(func.lower(User.email) == ident.email).first()
    if ident.username:
        return db.query(User).filter(func.lower(User.username) == ident.username.lower()).first()
    return None
