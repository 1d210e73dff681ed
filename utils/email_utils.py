from email_validator import validate_email, EmailNotValidError
from fastapi import HTTPException


def normalize_email(email: str) -> str:
    """Syntax-check an address and return its normalized form (400 when invalid)."""
    try:
        # no DNS lookups: the address only has to be well-formed
        valid = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise HTTPException(status_code=400, detail="Invalid email address.")
    return valid.normalized
