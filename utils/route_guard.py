from typing import Optional

from starlette.requests import Request
from starlette.responses import RedirectResponse

from utils.jwt_utils import TOKEN_COOKIE_NAME

PASSTHROUGH_PREFIXES = ("/_next", "/api", "/public", "/static", "/docs", "/openapi.json", "/redoc")
AUTH_PATHS = ("/login", "/register")
PROTECTED_ROOTS = ("/files", "/friends", "/shared", "/activities", "/favourites", "/trash")
LOGIN_PATH = "/login"
HOME_PATH = "/files"


def _under(path: str, roots) -> bool:
    return any(path == root or path.startswith(root + "/") for root in roots)


def resolve_redirect(path: str, has_token: bool) -> Optional[str]:
    """Where a browser navigation to ``path`` should be sent, or None to let it through."""
    if path == "/" or path == "/favicon.ico" or path.startswith(PASSTHROUGH_PREFIXES):
        return None
    if not has_token and _under(path, PROTECTED_ROOTS):
        return LOGIN_PATH
    if has_token and _under(path, AUTH_PATHS):
        return HOME_PATH
    return None


async def route_guard(request: Request, call_next):
    # Only checks cookie presence; API routes verify the token themselves
    target = resolve_redirect(request.url.path, bool(request.cookies.get(TOKEN_COOKIE_NAME)))
    if target is not None:
        return RedirectResponse(url=target, status_code=307)
    return await call_next(request)
