from typing import Iterable, Optional

from starlette.requests import Request

from app.core.config import settings
from app.shared.utils.security import decode_token

MODERATION_ROLES = frozenset({"ADMIN", "MODERATOR"})
MODERATION_PERMISSIONS = frozenset({"MODERATE_CONTENT", "MODERATE_ALL"})


def extract_session_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_session_claims(request: Request) -> Optional[dict]:
    token = extract_session_token(request)
    if not token:
        return None
    return decode_token(token)


def has_moderation_access(claims: Optional[dict]) -> bool:
    if not claims:
        return False
    if claims.get("role") in MODERATION_ROLES:
        return True
    permissions: Iterable[str] = claims.get("permissions") or ()
    return any(p in MODERATION_PERMISSIONS for p in permissions)
