from fastapi import HTTPException, Request

from .service import get_session_claims, has_moderation_access


async def get_current_claims(request: Request) -> dict:
    # The moderation gate already decoded the token for admin routes
    claims = getattr(request.state, "user", None) or get_session_claims(request)
    if not claims or not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return claims


async def require_moderator(request: Request) -> dict:
    claims = await get_current_claims(request)
    if not has_moderation_access(claims):
        raise HTTPException(status_code=403, detail="Forbidden")
    return claims
