# app/core/middleware.py
"""Edge gate in front of the moderation API.

Checks run in a fixed order and the first failure answers immediately:
rate limit (429), body validation (415 / 413), moderator authorization
(403). Requests that pass get rate-limit headers and, for reads,
cache-control headers.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.cache_control import cache_category_for_path, get_cache_control_headers
from app.core.config import Settings, settings
from app.core.feature_flags import get_moderation_feature_flag
from app.core.rate_limiter import RateLimitResult, SlidingWindowRateLimiter, build_rate_limiter
from app.domains.auth.service import get_session_claims, has_moderation_access
from app.shared.schemas.events import AIModerationRequest
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

MODERATION_PREFIXES = ("/api/moderation", "/api/admin/moderation")
AI_PREFIXES = ("/api/moderation/ai-check", "/api/admin/moderation/ai")
ADMIN_PREFIX = "/api/admin/moderation"
BODY_METHODS = ("POST", "PUT", "PATCH")
CACHEABLE_METHODS = ("GET", "HEAD")

FlagLookup = Callable[[str, Any], Awaitable[Any]]


@dataclass(frozen=True)
class GateRoute:
    namespace: str
    limiter: SlidingWindowRateLimiter
    max_body_bytes: int
    is_ai: bool
    is_admin: bool


def _error(status_code: int, error: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
        headers=headers,
    )


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


def _matches(path: str, prefixes) -> bool:
    return any(path == p or path.startswith(p + "/") for p in prefixes)


class ModerationGate:
    def __init__(
        self,
        general_limiter: SlidingWindowRateLimiter,
        ai_limiter: SlidingWindowRateLimiter,
        general_max_body: int,
        ai_max_body: int,
        flags: FlagLookup = get_moderation_feature_flag,
        tracker=None,
    ):
        self.general_limiter = general_limiter
        self.ai_limiter = ai_limiter
        self.general_max_body = general_max_body
        self.ai_max_body = ai_max_body
        self.flags = flags
        self.tracker = tracker

    def classify(self, path: str) -> Optional[GateRoute]:
        if not _matches(path, MODERATION_PREFIXES):
            return None
        is_ai = _matches(path, AI_PREFIXES)
        is_admin = path.startswith(ADMIN_PREFIX)
        if is_ai:
            return GateRoute("ai-moderation", self.ai_limiter, self.ai_max_body, True, is_admin)
        return GateRoute("moderation", self.general_limiter, self.general_max_body, False, is_admin)

    async def __call__(self, request: Request, call_next) -> Response:
        route = self.classify(request.url.path)
        if route is None:
            return await call_next(request)

        rate: Optional[RateLimitResult] = None
        if await self.flags("enableRateLimiting", True):
            rate = await route.limiter.limit_request(f"{route.namespace}-{client_ip(request)}")
            if not rate.success:
                logger.info(f"Rate limit exceeded for {route.namespace} from {client_ip(request)}")
                return _error(429, "Too many requests", "Rate limit exceeded. Please try again later.", rate.headers())

        if request.method in BODY_METHODS:
            rejection = self._validate_body(request, route)
            if rejection is not None:
                return rejection

        if route.is_admin:
            claims = get_session_claims(request)
            if not has_moderation_access(claims):
                return _error(403, "Unauthorized", "You do not have permission to access this resource")
            request.state.user = claims

        if route.is_ai and self.tracker is not None:
            await self._track_ai_request(request)

        response = await call_next(request)

        if request.method in CACHEABLE_METHODS and response.status_code < 400:
            flag = "enableAIEdgeCaching" if route.is_ai else "enableEdgeCaching"
            if await self.flags(flag, True):
                response.headers.update(
                    get_cache_control_headers(
                        cache_category_for_path(request.url.path), stale_while_revalidate=True
                    )
                )
        if rate is not None:
            response.headers.update(rate.headers())
        return response

    def _validate_body(self, request: Request, route: GateRoute) -> Optional[JSONResponse]:
        content_type = request.headers.get("content-type") or ""
        if "application/json" not in content_type:
            return _error(415, "Invalid content type", "Content-Type must be application/json")

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > route.max_body_bytes:
            return _error(
                413,
                "Content too large",
                f"Request body exceeds maximum size of {route.max_body_bytes} bytes",
            )
        return None

    async def _track_ai_request(self, request: Request):
        params = request.query_params
        await self.tracker.track_ai_request(
            AIModerationRequest(
                content_type=params.get("contentType", "comment"),
                content_id=params.get("contentId", "unknown"),
                endpoint=request.url.path,
            )
        )


def build_moderation_gate(config: Settings = settings, tracker=None) -> ModerationGate:
    return ModerationGate(
        general_limiter=build_rate_limiter(
            config.RATE_LIMIT_STORE,
            config.MODERATION_RATE_LIMIT,
            config.RATE_LIMIT_WINDOW_SECONDS,
            prefix="moderation:ratelimit",
        ),
        ai_limiter=build_rate_limiter(
            config.RATE_LIMIT_STORE,
            config.AI_MODERATION_RATE_LIMIT,
            config.RATE_LIMIT_WINDOW_SECONDS,
            prefix="ai-moderation:ratelimit",
        ),
        general_max_body=config.MODERATION_MAX_BODY_BYTES,
        ai_max_body=config.AI_MODERATION_MAX_BODY_BYTES,
        tracker=tracker,
    )
