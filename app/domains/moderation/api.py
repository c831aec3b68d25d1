# app/domains/moderation/api.py
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from app.core.feature_flags import feature_flags
from app.domains.auth.dependencies import get_current_claims, require_moderator
from app.domains.moderation.analytics import get_moderation_counters
from app.domains.moderation.entities import (ContentType, ModerationAction,
                                             ModerationItem,
                                             ResourceModerationAction)
from app.domains.moderation.service import ModerationService
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()
admin_router = APIRouter()


class ModeratorActionRequest(BaseModel):
    content_type: ContentType
    content_id: str
    action: Optional[ModerationAction] = None
    content_edits: Optional[Dict[str, Any]] = None


class BulkModerationRequest(BaseModel):
    resource_ids: List[str] = Field(default_factory=list)
    action: ResourceModerationAction
    reason: Optional[str] = None
    send_notifications: bool = True


class BatchNotifyRequest(BaseModel):
    action: ResourceModerationAction
    reason: Optional[str] = None


def get_moderation_service(request: Request) -> ModerationService:
    service = getattr(request.app.state, "moderation", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Moderation service not ready")
    return service


@admin_router.post("/actions")
async def apply_moderator_action(
    request: ModeratorActionRequest,
    moderator=Depends(require_moderator),
    service: ModerationService = Depends(get_moderation_service),
):
    """Apply one moderator decision to a piece of content"""
    item = ModerationItem(
        content_type=request.content_type,
        content_id=request.content_id,
        moderator_id=moderator["sub"],
        content_edits=request.content_edits,
    )
    await service.moderate(item, request.action)
    return {
        "success": True,
        "content_type": request.content_type.value,
        "content_id": request.content_id,
        "action": request.action.value if request.action else None,
    }


@admin_router.post("/bulk")
async def bulk_moderate_resources(
    request: BulkModerationRequest,
    moderator=Depends(require_moderator),
    service: ModerationService = Depends(get_moderation_service),
):
    result = await service.perform_bulk_moderation(
        request.resource_ids,
        request.action,
        moderator["sub"],
        reason=request.reason,
        send_notifications=request.send_notifications,
    )
    if result.error:
        raise HTTPException(status_code=400, detail=result.error)
    return asdict(result)


@admin_router.post("/batches/{batch_id}/notify")
async def resend_batch_notifications(
    batch_id: str,
    request: BatchNotifyRequest,
    moderator=Depends(require_moderator),
    service: ModerationService = Depends(get_moderation_service),
):
    """Re-run the fan-out for an already applied bulk decision"""
    result = await service.notifications.send_batch_moderation_notifications(
        batch_id, request.action, moderator["sub"], request.reason
    )
    return asdict(result)


@admin_router.get("/analytics/summary")
async def analytics_summary(moderator=Depends(require_moderator)):
    return {
        "counters": await get_moderation_counters(),
        "flags": await feature_flags.get_all(),
    }


@router.get("/preferences")
async def get_my_notification_preferences(
    user=Depends(get_current_claims),
    service: ModerationService = Depends(get_moderation_service),
):
    preferences = await service.notifications.get_user_notification_preferences(user["sub"])
    return asdict(preferences)
