from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class ModerationActionApplied(BaseModel):
    event: Literal["moderation:action_applied"] = "moderation:action_applied"
    content_type: str
    content_id: str
    action: str
    moderator_id: Optional[str] = None


class ModerationNotificationSent(BaseModel):
    event: Literal["moderation:notification_sent"] = "moderation:notification_sent"
    audience: Literal["author", "admins", "batch"]
    action: str
    moderator_id: Optional[str] = None
    resource_id: Optional[str] = None
    batch_id: Optional[str] = None
    recipients: int = 0


class AIModerationRequest(BaseModel):
    event: Literal["moderation:ai_request"] = "moderation:ai_request"
    content_type: str = "comment"
    content_id: str = "unknown"
    endpoint: str
    additional_data: Dict[str, str] = Field(default_factory=dict)
