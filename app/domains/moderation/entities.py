from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from app.shared.schemas.delivery import DeliveryResult


class ContentType(str, Enum):
    POST = "POST"
    COMMENT = "COMMENT"
    PRODUCT = "PRODUCT"
    RESOURCE = "RESOURCE"
    GROUP = "GROUP"
    EVENT = "EVENT"
    PROFILE = "PROFILE"
    MESSAGE = "MESSAGE"


class ModerationAction(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WARNING_ISSUED = "WARNING_ISSUED"
    CONTENT_EDITED = "CONTENT_EDITED"
    USER_SUSPENDED = "USER_SUSPENDED"
    USER_BANNED = "USER_BANNED"
    RESTRICTED_VISIBILITY = "RESTRICTED_VISIBILITY"
    NO_ACTION = "NO_ACTION"


class ResourceModerationAction(str, Enum):
    """Decisions taken from the resource review screens"""

    APPROVE = "approve"
    REJECT = "reject"
    ARCHIVE = "archive"
    FEATURE = "feature"
    UNFEATURE = "unfeature"

    @property
    def description(self) -> str:
        return ACTION_DESCRIPTIONS[self]


ACTION_DESCRIPTIONS = {
    ResourceModerationAction.APPROVE: "approved",
    ResourceModerationAction.REJECT: "rejected",
    ResourceModerationAction.ARCHIVE: "archived",
    ResourceModerationAction.FEATURE: "featured",
    ResourceModerationAction.UNFEATURE: "unfeatured (removed from featured)",
}


class WarningLevel(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"


class NotificationType(str, Enum):
    WARNING = "WARNING"
    ACCOUNT = "ACCOUNT"
    MODERATION = "MODERATION"
    ADMIN_MODERATION = "ADMIN_MODERATION"
    MODERATION_BATCH = "MODERATION_BATCH"
    ADMIN_MODERATION_BATCH = "ADMIN_MODERATION_BATCH"


@dataclass
class ModerationItem:
    content_type: ContentType
    content_id: str
    moderator_id: Optional[str] = None
    content_edits: Optional[Dict[str, Any]] = None


@dataclass
class UserWarning:
    user_id: str
    reason: str
    warning_level: WarningLevel
    content_type: ContentType
    content_id: str
    moderator_id: Optional[str]
    created_at: datetime


@dataclass
class Notification:
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    read: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ModeratorAction:
    action_id: str
    moderator_id: str
    action_type: str  # warn, suspend, ban
    target_user: str
    timestamp: datetime
    details: Dict


@dataclass
class ResourceModerationLog:
    resource_id: str
    moderator_id: str
    action: ResourceModerationAction
    reason: Optional[str]
    previous_status: Optional[str]
    batch_id: Optional[str]
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class NotificationPreferences:
    email: bool = True
    in_app: bool = True
    batch_summary: bool = False

    @property
    def any_channel(self) -> bool:
        return self.email or self.in_app


class ResolutionError(str, Enum):
    CONTENT_NOT_FOUND = "content_not_found"
    OWNER_MISSING = "owner_missing"
    UNSUPPORTED_TYPE = "unsupported_type"


@dataclass(frozen=True)
class OwnerResolution:
    """Either a resolved owner or the reason it could not be found"""

    user_id: Optional[str] = None
    title: Optional[str] = None
    error: Optional[ResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.user_id is not None and self.error is None


@dataclass(frozen=True)
class DeliveryReport:
    """Outcome of one recipient across both channels"""

    in_app: DeliveryResult
    email: DeliveryResult

    @property
    def any_delivered(self) -> bool:
        return self.in_app.ok or self.email.ok


@dataclass
class BatchNotificationResult:
    authors: int = 0
    admins: int = 0


@dataclass
class BulkModerationResult:
    success: bool
    processed: int
    failed: int
    batch_id: str
    failed_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None
    notifications_sent: Optional[BatchNotificationResult] = None
