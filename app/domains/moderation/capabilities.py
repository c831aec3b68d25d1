"""Per-content-type field mapping used by the dispatcher and sanctions.

Each ContentType is registered once with the fields a decision writes,
the column holding its owner and the fields a moderator may edit.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from app.domains.moderation.entities import ContentType

RESTRICTED = "RESTRICTED"


@dataclass(frozen=True)
class ContentCapability:
    content_type: ContentType
    approve_fields: Dict[str, Any]
    reject_fields: Dict[str, Any]
    editable_fields: Tuple[str, ...]
    # None means the content id is itself the owner (profiles)
    owner_field: Optional[str]
    title_field: Optional[str]
    default_title: str
    restrict_fields: Dict[str, Any] = field(
        default_factory=lambda: {"visibility": RESTRICTED, "sensitive_content": True}
    )

    def edit_fields(self, edits: Dict[str, Any]) -> Dict[str, Any]:
        """Editable keys present in ``edits`` plus the moderated marker"""
        fields = {name: edits[name] for name in self.editable_fields if name in edits}
        fields["moderated"] = True
        return fields

    def owner_of(self, content_id: str, record: Dict[str, Any]) -> Optional[str]:
        if self.owner_field is None:
            return content_id
        return record.get(self.owner_field)

    def title_of(self, record: Optional[Dict[str, Any]]) -> str:
        if record and self.title_field:
            return record.get(self.title_field) or self.default_title
        return self.default_title


CAPABILITIES: Dict[ContentType, ContentCapability] = {
    cap.content_type: cap
    for cap in (
        ContentCapability(
            content_type=ContentType.POST,
            approve_fields={"published": True, "status": "PUBLISHED"},
            reject_fields={"published": False, "status": "REJECTED"},
            editable_fields=("title", "content"),
            owner_field="author_id",
            title_field="title",
            default_title="post",
        ),
        ContentCapability(
            content_type=ContentType.COMMENT,
            approve_fields={"visible": True, "status": "APPROVED"},
            reject_fields={"visible": False, "status": "REJECTED"},
            editable_fields=("content",),
            owner_field="author_id",
            title_field=None,
            default_title="comment",
        ),
        ContentCapability(
            content_type=ContentType.PRODUCT,
            approve_fields={"status": "ACTIVE", "moderation_approved": True},
            reject_fields={"status": "REJECTED", "moderation_approved": False},
            editable_fields=("name", "description"),
            owner_field="seller_id",
            title_field="name",
            default_title="product",
        ),
        ContentCapability(
            content_type=ContentType.RESOURCE,
            approve_fields={"published": True, "status": "PUBLISHED"},
            reject_fields={"published": False, "status": "REJECTED"},
            editable_fields=("title", "description", "content"),
            owner_field="author_id",
            title_field="title",
            default_title="resource",
        ),
        ContentCapability(
            content_type=ContentType.GROUP,
            approve_fields={"status": "ACTIVE", "moderation_approved": True},
            reject_fields={"status": "REJECTED", "moderation_approved": False},
            editable_fields=("name", "description"),
            owner_field="owner_id",
            title_field="name",
            default_title="group",
        ),
        ContentCapability(
            content_type=ContentType.EVENT,
            approve_fields={"published": True, "status": "ACTIVE"},
            reject_fields={"published": False, "status": "REJECTED"},
            editable_fields=("title", "description"),
            owner_field="creator_id",
            title_field="title",
            default_title="event",
        ),
        ContentCapability(
            content_type=ContentType.PROFILE,
            approve_fields={"profile_verified": True, "profile_status": "VERIFIED"},
            reject_fields={"profile_verified": False, "profile_status": "REJECTED"},
            editable_fields=("name", "bio"),
            owner_field=None,
            title_field=None,
            default_title="profile",
            restrict_fields={"profile_visibility": RESTRICTED},
        ),
        ContentCapability(
            content_type=ContentType.MESSAGE,
            approve_fields={"visible": True, "status": "DELIVERED"},
            reject_fields={"visible": False, "status": "BLOCKED"},
            editable_fields=("content",),
            owner_field="sender_id",
            title_field=None,
            default_title="message",
        ),
    )
}


def coerce_content_type(value: Any) -> Optional[ContentType]:
    if isinstance(value, ContentType):
        return value
    try:
        return ContentType(str(value).upper())
    except ValueError:
        return None


def get_capability(content_type: Any) -> Optional[ContentCapability]:
    """Capability for a type, None when the type is not registered"""
    resolved = coerce_content_type(content_type)
    if resolved is None:
        return None
    return CAPABILITIES.get(resolved)
