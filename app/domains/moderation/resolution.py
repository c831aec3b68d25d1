from typing import Any

from app.domains.moderation.capabilities import get_capability
from app.domains.moderation.entities import OwnerResolution, ResolutionError
from app.domains.moderation.repository import ModerationStore
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


async def resolve_owner(store: ModerationStore, content_type: Any, content_id: str) -> OwnerResolution:
    """Find the user who owns a piece of content.

    Profiles are owned by themselves and are never looked up. For every
    other type the content row is loaded and its owner column read; a
    missing row or an empty owner column is reported, not raised.
    """
    capability = get_capability(content_type)
    if capability is None:
        return OwnerResolution(error=ResolutionError.UNSUPPORTED_TYPE)

    if capability.owner_field is None:
        return OwnerResolution(user_id=content_id, title=capability.default_title)

    record = await store.find_content(capability.content_type, content_id)
    if record is None:
        logger.warning(f"{capability.content_type.value} {content_id} not found while resolving owner")
        return OwnerResolution(error=ResolutionError.CONTENT_NOT_FOUND)

    user_id = capability.owner_of(content_id, record)
    if not user_id:
        return OwnerResolution(title=capability.title_of(record), error=ResolutionError.OWNER_MISSING)

    return OwnerResolution(user_id=user_id, title=capability.title_of(record))
