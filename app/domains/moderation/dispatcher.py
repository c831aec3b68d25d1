from typing import Any, Dict, Optional, Union

from app.domains.moderation.capabilities import get_capability
from app.domains.moderation.entities import ModerationAction
from app.domains.moderation.repository import ModerationStore
from app.domains.moderation.sanctions import SanctionEngine
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


class ModerationDispatcher:
    """Turns a moderator decision into writes on the target content.

    Content-state decisions (approve, reject, edit, restrict) write the
    content row directly; user-impact decisions go to the sanction engine.
    Content types without a registered capability are ignored.
    """

    def __init__(self, store: ModerationStore, sanctions: SanctionEngine):
        self.store = store
        self.sanctions = sanctions

    async def perform_moderator_action(
        self,
        content_type: Any,
        content_id: str,
        action: Optional[Union[ModerationAction, str]] = None,
        content_edits: Optional[Dict[str, Any]] = None,
        moderator_id: Optional[str] = None,
    ) -> None:
        if not action:
            return
        action = ModerationAction(action)
        if action == ModerationAction.NO_ACTION:
            return

        capability = get_capability(content_type)
        if capability is None:
            logger.warning(f"No moderation mapping for content type {content_type!r}, ignoring {action.value}")
            return
        content_type = capability.content_type

        if action == ModerationAction.APPROVED:
            await self.store.update_content(content_type, content_id, dict(capability.approve_fields))

        elif action == ModerationAction.REJECTED:
            await self.store.update_content(content_type, content_id, dict(capability.reject_fields))

        elif action == ModerationAction.CONTENT_EDITED:
            if content_edits:
                await self.store.update_content(content_type, content_id, capability.edit_fields(content_edits))
            else:
                logger.info(f"CONTENT_EDITED on {content_type.value} {content_id} without edits, skipped")

        elif action == ModerationAction.RESTRICTED_VISIBILITY:
            await self.store.update_content(content_type, content_id, dict(capability.restrict_fields))

        elif action == ModerationAction.WARNING_ISSUED:
            await self.sanctions.issue_warning(content_type, content_id, moderator_id)

        elif action == ModerationAction.USER_SUSPENDED:
            await self.sanctions.suspend_user(content_type, content_id, moderator_id)

        elif action == ModerationAction.USER_BANNED:
            await self.sanctions.ban_user(content_type, content_id, moderator_id)
