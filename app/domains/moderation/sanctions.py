import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from app.domains.moderation.capabilities import coerce_content_type
from app.domains.moderation.entities import (ModeratorAction,
                                             NotificationType, OwnerResolution,
                                             UserWarning, WarningLevel)
from app.domains.moderation.notifications import NotificationService
from app.domains.moderation.repository import ModerationStore
from app.domains.moderation.resolution import resolve_owner
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

SUSPENSION_PERIOD = timedelta(days=7)
BAN_REASON = "Violation of community guidelines"
SYSTEM_MODERATOR = "system"


class SanctionEngine:
    """Warnings, suspensions and bans against the owner of a piece of content.

    Penalties are flat: every warning is MODERATE, every suspension lasts
    seven days, bans are permanent. When the owner cannot be resolved the
    call does nothing.
    """

    def __init__(
        self,
        store: ModerationStore,
        notifications: NotificationService,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.notifications = notifications
        self.clock = clock

    async def _resolve(self, content_type: Any, content_id: str) -> Optional[OwnerResolution]:
        resolution = await resolve_owner(self.store, content_type, content_id)
        if not resolution.ok:
            logger.info(f"Sanction skipped for {content_type} {content_id}: {resolution.error.value}")
            return None
        return resolution

    async def issue_warning(self, content_type: Any, content_id: str, moderator_id: Optional[str] = None) -> None:
        resolution = await self._resolve(content_type, content_id)
        if resolution is None:
            return

        content_type = coerce_content_type(content_type)
        kind = content_type.value.lower()
        await self.store.create_warning(
            UserWarning(
                user_id=resolution.user_id,
                reason=f"Moderation violation related to {kind}: {resolution.title}",
                warning_level=WarningLevel.MODERATE,
                content_type=content_type,
                content_id=content_id,
                moderator_id=moderator_id,
                created_at=self.clock(),
            )
        )
        await self.notifications.send_account_notice(
            resolution.user_id,
            NotificationType.WARNING,
            "Content Warning",
            f"Your {kind} \"{resolution.title}\" has been flagged for violating community guidelines.",
            data={"contentType": content_type.value, "contentId": content_id},
        )
        await self._audit("warn", resolution.user_id, moderator_id, content_type.value, content_id)

    async def suspend_user(self, content_type: Any, content_id: str, moderator_id: Optional[str] = None) -> None:
        resolution = await self._resolve(content_type, content_id)
        if resolution is None:
            return

        suspended_until = self.clock() + SUSPENSION_PERIOD
        await self.store.update_user(
            resolution.user_id, {"status": "SUSPENDED", "suspended_until": suspended_until}
        )
        await self.notifications.send_account_notice(
            resolution.user_id,
            NotificationType.ACCOUNT,
            "Account Suspended",
            "Your account has been suspended for 7 days due to violation of community guidelines.",
        )
        await self._audit(
            "suspend",
            resolution.user_id,
            moderator_id,
            coerce_content_type(content_type).value,
            content_id,
            suspended_until=suspended_until.isoformat(),
        )

    async def ban_user(self, content_type: Any, content_id: str, moderator_id: Optional[str] = None) -> None:
        resolution = await self._resolve(content_type, content_id)
        if resolution is None:
            return

        await self.store.update_user(
            resolution.user_id,
            {"status": "BANNED", "ban_reason": BAN_REASON, "banned_at": self.clock()},
        )
        await self.notifications.send_account_notice(
            resolution.user_id,
            NotificationType.ACCOUNT,
            "Account Banned",
            "Your account has been permanently banned due to severe violation of community guidelines.",
        )
        await self._audit("ban", resolution.user_id, moderator_id, coerce_content_type(content_type).value, content_id)

    async def _audit(
        self,
        action_type: str,
        user_id: str,
        moderator_id: Optional[str],
        content_type: str,
        content_id: str,
        **extra: Any,
    ) -> None:
        details: Dict[str, Any] = {"content_type": content_type, "content_id": content_id, **extra}
        await self.store.record_moderator_action(
            ModeratorAction(
                action_id=str(uuid.uuid4()),
                moderator_id=moderator_id or SYSTEM_MODERATOR,
                action_type=action_type,
                target_user=user_id,
                timestamp=self.clock(),
                details=details,
            )
        )
