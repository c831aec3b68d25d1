# app/domains/moderation/service.py
import uuid
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from app.core.config import settings
from app.core.mailer import Mailer
from app.domains.content.models import ResourceStatus
from app.domains.moderation.analytics import ModerationTracker
from app.domains.moderation.cache import invalidate_moderation_cache
from app.domains.moderation.capabilities import coerce_content_type
from app.domains.moderation.dispatcher import ModerationDispatcher
from app.domains.moderation.entities import (BulkModerationResult,
                                             ContentType, ModerationAction,
                                             ModerationItem,
                                             ResourceModerationAction,
                                             ResourceModerationLog)
from app.domains.moderation.notifications import NotificationService
from app.domains.moderation.repository import ModerationStore, SqlModerationStore
from app.domains.moderation.sanctions import SanctionEngine
from app.shared.schemas.events import ModerationActionApplied
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

RESOURCE_STATUS_BY_ACTION = {
    ResourceModerationAction.APPROVE: ResourceStatus.PUBLISHED,
    ResourceModerationAction.REJECT: ResourceStatus.REJECTED,
    ResourceModerationAction.ARCHIVE: ResourceStatus.ARCHIVED,
    ResourceModerationAction.FEATURE: ResourceStatus.FEATURED,
    ResourceModerationAction.UNFEATURE: ResourceStatus.PUBLISHED,
}

CacheInvalidator = Callable[[str, str], Awaitable[bool]]


class ModerationService:
    def __init__(
        self,
        store: ModerationStore,
        dispatcher: ModerationDispatcher,
        notifications: NotificationService,
        tracker: Optional[ModerationTracker] = None,
        invalidate_cache: Optional[CacheInvalidator] = invalidate_moderation_cache,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.notifications = notifications
        self.tracker = tracker
        self.invalidate_cache = invalidate_cache

    async def moderate(
        self, item: ModerationItem, action: Optional[Union[ModerationAction, str]]
    ) -> None:
        """Apply one decision, then refresh caches and counters"""
        await self.dispatcher.perform_moderator_action(
            item.content_type, item.content_id, action, item.content_edits, item.moderator_id
        )
        if not action or ModerationAction(action) == ModerationAction.NO_ACTION:
            return

        action = ModerationAction(action)
        content_type = coerce_content_type(item.content_type)
        if content_type is None:
            return
        if self.invalidate_cache is not None:
            await self.invalidate_cache(content_type.value, item.content_id)
        if self.tracker is not None:
            await self.tracker.track_action(
                ModerationActionApplied(
                    content_type=content_type.value,
                    content_id=item.content_id,
                    action=action.value,
                    moderator_id=item.moderator_id,
                )
            )

    async def perform_bulk_moderation(
        self,
        resource_ids: Sequence[str],
        action: Union[ResourceModerationAction, str],
        moderator_id: str,
        reason: Optional[str] = None,
        send_notifications: bool = True,
    ) -> BulkModerationResult:
        if not resource_ids:
            return BulkModerationResult(
                success=False, processed=0, failed=0, batch_id="", error="No resource IDs provided"
            )

        action = ResourceModerationAction(action)
        batch_id = str(uuid.uuid4())
        target_status = RESOURCE_STATUS_BY_ACTION[action]
        failed_ids: List[str] = []
        processed = 0

        for resource_id in resource_ids:
            try:
                resource = await self.store.find_content(ContentType.RESOURCE, resource_id)
                if resource is None:
                    failed_ids.append(resource_id)
                    continue

                fields = {"status": target_status.value}
                if action == ResourceModerationAction.FEATURE:
                    fields["featured"] = True
                elif action == ResourceModerationAction.UNFEATURE:
                    fields["featured"] = False
                await self.store.update_content(ContentType.RESOURCE, resource_id, fields)

                await self.store.create_moderation_log(
                    ResourceModerationLog(
                        resource_id=resource_id,
                        moderator_id=moderator_id,
                        action=action,
                        reason=reason or f"Bulk {action.value} action",
                        previous_status=resource.get("status"),
                        batch_id=batch_id,
                        created_at=datetime.utcnow(),
                    )
                )
                processed += 1
            except Exception as e:
                failed_ids.append(resource_id)
                logger.error(f"Failed to process resource {resource_id}: {e}")

        notifications_sent = None
        if send_notifications and processed > 0:
            notifications_sent = await self.notifications.send_batch_moderation_notifications(
                batch_id, action, moderator_id, reason
            )

        return BulkModerationResult(
            success=processed > 0,
            processed=processed,
            failed=len(failed_ids),
            failed_ids=failed_ids,
            batch_id=batch_id,
            notifications_sent=notifications_sent,
        )


def build_moderation_service(
    store: Optional[ModerationStore] = None,
    mailer: Optional[Mailer] = None,
    tracker: Optional[ModerationTracker] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
    invalidate_cache: Optional[CacheInvalidator] = invalidate_moderation_cache,
) -> ModerationService:
    """Wire the moderation graph once; callers keep the returned instance"""
    store = store or SqlModerationStore()
    notifications = NotificationService(
        store=store,
        mailer=mailer or Mailer(),
        public_url=settings.PUBLIC_URL,
        tracker=tracker,
    )
    sanctions = SanctionEngine(store=store, notifications=notifications, clock=clock)
    dispatcher = ModerationDispatcher(store=store, sanctions=sanctions)
    return ModerationService(
        store=store,
        dispatcher=dispatcher,
        notifications=notifications,
        tracker=tracker,
        invalidate_cache=invalidate_cache,
    )
