# app/domains/moderation/repository.py
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select, update

from app.core.database import get_db
from app.domains.auth.models import User
from app.domains.auth.repository import get_user_by_id, list_staff_users
from app.domains.content.models import (Comment, Event, Group, Message, Post,
                                        Product, Resource)
from app.domains.moderation.entities import (ContentType, ModeratorAction,
                                             Notification,
                                             ResourceModerationAction,
                                             ResourceModerationLog,
                                             UserWarning)
from app.domains.moderation.exceptions import ContentNotFoundError
from app.domains.moderation.models import (ModeratorActionRecord,
                                           NotificationRecord,
                                           ResourceModerationLogRecord,
                                           UserWarningRecord)

Record = Dict[str, Any]


class ModerationStore(ABC):
    """Persistence collaborator of the moderation core.

    Rows come back as plain dicts so the core never holds ORM state.
    ``update_content`` / ``update_user`` raise ContentNotFoundError when
    the target row does not exist.
    """

    @abstractmethod
    async def find_content(self, content_type: ContentType, content_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    async def update_content(self, content_type: ContentType, content_id: str, fields: Record) -> None:
        ...

    @abstractmethod
    async def find_resources(self, resource_ids: Sequence[str]) -> List[Record]:
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    async def update_user(self, user_id: str, fields: Record) -> None:
        ...

    @abstractmethod
    async def list_staff(self, exclude_user_id: Optional[str] = None) -> List[Record]:
        ...

    @abstractmethod
    async def create_warning(self, warning: UserWarning) -> None:
        ...

    @abstractmethod
    async def create_notification(self, notification: Notification) -> None:
        ...

    @abstractmethod
    async def record_moderator_action(self, action: ModeratorAction) -> None:
        ...

    @abstractmethod
    async def create_moderation_log(self, entry: ResourceModerationLog) -> None:
        ...

    @abstractmethod
    async def list_moderation_logs(
        self, batch_id: str, action: ResourceModerationAction
    ) -> List[Record]:
        ...


CONTENT_MODELS = {
    ContentType.POST: Post,
    ContentType.COMMENT: Comment,
    ContentType.PRODUCT: Product,
    ContentType.RESOURCE: Resource,
    ContentType.GROUP: Group,
    ContentType.EVENT: Event,
    ContentType.PROFILE: User,
    ContentType.MESSAGE: Message,
}


def _as_dict(row) -> Record:
    return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}


def _new_id() -> str:
    return str(uuid.uuid4())


class SqlModerationStore(ModerationStore):
    """SQLAlchemy implementation over the shared async session factory"""

    async def find_content(self, content_type: ContentType, content_id: str) -> Optional[Record]:
        model = CONTENT_MODELS[content_type]
        async with get_db() as db:
            result = await db.execute(select(model).filter(model.id == content_id))
            row = result.scalar_one_or_none()
            return _as_dict(row) if row else None

    async def update_content(self, content_type: ContentType, content_id: str, fields: Record) -> None:
        model = CONTENT_MODELS[content_type]
        async with get_db() as db:
            result = await db.execute(
                update(model).where(model.id == content_id).values(**fields)
            )
            if result.rowcount == 0:
                raise ContentNotFoundError(content_type.value, content_id)

    async def find_resources(self, resource_ids: Sequence[str]) -> List[Record]:
        if not resource_ids:
            return []
        async with get_db() as db:
            result = await db.execute(select(Resource).filter(Resource.id.in_(list(resource_ids))))
            return [_as_dict(row) for row in result.scalars().all()]

    async def get_user(self, user_id: str) -> Optional[Record]:
        user = await get_user_by_id(user_id)
        return _as_dict(user) if user else None

    async def update_user(self, user_id: str, fields: Record) -> None:
        await self.update_content(ContentType.PROFILE, user_id, fields)

    async def list_staff(self, exclude_user_id: Optional[str] = None) -> List[Record]:
        return [_as_dict(user) for user in await list_staff_users(exclude_user_id)]

    async def create_warning(self, warning: UserWarning) -> None:
        async with get_db() as db:
            db.add(
                UserWarningRecord(
                    id=_new_id(),
                    user_id=warning.user_id,
                    reason=warning.reason,
                    warning_level=warning.warning_level.value,
                    content_type=warning.content_type.value,
                    content_id=warning.content_id,
                    moderator_id=warning.moderator_id,
                    created_at=warning.created_at,
                )
            )

    async def create_notification(self, notification: Notification) -> None:
        async with get_db() as db:
            db.add(
                NotificationRecord(
                    id=_new_id(),
                    user_id=notification.user_id,
                    type=notification.type.value,
                    title=notification.title,
                    message=notification.message,
                    data=notification.data,
                    read=notification.read,
                    created_at=notification.created_at,
                )
            )

    async def record_moderator_action(self, action: ModeratorAction) -> None:
        """Audit trail of user-facing sanctions"""
        async with get_db() as db:
            db.add(
                ModeratorActionRecord(
                    id=action.action_id,
                    moderator_id=action.moderator_id,
                    action_type=action.action_type,
                    target_user=action.target_user,
                    timestamp=action.timestamp,
                    details=action.details,
                )
            )

    async def create_moderation_log(self, entry: ResourceModerationLog) -> None:
        async with get_db() as db:
            db.add(
                ResourceModerationLogRecord(
                    id=_new_id(),
                    resource_id=entry.resource_id,
                    moderator_id=entry.moderator_id,
                    action=entry.action.value,
                    reason=entry.reason,
                    previous_status=entry.previous_status,
                    batch_id=entry.batch_id,
                    created_at=entry.created_at,
                )
            )

    async def list_moderation_logs(
        self, batch_id: str, action: ResourceModerationAction
    ) -> List[Record]:
        async with get_db() as db:
            result = await db.execute(
                select(ResourceModerationLogRecord)
                .filter(
                    ResourceModerationLogRecord.batch_id == batch_id,
                    ResourceModerationLogRecord.action == action.value,
                )
                .order_by(ResourceModerationLogRecord.created_at)
            )
            return [_as_dict(row) for row in result.scalars().all()]
