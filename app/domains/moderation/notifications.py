# app/domains/moderation/notifications.py
"""Moderation notification fan-out.

Authors hear about decisions on their resources, administrators and
moderators hear about decisions taken by their peers. Every recipient is
served through the channels their preferences enable: an in-app
notification row and/or an e-mail. Bulk decisions can be summarised per
author when the author opted into batch summaries.

Missing resources or authors are soft failures (False / 0). Store write
errors propagate to the caller; e-mail errors never do.
"""
import json
from html import escape
from typing import Any, Dict, List, Optional, Union

from app.core.mailer import Mailer
from app.domains.moderation.analytics import ModerationTracker
from app.domains.moderation.entities import (BatchNotificationResult,
                                             ContentType, DeliveryReport,
                                             Notification,
                                             NotificationPreferences,
                                             NotificationType,
                                             ResourceModerationAction)
from app.domains.moderation.repository import ModerationStore, Record
from app.shared.schemas.delivery import DeliveryResult
from app.shared.schemas.events import ModerationNotificationSent
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PREFERENCES = NotificationPreferences()

# stored keys -> NotificationPreferences fields
_PREFERENCE_KEYS = {
    "email": "email",
    "inApp": "in_app",
    "in_app": "in_app",
    "batchSummary": "batch_summary",
    "batch_summary": "batch_summary",
}

ActionLike = Union[ResourceModerationAction, str]


def parse_notification_preferences(raw: Any) -> NotificationPreferences:
    """Merge stored preferences over the defaults"""
    if not raw:
        return DEFAULT_PREFERENCES
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            logger.error(f"Error parsing notification preferences: {e}")
            return DEFAULT_PREFERENCES
    if not isinstance(raw, dict):
        return DEFAULT_PREFERENCES

    values = {
        "email": DEFAULT_PREFERENCES.email,
        "in_app": DEFAULT_PREFERENCES.in_app,
        "batch_summary": DEFAULT_PREFERENCES.batch_summary,
    }
    for key, value in raw.items():
        field = _PREFERENCE_KEYS.get(key)
        if field is not None:
            values[field] = bool(value)
    return NotificationPreferences(**values)


def summarize_types(resources: List[Record]) -> str:
    """'2 articles, 1 guide' in first-seen order"""
    counts: Dict[str, int] = {}
    for resource in resources:
        kind = str(resource.get("type") or "resource").lower()
        counts[kind] = counts.get(kind, 0) + 1
    return ", ".join(f"{count} {kind}{'s' if count > 1 else ''}" for kind, count in counts.items())


class NotificationService:
    def __init__(
        self,
        store: ModerationStore,
        mailer: Mailer,
        public_url: str,
        tracker: Optional[ModerationTracker] = None,
    ):
        self.store = store
        self.mailer = mailer
        self.public_url = public_url.rstrip("/")
        self.tracker = tracker

    async def get_user_notification_preferences(self, user_id: str) -> NotificationPreferences:
        user = await self.store.get_user(user_id)
        return parse_notification_preferences(user.get("notification_preferences") if user else None)

    async def deliver(
        self,
        user: Record,
        preferences: NotificationPreferences,
        notification_type: NotificationType,
        title: str,
        message: str,
        html: str,
        data: Optional[Dict[str, Any]] = None,
        force_in_app: bool = False,
    ) -> DeliveryReport:
        """Send one notification through every enabled channel"""
        if preferences.in_app or force_in_app:
            await self.store.create_notification(
                Notification(
                    user_id=user["id"],
                    type=notification_type,
                    title=title,
                    message=message,
                    data=data,
                )
            )
            in_app = DeliveryResult.delivered()
        else:
            in_app = DeliveryResult.skipped("in_app_disabled")

        if not preferences.email:
            email = DeliveryResult.skipped("email_disabled")
        elif not user.get("email"):
            email = DeliveryResult.skipped("no_email_address")
        else:
            email = await self.mailer.send_email(to=user["email"], subject=title, html=html)

        report = DeliveryReport(in_app=in_app, email=email)
        logger.debug(
            f"{notification_type.value} to {user['id']}: in_app={in_app.status.value} email={email.status.value}"
        )
        return report

    async def send_account_notice(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> DeliveryReport:
        """Sanction notices: the in-app row is always written"""
        user = await self.store.get_user(user_id) or {"id": user_id}
        preferences = parse_notification_preferences(user.get("notification_preferences"))
        html = f"<p>Hello {escape(user.get('name') or 'there')},</p><p>{escape(message)}</p>"
        return await self.deliver(
            user, preferences, notification_type, title, message, html, data, force_in_app=True
        )

    async def _moderator_name(self, moderator_id: Optional[str], fallback: str) -> str:
        if not moderator_id:
            return fallback
        moderator = await self.store.get_user(moderator_id)
        return (moderator or {}).get("name") or fallback

    async def notify_author(
        self,
        resource_id: str,
        action: ActionLike,
        moderator_id: str,
        reason: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> bool:
        action = ResourceModerationAction(action)
        resource = await self.store.find_content(ContentType.RESOURCE, resource_id)
        author = None
        if resource and resource.get("author_id"):
            author = await self.store.get_user(resource["author_id"])
        if not resource or not author:
            logger.error(f"Resource or author not found for resource {resource_id}")
            return False

        preferences = parse_notification_preferences(author.get("notification_preferences"))
        moderator_name = await self._moderator_name(moderator_id, "A moderator")
        description = action.description
        kind = str(resource.get("type") or "resource").lower()
        title = resource.get("title") or f"Resource {resource_id}"

        subject = f"Your {kind} has been {description}"
        html = (
            f"<p>Hello {escape(author.get('name') or 'there')},</p>"
            f"<p>{escape(moderator_name)} has {description} your {kind} \"{escape(title)}\".</p>"
            + (f"<p>Reason: {escape(reason)}</p>" if reason else "")
            + f"<p>You can view your {kind} <a href=\"{self.public_url}/resources/{resource_id}\">here</a>.</p>"
            "<p>Thank you for your contribution!</p>"
        )
        report = await self.deliver(
            author,
            preferences,
            NotificationType.MODERATION,
            subject,
            f"Your {kind} \"{title}\" has been {description}.",
            html,
            {
                "resourceId": resource_id,
                "action": action.value,
                "moderatorId": moderator_id,
                "reason": reason,
                "batchId": batch_id,
            },
        )
        await self._track("author", action, moderator_id, int(report.any_delivered), resource_id=resource_id, batch_id=batch_id)
        return True

    async def notify_administrators(
        self,
        resource_id: str,
        action: ActionLike,
        moderator_id: str,
        reason: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> int:
        action = ResourceModerationAction(action)
        resource = await self.store.find_content(ContentType.RESOURCE, resource_id)
        if not resource:
            logger.error(f"Resource not found for resource {resource_id}")
            return 0

        administrators = await self.store.list_staff(exclude_user_id=moderator_id)
        author = await self.store.get_user(resource["author_id"]) if resource.get("author_id") else None
        moderator_name = await self._moderator_name(moderator_id, "Unknown moderator")
        description = action.description
        kind = str(resource.get("type") or "resource")
        title = resource.get("title") or f"Resource {resource_id}"
        author_name = (author or {}).get("name") or "Unknown author"

        notified = 0
        for admin in administrators:
            preferences = parse_notification_preferences(admin.get("notification_preferences"))
            if not preferences.any_channel:
                continue

            html = (
                f"<p>Hello {escape(admin.get('name') or 'Administrator')},</p>"
                f"<p>{escape(moderator_name)} has {description} a {kind.lower()} \"{escape(title)}\" by {escape(author_name)}.</p>"
                + (f"<p>Reason: {escape(reason)}</p>" if reason else "")
                + f"<p>You can view the {kind.lower()} <a href=\"{self.public_url}/resources/{resource_id}\">here</a>.</p>"
                f"<p>You can review the moderation history <a href=\"{self.public_url}/admin/resources/moderation-logs\">here</a>.</p>"
            )
            await self.deliver(
                admin,
                preferences,
                NotificationType.ADMIN_MODERATION,
                f"Moderation Action: {kind} {description}",
                f"{moderator_name} {description} {kind.lower()} \"{title}\" by {author_name}.",
                html,
                {
                    "resourceId": resource_id,
                    "action": action.value,
                    "moderatorId": moderator_id,
                    "reason": reason,
                    "batchId": batch_id,
                },
            )
            notified += 1

        await self._track("admins", action, moderator_id, notified, resource_id=resource_id, batch_id=batch_id)
        return notified

    async def send_batch_moderation_notifications(
        self,
        batch_id: str,
        action: ActionLike,
        moderator_id: str,
        reason: Optional[str] = None,
    ) -> BatchNotificationResult:
        action = ResourceModerationAction(action)
        logs = await self.store.list_moderation_logs(batch_id, action)
        resource_ids = list(dict.fromkeys(log["resource_id"] for log in logs))
        if not resource_ids:
            return BatchNotificationResult()

        resources = await self.store.find_resources(resource_ids)
        by_author: Dict[str, List[Record]] = {}
        for resource in resources:
            if resource.get("author_id"):
                by_author.setdefault(resource["author_id"], []).append(resource)

        description = action.description
        result = BatchNotificationResult()

        for author_id, author_resources in by_author.items():
            author = await self.store.get_user(author_id)
            if not author:
                continue
            preferences = parse_notification_preferences(author.get("notification_preferences"))
            if not preferences.any_channel:
                continue

            if not preferences.batch_summary:
                sent = False
                for resource in author_resources:
                    if await self.notify_author(resource["id"], action, moderator_id, reason, batch_id):
                        sent = True
                if sent:
                    result.authors += 1
                continue

            count = len(author_resources)
            summary = summarize_types(author_resources)
            moderator_name = await self._moderator_name(moderator_id, "A moderator")
            html = (
                f"<p>Hello {escape(author.get('name') or 'there')},</p>"
                f"<p>{escape(moderator_name)} has {description} {count} of your resources ({summary}).</p>"
                + (f"<p>Reason: {escape(reason)}</p>" if reason else "")
                + f"<p>You can view your resources <a href=\"{self.public_url}/account/resources\">here</a>.</p>"
                "<p>Thank you for your contributions!</p>"
            )
            await self.deliver(
                author,
                preferences,
                NotificationType.MODERATION_BATCH,
                f"{count} of your resources have been {description}",
                f"{count} of your resources ({summary}) have been {description}.",
                html,
                {
                    "resourceIds": [r["id"] for r in author_resources],
                    "action": action.value,
                    "moderatorId": moderator_id,
                    "reason": reason,
                    "batchId": batch_id,
                },
            )
            result.authors += 1

        result.admins = await self._notify_administrators_batch(
            resources, action, moderator_id, reason, batch_id
        )
        await self._track("batch", action, moderator_id, result.authors + result.admins, batch_id=batch_id)
        return result

    async def _notify_administrators_batch(
        self,
        resources: List[Record],
        action: ResourceModerationAction,
        moderator_id: str,
        reason: Optional[str],
        batch_id: str,
    ) -> int:
        administrators = await self.store.list_staff(exclude_user_id=moderator_id)
        moderator_name = await self._moderator_name(moderator_id, "Unknown moderator")
        description = action.description
        count = len(resources)
        summary = summarize_types(resources)

        notified = 0
        for admin in administrators:
            preferences = parse_notification_preferences(admin.get("notification_preferences"))
            if not preferences.any_channel:
                continue

            html = (
                f"<p>Hello {escape(admin.get('name') or 'Administrator')},</p>"
                f"<p>{escape(moderator_name)} has {description} {count} resources ({summary}) in a batch operation.</p>"
                + (f"<p>Reason: {escape(reason)}</p>" if reason else "")
                + f"<p>You can review the moderation history <a href=\"{self.public_url}/admin/resources/moderation-logs\">here</a>.</p>"
            )
            await self.deliver(
                admin,
                preferences,
                NotificationType.ADMIN_MODERATION_BATCH,
                f"Batch Moderation: {count} resources {description}",
                f"{moderator_name} {description} {count} resources ({summary}) in a batch operation.",
                html,
                {
                    "resourceIds": [r["id"] for r in resources],
                    "action": action.value,
                    "moderatorId": moderator_id,
                    "reason": reason,
                    "batchId": batch_id,
                },
            )
            notified += 1
        return notified

    async def _track(self, audience: str, action: ResourceModerationAction, moderator_id: Optional[str], recipients: int, **ids):
        if self.tracker is None:
            return
        await self.tracker.track_notification(
            ModerationNotificationSent(
                audience=audience,
                action=action.value,
                moderator_id=moderator_id,
                recipients=recipients,
                **ids,
            )
        )
