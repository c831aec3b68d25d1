"""Moderation usage counters.

Producers publish events on the in-process bus when the matching
feature flag is on; ``record_moderation_event`` turns them into redis
counters read by the analytics summary endpoint.
"""
from typing import Any, Awaitable, Callable, Dict

from pydantic import BaseModel

from app.core.event_bus import EventBus, event_bus
from app.core.feature_flags import get_moderation_feature_flag
from app.core.redis import RedisManager
from app.shared.schemas.events import (AIModerationRequest,
                                       ModerationActionApplied,
                                       ModerationNotificationSent)
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

COUNTER_PREFIX = "moderation:count"
FlagLookup = Callable[[str, Any], Awaitable[Any]]


class ModerationTracker:
    def __init__(self, bus: EventBus = event_bus, flags: FlagLookup = get_moderation_feature_flag):
        self.bus = bus
        self.flags = flags

    async def _publish(self, flag: str, event: BaseModel) -> bool:
        if not await self.flags(flag, True):
            return False
        payload = event.model_dump()
        await self.bus.publish(payload["event"], payload)
        return True

    async def track_action(self, event: ModerationActionApplied) -> bool:
        return await self._publish("trackModerationActions", event)

    async def track_notification(self, event: ModerationNotificationSent) -> bool:
        return await self._publish("trackModerationNotifications", event)

    async def track_ai_request(self, event: AIModerationRequest) -> bool:
        return await self._publish("trackAIModerationUsage", event)


async def record_moderation_event(event_data: Dict[str, Any]):
    redis = RedisManager.get_client()
    name = event_data["event"].split(":", 1)[-1]
    async with redis.pipeline(transaction=True) as pipe:
        pipe.incr(f"{COUNTER_PREFIX}:total")
        pipe.incr(f"{COUNTER_PREFIX}:{name}")
        if name == "action_applied":
            pipe.incr(f"{COUNTER_PREFIX}:action:{event_data['action']}")
        elif name == "notification_sent":
            pipe.incrby(f"{COUNTER_PREFIX}:recipients:{event_data['audience']}", event_data.get("recipients", 0))
        await pipe.execute()


async def get_moderation_counters() -> Dict[str, int]:
    redis = RedisManager.get_client()
    counters: Dict[str, int] = {}
    async for key in redis.scan_iter(match=f"{COUNTER_PREFIX}:*"):
        value = await redis.get(key)
        counters[key[len(COUNTER_PREFIX) + 1:]] = int(value or 0)
    return counters


def register_event_handlers(bus: EventBus = event_bus):
    for event_name in (
        ModerationActionApplied.model_fields["event"].default,
        ModerationNotificationSent.model_fields["event"].default,
        AIModerationRequest.model_fields["event"].default,
    ):
        bus.subscribe(event_name, record_moderation_event)
