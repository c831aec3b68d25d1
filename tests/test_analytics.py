from app.core.event_bus import EventBus
from app.domains.moderation.analytics import (ModerationTracker,
                                              get_moderation_counters,
                                              register_event_handlers)
from app.shared.schemas.events import (AIModerationRequest,
                                       ModerationActionApplied,
                                       ModerationNotificationSent)
from tests.fakes import FakeFlags


async def test_events_become_redis_counters(fake_redis):
    bus = EventBus()
    register_event_handlers(bus)
    tracker = ModerationTracker(bus=bus, flags=FakeFlags())

    await tracker.track_action(ModerationActionApplied(content_type="POST", content_id="p1", action="APPROVED"))
    await tracker.track_action(ModerationActionApplied(content_type="POST", content_id="p2", action="REJECTED"))
    await tracker.track_notification(
        ModerationNotificationSent(audience="admins", action="approve", recipients=3)
    )
    await tracker.track_ai_request(AIModerationRequest(endpoint="/api/moderation/ai-check"))

    counters = await get_moderation_counters()

    assert counters["total"] == 4
    assert counters["action_applied"] == 2
    assert counters["action:APPROVED"] == 1
    assert counters["recipients:admins"] == 3
    assert counters["ai_request"] == 1


async def test_disabled_flag_skips_publish():
    bus = EventBus()
    seen = []

    async def handler(event):
        seen.append(event)

    bus.subscribe("moderation:ai_request", handler)
    tracker = ModerationTracker(bus=bus, flags=FakeFlags(trackAIModerationUsage=False))

    assert await tracker.track_ai_request(AIModerationRequest(endpoint="/x")) is False
    assert seen == []


def test_register_is_idempotent():
    bus = EventBus()
    register_event_handlers(bus)
    register_event_handlers(bus)

    assert all(len(handlers) == 1 for handlers in bus.subscriptions.values())
    assert len(bus.subscriptions) == 3
