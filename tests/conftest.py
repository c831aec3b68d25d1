import os
from datetime import datetime

os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from fakeredis import aioredis as fake_aioredis

from app.core.event_bus import EventBus
from app.core.redis import RedisManager
from app.domains.moderation.analytics import ModerationTracker
from app.domains.moderation.dispatcher import ModerationDispatcher
from app.domains.moderation.notifications import NotificationService
from app.domains.moderation.sanctions import SanctionEngine
from app.domains.moderation.service import ModerationService
from tests.fakes import FakeFlags, FakeMailer, InMemoryModerationStore

NOW = datetime(2026, 1, 15, 12, 0, 0)
PUBLIC_URL = "https://modhub.test"


@pytest.fixture
def store():
    return InMemoryModerationStore()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def flags():
    return FakeFlags()


@pytest.fixture
def tracker(bus, flags):
    return ModerationTracker(bus=bus, flags=flags)


@pytest.fixture
def notifications(store, mailer):
    return NotificationService(store=store, mailer=mailer, public_url=PUBLIC_URL)


@pytest.fixture
def sanctions(store, notifications):
    return SanctionEngine(store=store, notifications=notifications, clock=lambda: NOW)


@pytest.fixture
def dispatcher(store, sanctions):
    return ModerationDispatcher(store=store, sanctions=sanctions)


@pytest.fixture
def invalidated():
    return []


@pytest.fixture
def service(store, dispatcher, notifications, tracker, invalidated):
    async def invalidate(content_type, content_id):
        invalidated.append((content_type, content_id))
        return True

    return ModerationService(
        store=store,
        dispatcher=dispatcher,
        notifications=notifications,
        tracker=tracker,
        invalidate_cache=invalidate,
    )


@pytest_asyncio.fixture
async def fake_redis():
    client = fake_aioredis.FakeRedis(decode_responses=True)
    RedisManager.set_client(client)
    yield client
    await client.flushall()
    RedisManager.set_client(None)
