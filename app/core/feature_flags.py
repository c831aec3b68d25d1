"""Operator-toggled moderation flags.

Flags live in a redis hash (JSON-encoded values) so they can be flipped
without a deploy. Lookup order: stored value, caller default, built-in
default. A failing store never breaks the request path.
"""
import json
from typing import Any, Callable, Dict, Optional

from redis.asyncio import Redis

from app.core.config import settings
from app.core.redis import RedisManager
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FLAGS: Dict[str, Any] = {
    "enableRateLimiting": True,
    "enableEdgeCaching": True,
    "enableAIEdgeCaching": True,
    "trackAIModerationUsage": True,
    "trackModerationNotifications": True,
    "trackModerationActions": True,
}


class FeatureFlagStore:
    def __init__(
        self,
        client_factory: Callable[[], Redis] = RedisManager.get_client,
        key: str = settings.FEATURE_FLAGS_KEY,
    ):
        self._client_factory = client_factory
        self.key = key

    async def get(self, name: str, default: Optional[Any] = None) -> Any:
        fallback = default if default is not None else DEFAULT_FLAGS.get(name)
        try:
            raw = await self._client_factory().hget(self.key, name)
        except Exception as e:
            logger.warning(f"Error fetching feature flag {name}: {e}")
            return fallback
        if raw is None:
            return fallback
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    async def get_all(self) -> Dict[str, Any]:
        flags = dict(DEFAULT_FLAGS)
        try:
            stored = await self._client_factory().hgetall(self.key)
        except Exception as e:
            logger.warning(f"Error fetching feature flags: {e}")
            return flags
        for name, raw in stored.items():
            try:
                flags[name] = json.loads(raw)
            except ValueError:
                flags[name] = raw
        return flags

    async def set(self, name: str, value: Any) -> None:
        await self._client_factory().hset(self.key, name, json.dumps(value))


feature_flags = FeatureFlagStore()


async def get_moderation_feature_flag(name: str, default: Optional[Any] = None) -> Any:
    return await feature_flags.get(name, default)
