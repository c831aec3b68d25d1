from typing import Callable, Optional

from redis.asyncio import Redis

from app.core.redis import RedisManager
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

ANALYTICS_SUMMARY_KEY = "moderation:analytics:summary"


def get_moderation_cache_key(content_type: str, content_id: str, action: Optional[str] = None) -> str:
    if action:
        return f"moderation:{content_type}:{content_id}:{action}"
    return f"moderation:{content_type}:{content_id}"


async def invalidate_moderation_cache(
    content_type: str,
    content_id: str,
    client_factory: Callable[[], Redis] = RedisManager.get_client,
) -> bool:
    """Drop the item, its list and the dashboard summary after a decision"""
    content_type = content_type.lower()
    try:
        await client_factory().delete(
            get_moderation_cache_key(content_type, content_id),
            f"moderation:{content_type}:list",
            ANALYTICS_SUMMARY_KEY,
        )
    except Exception as e:
        logger.warning(f"Error invalidating moderation cache for {content_type} {content_id}: {e}")
        return False
    logger.debug(f"Invalidated cache for {content_type} with ID {content_id}")
    return True
