from app.core.cache_control import (cache_category_for_path,
                                    get_cache_control_headers)
from app.domains.moderation.cache import (ANALYTICS_SUMMARY_KEY,
                                          get_moderation_cache_key,
                                          invalidate_moderation_cache)


class BrokenRedis:
    async def delete(self, *keys):
        raise ConnectionError("redis down")


def test_cache_control_values():
    assert get_cache_control_headers("shortTerm") == {"Cache-Control": "s-maxage=10"}
    assert get_cache_control_headers("longTerm", stale_while_revalidate=True) == {
        "Cache-Control": "s-maxage=3600, stale-while-revalidate=86400"
    }
    assert get_cache_control_headers(s_max_age=42) == {"Cache-Control": "s-maxage=42"}


def test_cache_category_for_path():
    assert cache_category_for_path("/api/admin/moderation/analytics/summary") == "mediumTerm"
    assert cache_category_for_path("/api/moderation/queue") == "shortTerm"


def test_cache_keys():
    assert get_moderation_cache_key("post", "p1") == "moderation:post:p1"
    assert get_moderation_cache_key("post", "p1", "approved") == "moderation:post:p1:approved"


async def test_invalidate_drops_item_list_and_summary(fake_redis):
    for key in ("moderation:post:p1", "moderation:post:list", ANALYTICS_SUMMARY_KEY, "moderation:post:p2"):
        await fake_redis.set(key, "cached")

    assert await invalidate_moderation_cache("POST", "p1") is True

    assert await fake_redis.exists("moderation:post:p1", "moderation:post:list", ANALYTICS_SUMMARY_KEY) == 0
    assert await fake_redis.get("moderation:post:p2") == "cached"


async def test_invalidate_swallows_store_errors():
    assert await invalidate_moderation_cache("POST", "p1", client_factory=BrokenRedis) is False
