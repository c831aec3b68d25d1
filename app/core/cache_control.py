from typing import Dict, Optional

from app.core.config import settings

# seconds
CACHE_DURATIONS = {
    "shortTerm": 10,
    "mediumTerm": 300,
    "longTerm": 3600,
}

REVALIDATION_PERIODS = {
    "shortTerm": 60,
    "mediumTerm": 1800,
    "longTerm": 86400,
}


def get_cache_control_headers(
    duration: Optional[str] = None,
    stale_while_revalidate: bool = False,
    s_max_age: Optional[int] = None,
) -> Dict[str, str]:
    max_age = s_max_age or CACHE_DURATIONS[duration or "mediumTerm"]
    value = f"s-maxage={max_age}"
    if stale_while_revalidate:
        value += f", stale-while-revalidate={REVALIDATION_PERIODS[duration or 'mediumTerm']}"

    headers = {"Cache-Control": value}
    if settings.is_production:
        headers["CDN-Cache-Control"] = value
    return headers


def cache_category_for_path(path: str) -> str:
    """Analytics pages change slowly; everything else is short-lived"""
    return "mediumTerm" if "/analytics" in path else "shortTerm"
