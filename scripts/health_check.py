"""Health check script for all environments"""
import asyncio
import sys

import httpx

from app.core.config import get_settings

URLS = {
    "local": "http://localhost:8001/health",
    "dev": "http://localhost:8000/health",
    "staging": "https://staging.modhub.app/health",
    "prod": "https://api.modhub.app/health",
}


async def check_health() -> bool:
    settings = get_settings()
    env = settings.ENVIRONMENT.value
    url = URLS.get(env)
    if not url:
        print(f"Unknown environment: {env}")
        return False

    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(url)
            data = response.json()
    except httpx.HTTPError as e:
        print(f"Health check failed: {e}")
        return False

    print(f"Environment: {env}")
    print(f"Status: {data['status']}")
    print("Services:")
    for service, status in data["services"].items():
        print(f"  {'ok ' if status else 'DOWN'} {service}")
    return data["status"] == "healthy"


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_health()) else 1)
