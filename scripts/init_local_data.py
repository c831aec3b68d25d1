"""Seed a local database with a moderator, an author and a few resources"""
import asyncio
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import select, text

from app.core.database import AsyncSessionLocal, engine, init_db
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


async def wait_for_table(table_name: str, max_attempts: int = 30):
    """Wait for table to exist in database"""
    for attempt in range(max_attempts):
        async with engine.begin() as conn:
            result = await conn.execute(
                text(
                    "SELECT EXISTS (SELECT FROM information_schema.tables WHERE table_name = :name)"
                ),
                {"name": table_name},
            )
            if result.scalar():
                logger.info(f"Table {table_name} exists")
                return True

        logger.info(f"Waiting for table {table_name}... (attempt {attempt + 1}/{max_attempts})")
        await asyncio.sleep(1)

    raise RuntimeError(f"Table {table_name} was not created after {max_attempts} attempts")


async def init_local_data():
    await init_db()
    await wait_for_table("auth_users")
    await wait_for_table("resources")

    from app.domains.auth.models import User
    from app.domains.content.models import Post, Resource, ResourceType

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            logger.info("Data already exists, skipping initialization")
            return

        try:
            db.add_all(
                [
                    User(id="moderator_1", name="Mona Moderator", email="mona@modhub.local", role="MODERATOR"),
                    User(id="admin_1", name="Ada Admin", email="ada@modhub.local", role="ADMIN"),
                    User(
                        id="author_1",
                        name="Sam Author",
                        email="sam@modhub.local",
                        notification_preferences=json.dumps({"email": False, "inApp": True, "batchSummary": True}),
                    ),
                ]
            )
            await db.flush()
            db.add_all(
                [
                    Resource(id="res_1", author_id="author_1", type=ResourceType.ARTICLE.value, title="Getting started"),
                    Resource(id="res_2", author_id="author_1", type=ResourceType.ARTICLE.value, title="Advanced topics"),
                    Resource(id="res_3", author_id="author_1", type=ResourceType.GUIDE.value, title="Style guide"),
                    Post(id="post_1", author_id="author_1", title="Hello forum", content="First post"),
                ]
            )
            await db.commit()
            logger.info("Local data initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing data: {e}")
            await db.rollback()
            raise


if __name__ == "__main__":
    asyncio.run(init_local_data())
