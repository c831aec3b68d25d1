from typing import List, Optional

from sqlalchemy import select

from app.core.database import get_db
from app.shared.utils.logger import get_logger

from .models import User

logger = get_logger(__name__)

STAFF_ROLES = ("ADMIN", "MODERATOR")


async def get_user_by_id(user_id: str) -> Optional[User]:
    async with get_db() as db:
        result = await db.execute(select(User).filter(User.id == user_id))
        return result.scalar_one_or_none()


async def list_staff_users(exclude_user_id: Optional[str] = None) -> List[User]:
    """Admins and moderators, minus the one who acted"""
    async with get_db() as db:
        query = select(User).filter(User.role.in_(STAFF_ROLES))
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        result = await db.execute(query.order_by(User.id))
        return list(result.scalars().all())
