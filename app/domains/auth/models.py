# app/domains/auth/models.py
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class User(Base, TimestampMixin):
    __tablename__ = "auth_users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    role: Mapped[str] = mapped_column(String, default="USER", index=True)  # USER, MODERATOR, ADMIN
    permissions: Mapped[list] = mapped_column(JSON, default=list)

    # Account state written by the sanction engine
    status: Mapped[str] = mapped_column(String, default="ACTIVE")  # ACTIVE, SUSPENDED, BANNED
    suspended_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    ban_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    banned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # JSON string: {"email": bool, "inApp": bool, "batchSummary": bool}
    notification_preferences: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Profile fields (ContentType.PROFILE targets this row)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    profile_status: Mapped[str] = mapped_column(String, default="PENDING")
    profile_visibility: Mapped[str] = mapped_column(String, default="PUBLIC")
    moderated: Mapped[bool] = mapped_column(Boolean, default=False)
