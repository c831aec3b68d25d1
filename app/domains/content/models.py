# app/domains/content/models.py
"""Content tables the moderation core reads and updates.

Only the columns moderation touches are mapped here; the rest of each
table belongs to the forum / marketplace services.
"""
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class ResourceType(str, Enum):
    ARTICLE = "ARTICLE"
    GUIDE = "GUIDE"
    VIDEO = "VIDEO"
    TOOL = "TOOL"
    DATASET = "DATASET"


class ResourceStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"
    FEATURED = "FEATURED"


class ModeratedContentMixin:
    """Flags shared by every moderatable row"""

    visibility: Mapped[str] = mapped_column(String, default="PUBLIC")
    sensitive_content: Mapped[bool] = mapped_column(Boolean, default=False)
    moderated: Mapped[bool] = mapped_column(Boolean, default=False)


class Post(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "forum_posts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    author_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String, default="PENDING")


class Comment(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "forum_comments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    author_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    post_id: Mapped[Optional[str]] = mapped_column(ForeignKey("forum_posts.id"), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[str] = mapped_column(String, default="PENDING")


class Product(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "marketplace_products"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    seller_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, default="PENDING")
    moderation_approved: Mapped[bool] = mapped_column(Boolean, default=False)


class Resource(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    author_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    type: Mapped[str] = mapped_column(String, default=ResourceType.ARTICLE.value)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String, default=ResourceStatus.PENDING.value)


class Group(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "forum_groups"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    owner_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, default="PENDING")
    moderation_approved: Mapped[bool] = mapped_column(Boolean, default=False)


class Event(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    creator_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String, default="PENDING")


class Message(Base, ModeratedContentMixin, TimestampMixin):
    __tablename__ = "chat_messages"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    sender_id: Mapped[Optional[str]] = mapped_column(ForeignKey("auth_users.id"), nullable=True, index=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[str] = mapped_column(String, default="SENT")
