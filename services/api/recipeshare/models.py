"""SQLAlchemy ORM models for the recipe-sharing service.

Tables:
- users: Registered accounts with a USER/ADMIN role
- tags: Colored labels, unique on (name, color)
- recipes: Recipe header owned by a user
- recipe_tags: Plain recipe <-> tag association (no extra columns)
- recipe_blocks: Ordered TEXT/PHOTO content blocks of a recipe
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Text,
    Integer,
    ForeignKey,
    Index,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class BlockType(str, enum.Enum):
    TEXT = "TEXT"
    PHOTO = "PHOTO"


recipe_tags = Table(
    "recipe_tags",
    Base.metadata,
    Column("recipe_id", String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Index("ix_recipe_tags_tag_id", "tag_id"),
)


class User(Base):
    """Registered account. Only ``role`` changes after creation."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(10), nullable=False, default=Role.USER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    recipes: Mapped[list["Recipe"]] = relationship("Recipe", back_populates="owner")


class Tag(Base):
    """Label identified by its (name, color) pair, created lazily by recipe writes."""
    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("name", "color", name="uq_tags_name_color"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(40), nullable=False)
    color: Mapped[str] = mapped_column(String(40), nullable=False)


class Recipe(Base):
    """Recipe header with its tag set and ordered blocks."""
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_owner_id", "owner_id"),
        Index("ix_recipes_updated_at", "updated_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    owner: Mapped["User"] = relationship("User", back_populates="recipes")
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary=recipe_tags, order_by="Tag.name"
    )
    blocks: Mapped[list["Block"]] = relationship(
        "Block", back_populates="recipe", cascade="all, delete-orphan",
        order_by="Block.order"
    )

    @property
    def first_photo_url(self) -> Optional[str]:
        """URL of the first block, only when that block is a photo."""
        if not self.blocks:
            return None
        first = self.blocks[0]
        if first.type == BlockType.PHOTO.value:
            return first.photo_url
        return None


class Block(Base):
    """One ordered unit of recipe content; replaced as a set on every edit."""
    __tablename__ = "recipe_blocks"
    __table_args__ = (
        UniqueConstraint("recipe_id", "order", name="uq_recipe_blocks_recipe_order"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="blocks")
