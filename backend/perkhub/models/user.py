"""
PerkHub — User SQLAlchemy Model
=================================

What:  ORM model for the `users` table.
Who:   Resolved from the bearer token by the auth dependency; referenced by
       perks as their creator (`createdBy` in the API).

Table Design:
    - email is unique and is the fallback display name on perk cards
    - api_token is the opaque bearer credential checked on protected routes;
      it is never serialized
"""

import secrets
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from perkhub.database import Base

if TYPE_CHECKING:
    from perkhub.models.perk import Perk


def generate_api_token() -> str:
    """New random bearer token (43 URL-safe characters)."""
    return secrets.token_urlsafe(32)


class User(Base):
    """A person who can create and manage perks."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        default="",
        comment="Display name shown as 'Created by' on perk cards",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique login email; display fallback when name is empty",
    )

    api_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        default=generate_api_token,
        comment="Opaque bearer token for the authenticated perk routes",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    perks: Mapped[List["Perk"]] = relationship(back_populates="created_by")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
