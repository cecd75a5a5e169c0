"""
PerkHub — Perk SQLAlchemy Model
=================================

What:  ORM model representing the `perks` table: a discount or offer tied to
       a merchant and created by a user.
Who:   Queried by PerkService for the public listing and the authenticated
       CRUD routes; read by Alembic for migrations.

Query Patterns:
    - Public listing: WHERE title ILIKE '%q%' AND merchant = :m
      ORDER BY created_at DESC → idx_perks_created_at, idx_perks_merchant
    - "My perks": WHERE created_by_id = :user ORDER BY created_at DESC
      → idx_perks_created_by
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from perkhub.database import Base

if TYPE_CHECKING:
    from perkhub.models.user import User


# Allowed values for Perk.category, in display order
PERK_CATEGORIES = (
    "food",
    "tech",
    "travel",
    "fitness",
    "entertainment",
    "shopping",
    "other",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Perk(Base):
    """
    A single perk record.

    Lifecycle:
        Created by an authenticated user, editable and deletable only by that
        user, publicly listed by GET /api/perks/all.
    """

    __tablename__ = "perks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name; matched case-insensitively by the search parameter",
    )

    merchant: Mapped[Optional[str]] = mapped_column(
        String(120),
        nullable=True,
        default=None,
        comment="Owning merchant name; exact-match filter key",
    )

    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="other",
        server_default=text("'other'"),
        comment="Classification tag, one of PERK_CATEGORIES",
    )

    # 0 means "no discount badge"
    discount_percent: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Eager "selectin" load: every response that includes a perk shows its creator
    created_by: Mapped[Optional["User"]] = relationship(
        back_populates="perks",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_perks_created_at", created_at.desc()),
        Index("idx_perks_merchant", merchant),
        Index("idx_perks_created_by", created_by_id),
        CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_perks_discount_percent_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Perk(id={self.id}, title='{self.title}', "
            f"merchant='{self.merchant}')>"
        )
