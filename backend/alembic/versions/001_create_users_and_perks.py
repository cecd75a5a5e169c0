"""Create users and perks tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: `users` (perk creators, bearer tokens) and `perks`.
       See perkhub/models/ for column documentation.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "name",
            sa.String(120),
            nullable=False,
            server_default=sa.text("''"),
            comment="Display name shown as 'Created by' on perk cards",
        ),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Unique login email; display fallback when name is empty",
        ),
        sa.Column(
            "api_token",
            sa.String(64),
            nullable=False,
            comment="Opaque bearer token for the authenticated perk routes",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("api_token"),
    )

    op.create_table(
        "perks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "title",
            sa.String(200),
            nullable=False,
            comment="Display name; matched case-insensitively by the search parameter",
        ),
        sa.Column(
            "merchant",
            sa.String(120),
            nullable=True,
            comment="Owning merchant name; exact-match filter key",
        ),
        sa.Column(
            "category",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'other'"),
            comment="Classification tag, one of PERK_CATEGORIES",
        ),
        sa.Column(
            "discount_percent",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_perks_discount_percent_range",
        ),
    )

    op.create_index("idx_perks_created_at", "perks", [sa.text("created_at DESC")])
    op.create_index("idx_perks_merchant", "perks", ["merchant"])
    op.create_index("idx_perks_created_by", "perks", ["created_by_id"])


def downgrade() -> None:
    op.drop_index("idx_perks_created_by", table_name="perks")
    op.drop_index("idx_perks_merchant", table_name="perks")
    op.drop_index("idx_perks_created_at", table_name="perks")
    op.drop_table("perks")
    op.drop_table("users")
