"""create users, verifications and dividends

Revision ID: 4c1f0e2a9b7d
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1f0e2a9b7d"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False, server_default="local"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "verifications",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True, index=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "dividends",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("dividend_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("dividend", sa.Float(), nullable=False),
        sa.Column("tax", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(10), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_dividends_user_id_dividend_at", "dividends", ["user_id", "dividend_at"])


def downgrade() -> None:
    op.drop_index("ix_dividends_user_id_dividend_at", table_name="dividends")
    op.drop_table("dividends")
    op.drop_table("verifications")
    op.drop_table("users")
