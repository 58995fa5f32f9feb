"""Hives table — one row per hive record, status indexed for reconciliation scans.

Revision ID: 001_hives
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_hives"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "hives",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("image", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.String(200), nullable=False, server_default=""),
        sa.Column("farmer", sa.String(200), nullable=False, server_default=""),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("status", sa.String(32), nullable=False, server_default="available"),
        sa.Column("owner", sa.String(64), nullable=True),
        sa.Column("serial_number", sa.Integer, nullable=True),
        sa.Column("token_id", sa.String(64), nullable=True),
        sa.Column("sold_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("extra", sa.JSON, nullable=False),
    )
    op.create_index("ix_hives_status", "hives", ["status"])


def downgrade() -> None:
    op.drop_index("ix_hives_status", table_name="hives")
    op.drop_table("hives")
