"""Add reserved_at to hives: reservation lease for pending-transfer reconciliation.

Revision ID: 002_reserved_at
Revises: 001_hives
Create Date: 2026-10-17

Rows already minted-pending-transfer keep NULL, which reconciliation treats
as a stale reservation it may claim.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_reserved_at"
down_revision: Union[str, None] = "001_hives"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "hives",
        sa.Column("reserved_at", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("hives", "reserved_at")
