"""Hive ORM — one row per hive record.

Invariants:
    - id is the hive identifier (string primary key, seeded out of band)
    - status holds a HiveStatus value; transitions only via conditional UPDATE
    - owner, serial_number, token_id, reserved_at are NULL until a purchase reserves the hive
    - reserved_at is the reservation lease; compare-and-swap matches on it
    - Keys the record model does not know are kept in the extra JSON column
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Float, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from hivemint.db.base import Base


class HiveRow(Base):
    __tablename__ = "hives"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    farmer: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="available", index=True,
    )
    owner: Mapped[str | None] = mapped_column(String(64), nullable=True)
    serial_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    token_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reserved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    sold_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    extra: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
