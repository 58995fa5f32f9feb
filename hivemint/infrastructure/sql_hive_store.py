"""SQL Hive Store — SQLAlchemy backend for hive records.

Invariants:
    - compare_and_swap is one conditional UPDATE (id, status, reserved_at), atomic in the database
    - Reads always hit the database (no identity-map reuse across calls)
    - seed() only inserts into an empty table
"""

import logging
from datetime import datetime

from sqlalchemy import func, select, update

from hivemint.core.domain_types import HiveStatus
from hivemint.core.hive_record import HiveRecord
from hivemint.infrastructure.database import DatabaseSessionManager
from hivemint.models.hive import HiveRow

logger = logging.getLogger(__name__)

_COLUMNS = (
    "name", "description", "image", "location", "farmer", "price",
    "owner", "serial_number", "token_id", "reserved_at", "sold_at",
)


def _to_record(row: HiveRow) -> HiveRecord:
    data = dict(row.extra or {})
    data.update({name: getattr(row, name) for name in _COLUMNS})
    data["id"] = row.id
    data["status"] = row.status
    # Float column: whole prices come back as ints, matching the JSON store
    if isinstance(row.price, float) and row.price.is_integer():
        data["price"] = int(row.price)
    return HiveRecord.model_validate(data)


def _to_columns(record: HiveRecord) -> dict:
    values = {name: getattr(record, name) for name in _COLUMNS}
    values["status"] = record.status.value
    values["extra"] = dict(record.model_extra or {})
    return values


class SqlHiveStore:
    """Hive records persisted in the `hives` table."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def get(self, hive_id: str) -> HiveRecord | None:
        async with self.db.session() as session:
            row = await session.get(HiveRow, hive_id)
            return _to_record(row) if row else None

    async def list_by_status(self, status: HiveStatus) -> list[HiveRecord]:
        async with self.db.session() as session:
            result = await session.execute(
                select(HiveRow)
                .where(HiveRow.status == status.value)
                .order_by(HiveRow.id),
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def compare_and_swap(
        self,
        hive_id: str,
        expected_status: HiveStatus,
        updated: HiveRecord,
        expected_reserved_at: datetime | None = None,
    ) -> bool:
        """Write `updated` only if the row's status and reservation are unchanged."""
        reserved = (
            HiveRow.reserved_at.is_(None) if expected_reserved_at is None
            else HiveRow.reserved_at == expected_reserved_at
        )
        async with self.db.session() as session:
            result = await session.execute(
                update(HiveRow)
                .where(HiveRow.id == hive_id)
                .where(HiveRow.status == expected_status.value)
                .where(reserved)
                .values(**_to_columns(updated)),
            )
            await session.commit()
            swapped = result.rowcount == 1
        if not swapped:
            logger.warning(
                f"CAS rejected: expected status {expected_status.value}",
                extra={"hive_id": hive_id},
            )
        return swapped

    async def seed(self, records: list[HiveRecord]) -> int:
        """Insert records into an empty table. Returns the number inserted."""
        async with self.db.session() as session:
            count = await session.scalar(select(func.count()).select_from(HiveRow))
            if count:
                return 0
            for record in records:
                session.add(HiveRow(id=record.id, **_to_columns(record)))
            await session.commit()
        logger.info(f"Seeded {len(records)} hive records")
        return len(records)
