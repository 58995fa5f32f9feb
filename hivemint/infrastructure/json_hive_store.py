"""JSON Hive Store — flat-file backend: one JSON array of hive records.

Invariants:
    - Every call reads the whole file (no cache across requests)
    - Every mutation rewrites the whole file via temp file + os.replace
    - compare_and_swap is serialized by one asyncio.Lock per store instance,
      so read-check-write is atomic within the process
    - compare_and_swap matches status and reservedAt; either differing rejects the write
    - Missing file behaves as an empty store; unreadable file raises HiveStoreError

Design Decisions:
    - File IO is blocking: run in a worker thread via asyncio.to_thread
    - Record order in the file is preserved on rewrite
"""

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from hivemint.core.domain_types import HiveStatus
from hivemint.core.errors import HiveStoreError
from hivemint.core.hive_record import HiveRecord

logger = logging.getLogger(__name__)


class JsonHiveStore:
    """Hive records persisted as a single JSON document."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, hive_id: str) -> HiveRecord | None:
        for record in await asyncio.to_thread(self._load):
            if record.id == hive_id:
                return record
        return None

    async def list_all(self) -> list[HiveRecord]:
        return await asyncio.to_thread(self._load)

    async def list_by_status(self, status: HiveStatus) -> list[HiveRecord]:
        records = await asyncio.to_thread(self._load)
        return [r for r in records if r.status == status]

    async def compare_and_swap(
        self,
        hive_id: str,
        expected_status: HiveStatus,
        updated: HiveRecord,
        expected_reserved_at: datetime | None = None,
    ) -> bool:
        """Replace the record only if status and reservation are still as expected."""
        async with self._lock:
            records = await asyncio.to_thread(self._load)
            for index, record in enumerate(records):
                if record.id != hive_id:
                    continue
                if (
                    record.status != expected_status
                    or record.reserved_at != expected_reserved_at
                ):
                    logger.warning(
                        f"CAS rejected: status is {record.status.value}, "
                        f"expected {expected_status.value}",
                        extra={"hive_id": hive_id},
                    )
                    return False
                records[index] = updated
                await asyncio.to_thread(self._write, records)
                return True
            return False

    def _load(self) -> list[HiveRecord]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HiveRecord.model_validate(item) for item in raw]
        except (OSError, ValueError, TypeError) as e:
            raise HiveStoreError(str(e), "read")

    def _write(self, records: list[HiveRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            [r.to_document() for r in records], indent=2, ensure_ascii=False,
        )
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise HiveStoreError(str(e), "write")
