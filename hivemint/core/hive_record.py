"""Hive Record — the persisted hive, shared by both store backends and the workflow.

Invariants:
    - Round-trips the persisted camelCase shape (serialNumber, soldAt, tokenId, reservedAt)
    - Keys the model does not know are kept and written back unchanged
    - reserved_at is set when a purchase reserves the hive; it is the lease that
      reconciliation compares against before claiming a pending transfer
    - Datetimes are always timezone-aware (naive values are read as UTC)

Design Decisions:
    - Lives in core so lifecycle and metadata functions stay free of shell imports
    - Aliases over camelCase attribute names: Python code stays snake_case
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hivemint.core.domain_types import HiveStatus


class HiveRecord(BaseModel):
    """One beehive investment unit."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str = ""
    description: str = ""
    image: str = ""
    location: str = ""
    farmer: str = ""
    price: int | float = 0
    status: HiveStatus = HiveStatus.AVAILABLE
    owner: str | None = None
    serial_number: int | None = Field(None, alias="serialNumber")
    token_id: str | None = Field(None, alias="tokenId")
    reserved_at: datetime | None = Field(None, alias="reservedAt")
    sold_at: datetime | None = Field(None, alias="soldAt")

    @field_validator("reserved_at", "sold_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_document(self) -> dict:
        """Persisted form: camelCase keys, unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
