"""Hive Lifecycle — status checks and transitions for the purchase workflow.

Invariants:
    - All functions are PURE: records are copied, never mutated in place; the
      current time is always passed in
    - available -> minted-pending-transfer requires owner, serial, token id and
      a reservation timestamp
    - minted-pending-transfer -> sold keeps owner/serial/token and stamps soldAt
    - owner, serialNumber and soldAt become visible together with status=sold
    - A reservation younger than the grace period belongs to the purchase that
      made it; reconciliation leaves it alone
"""

from datetime import datetime, timedelta

from hivemint.core.domain_types import HiveStatus
from hivemint.core.errors import ConflictError, ErrorContext
from hivemint.core.hive_record import HiveRecord

ALREADY_SOLD = "This hive has already been sold"
PENDING_TRANSFER = "This hive has a pending transfer awaiting reconciliation"


def check_purchasable(hive: HiveRecord) -> None:
    """Raise ConflictError unless the hive is available."""
    if hive.status == HiveStatus.SOLD:
        raise ConflictError(ALREADY_SOLD, ErrorContext(hive_id=hive.id))
    if hive.status == HiveStatus.MINTED_PENDING_TRANSFER:
        raise ConflictError(
            PENDING_TRANSFER,
            ErrorContext(
                hive_id=hive.id, token_id=hive.token_id,
                serial_number=hive.serial_number,
            ),
        )


def reserve_for_transfer(
    hive: HiveRecord, owner: str, serial_number: int, token_id: str,
    reserved_at: datetime,
) -> HiveRecord:
    """Record a freshly minted token that still sits in the treasury."""
    return hive.model_copy(update={
        "status": HiveStatus.MINTED_PENDING_TRANSFER,
        "owner": owner,
        "serial_number": serial_number,
        "token_id": token_id,
        "reserved_at": reserved_at,
    })


def claim_reservation(hive: HiveRecord, claimed_at: datetime) -> HiveRecord:
    """Take over a stale reservation: same token and owner, new lease."""
    return hive.model_copy(update={"reserved_at": claimed_at})


def reservation_in_progress(
    hive: HiveRecord, now: datetime, grace: timedelta,
) -> bool:
    """True while the purchase that reserved the hive may still be transferring."""
    return hive.reserved_at is not None and now - hive.reserved_at < grace


def complete_sale(hive: HiveRecord, sold_at: datetime) -> HiveRecord:
    """Mark a reserved hive as sold once its token reached the owner."""
    return hive.model_copy(update={
        "status": HiveStatus.SOLD,
        "sold_at": sold_at,
    })


def is_available(hive: HiveRecord) -> bool:
    return hive.status == HiveStatus.AVAILABLE
