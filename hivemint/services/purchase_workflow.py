"""Purchase Workflow — validate, mint to treasury, transfer to buyer, mark sold.

Invariants:
    - Ledger calls happen only for hives that are `available` at lookup time
    - Mint failure leaves the record untouched (still `available`), no transfer attempted
    - The record is reserved (minted-pending-transfer, with owner/serial/token and
      reservedAt) by compare-and-swap BEFORE the transfer is submitted
    - A lost reservation CAS aborts before transfer; the extra serial stays in
      the treasury and is logged
    - Transfer failure leaves the record `minted-pending-transfer`;
      reconcile_pending() is the only path that retries it
    - Once a transfer succeeds the purchase succeeds: a failed commit write is
      logged with the transfer transaction id, never reported to the buyer
    - Reconciliation never touches a reservation younger than the grace period,
      and claims older ones by CAS on reservedAt before any ledger call, so at
      most one caller transfers a given serial
    - No step is retried inline; errors surface once

Design Decisions:
    - Orphaned treasury tokens are never burned automatically: reconciliation
      retries delivery to the recorded owner, anything still failing stays
      flagged for manual handling
    - Reconciliation asks the ledger who holds the serial first: a token already
      with its owner only needs the commit
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from hivemint.core.domain_types import AccountIdStr, HiveStatus, TokenIdStr, TransferReceipt
from hivemint.core.errors import (
    ConflictError, ErrorContext, HiveNotFoundError, HiveStoreError, LedgerError,
    TransferError,
)
from hivemint.core.hive_lifecycle import (
    ALREADY_SOLD, check_purchasable, claim_reservation, complete_sale,
    reservation_in_progress, reserve_for_transfer,
)
from hivemint.core.hive_record import HiveRecord
from hivemint.core.repository_protocols import HiveStore, LedgerClient, MetadataPublisher
from hivemint.core.token_metadata import build_purchase_metadata
from hivemint.schemas.hive import BuyHiveRequest
from hivemint.services.minting import mint_with_metadata

logger = logging.getLogger(__name__)

DEFAULT_RECONCILE_GRACE = timedelta(minutes=2)
IN_PROGRESS = "Transfer still in progress; retry later"
INCOMPLETE = "Record lacks token, serial or owner; reconcile manually"
CLAIMED_ELSEWHERE = "Claimed by a concurrent reconciliation"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PurchaseResult:
    hive: HiveRecord
    serial_number: int
    token_id: str
    transaction_id: str
    explorer_url: str


@dataclass
class ReconcileReport:
    reconciled: list[dict] = field(default_factory=list)
    pending: list[dict] = field(default_factory=list)


async def mark_sold(
    store: HiveStore, reserved: HiveRecord, sold_at: datetime | None = None,
) -> HiveRecord:
    """Commit step: minted-pending-transfer -> sold, under the caller's reservation."""
    sold = complete_sale(reserved, sold_at or _now())
    swapped = await store.compare_and_swap(
        reserved.id, HiveStatus.MINTED_PENDING_TRANSFER, sold, reserved.reserved_at,
    )
    if swapped:
        logger.info(f"Marked hive {reserved.id} as sold", extra={"hive_id": reserved.id})
    else:
        logger.warning(
            f"Hive {reserved.id} reservation changed before commit",
            extra={"hive_id": reserved.id, "serial_number": reserved.serial_number},
        )
    return sold


class PurchaseWorkflow:
    """Orchestrates one hive purchase across pinning, ledger, and store."""

    def __init__(
        self,
        store: HiveStore,
        ledger: LedgerClient,
        publisher: MetadataPublisher,
        reconcile_grace: timedelta = DEFAULT_RECONCILE_GRACE,
    ):
        self.store = store
        self.ledger = ledger
        self.publisher = publisher
        self.reconcile_grace = reconcile_grace

    async def buy(self, request: BuyHiveRequest) -> PurchaseResult:
        hive = await self.store.get(request.hive_id)
        if hive is None:
            raise HiveNotFoundError(request.hive_id)
        check_purchasable(hive)

        document = build_purchase_metadata(hive, request.investor_account_id)
        minted = await mint_with_metadata(
            self.ledger, self.publisher,
            request.token_id, request.supply_key, document,
        )
        serial = minted.receipt.serial_number

        reserved = reserve_for_transfer(
            hive, request.investor_account_id, serial, request.token_id, _now(),
        )
        if not await self.store.compare_and_swap(
            hive.id, HiveStatus.AVAILABLE, reserved, hive.reserved_at,
        ):
            logger.error(
                f"Hive {hive.id} was purchased concurrently; "
                f"serial {serial} remains in treasury",
                extra={
                    "hive_id": hive.id, "token_id": request.token_id,
                    "serial_number": serial,
                },
            )
            raise ConflictError(
                ALREADY_SOLD,
                ErrorContext(
                    hive_id=hive.id, token_id=request.token_id,
                    serial_number=serial,
                ),
            )

        try:
            receipt = await self._transfer(reserved)
        except TransferError as e:
            e.context.hive_id = hive.id
            logger.error(
                f"Transfer failed; hive {hive.id} left minted-pending-transfer",
                extra=e.context.log_extra(),
            )
            raise
        sold = await self._commit(reserved, receipt)
        return PurchaseResult(
            hive=sold,
            serial_number=serial,
            token_id=request.token_id,
            transaction_id=receipt.transaction_id,
            explorer_url=self.ledger.explorer_url(request.token_id, serial),
        )

    async def reconcile_pending(self) -> ReconcileReport:
        """Deliver or commit every stale minted-pending-transfer hive."""
        report = ReconcileReport()
        now = _now()
        for hive in await self.store.list_by_status(
            HiveStatus.MINTED_PENDING_TRANSFER,
        ):
            entry = {
                "hiveId": hive.id,
                "tokenId": hive.token_id,
                "serialNumber": hive.serial_number,
                "owner": hive.owner,
            }
            if not (hive.token_id and hive.owner and hive.serial_number is not None):
                entry["error"] = INCOMPLETE
                report.pending.append(entry)
                continue
            if reservation_in_progress(hive, now, self.reconcile_grace):
                entry["error"] = IN_PROGRESS
                report.pending.append(entry)
                continue

            claimed = claim_reservation(hive, now)
            if not await self.store.compare_and_swap(
                hive.id, HiveStatus.MINTED_PENDING_TRANSFER, claimed,
                hive.reserved_at,
            ):
                entry["error"] = CLAIMED_ELSEWHERE
                report.pending.append(entry)
                continue

            try:
                holder = await self.ledger.nft_owner(
                    TokenIdStr(hive.token_id), hive.serial_number,
                )
                if holder == hive.owner:
                    await mark_sold(self.store, claimed)
                    entry["alreadyDelivered"] = True
                    report.reconciled.append(entry)
                    continue
                receipt = await self._transfer(claimed)
            except LedgerError as e:
                entry["error"] = e.message
                report.pending.append(entry)
                continue
            await self._commit(claimed, receipt)
            entry["transactionId"] = receipt.transaction_id
            report.reconciled.append(entry)
        logger.info(
            f"Reconciliation: {len(report.reconciled)} delivered, "
            f"{len(report.pending)} still pending",
        )
        return report

    async def _transfer(self, reserved: HiveRecord) -> TransferReceipt:
        """Move the reserved serial from the treasury to its owner."""
        return await self.ledger.transfer(
            TokenIdStr(reserved.token_id),
            reserved.serial_number,
            self.ledger.treasury_account_id,
            AccountIdStr(reserved.owner),
        )

    async def _commit(
        self, reserved: HiveRecord, receipt: TransferReceipt,
    ) -> HiveRecord:
        """Mark sold after a delivered transfer; a store failure is logged, not raised."""
        try:
            return await mark_sold(self.store, reserved)
        except HiveStoreError as e:
            logger.error(
                f"Hive {reserved.id} delivered but not marked sold: {e.message}",
                extra={
                    "hive_id": reserved.id,
                    "token_id": reserved.token_id,
                    "serial_number": reserved.serial_number,
                    "transaction_id": receipt.transaction_id,
                },
            )
            return complete_sale(reserved, _now())
