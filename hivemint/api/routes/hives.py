"""Hive Routes — purchase, status lookup, and pending-transfer reconciliation.

Invariants:
    - buy-hive delegates the whole state machine to PurchaseWorkflow
    - hive-status reads the store only (no ledger queries)
    - isAvailable is true only for status "available"
"""

import logging

from fastapi import APIRouter, Depends

from hivemint.api.dependencies import get_hive_store, get_purchase_workflow
from hivemint.core.errors import HiveNotFoundError
from hivemint.core.hive_lifecycle import is_available
from hivemint.core.repository_protocols import HiveStore
from hivemint.schemas.hive import BuyHiveRequest
from hivemint.services.purchase_workflow import PurchaseWorkflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["hives"])


@router.post("/buy-hive")
async def buy_hive(
    body: BuyHiveRequest,
    workflow: PurchaseWorkflow = Depends(get_purchase_workflow),
):
    """Mint the hive's NFT, transfer it to the investor, mark the hive sold."""
    logger.info(
        f"Buy request received from {body.investor_account_id}",
        extra={"hive_id": body.hive_id, "token_id": body.token_id},
    )
    result = await workflow.buy(body)
    return {
        "success": True,
        "serialNumber": str(result.serial_number),
        "tokenId": result.token_id,
        "explorerUrl": result.explorer_url,
        "transactionId": result.transaction_id,
        "message": "NFT minted and transferred to your wallet!",
    }


@router.get("/hive-status/{hive_id}")
async def hive_status(hive_id: str, store: HiveStore = Depends(get_hive_store)):
    hive = await store.get(hive_id)
    if hive is None:
        raise HiveNotFoundError(hive_id, "Hive not found")
    return {
        "success": True,
        "hiveId": hive.id,
        "status": hive.status.value,
        "isAvailable": is_available(hive),
        "owner": hive.owner,
        "serialNumber": hive.serial_number,
    }


@router.post("/reconcile-transfers")
async def reconcile_transfers(
    workflow: PurchaseWorkflow = Depends(get_purchase_workflow),
):
    """Retry delivery of tokens minted for purchases whose transfer failed."""
    report = await workflow.reconcile_pending()
    return {
        "success": True,
        "reconciled": report.reconciled,
        "pending": report.pending,
    }
