"""Token Routes — create an NFT collection and mint single hive tokens.

Invariants:
    - create-token returns supply and admin keys in cleartext; nothing is stored server-side
    - mint-nft always publishes metadata first, then submits exactly one mint
    - Ledger failures surface as 500 with the ledger message (global handler)

Design Decisions:
    - Returning keys to the caller is acceptable only for a trusted operator
      front end; key handling stays behind LedgerClient so custody can move
      server-side later without touching these routes
"""

import logging

from fastapi import APIRouter, Depends

from hivemint.api.dependencies import get_ledger_client, get_metadata_publisher
from hivemint.core.repository_protocols import LedgerClient, MetadataPublisher
from hivemint.schemas.hive import MintNftRequest
from hivemint.services.minting import build_request_metadata, mint_with_metadata

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["tokens"])


@router.post("/create-token")
async def create_token(ledger: LedgerClient = Depends(get_ledger_client)):
    """Create the hive NFT collection."""
    logger.info("Create-token request received")
    created = await ledger.create_collection()
    return {
        "success": True,
        "tokenId": created.token_id,
        "supplyKey": created.supply_key,
        "adminKey": created.admin_key,
        "transactionId": created.transaction_id,
        "explorerUrl": ledger.explorer_url(created.token_id),
    }


@router.post("/mint-nft")
async def mint_nft(
    body: MintNftRequest,
    ledger: LedgerClient = Depends(get_ledger_client),
    publisher: MetadataPublisher = Depends(get_metadata_publisher),
):
    """Mint one hive NFT into the treasury."""
    logger.info(
        f"Mint-nft request received for {body.name}",
        extra={"hive_id": body.hive_id, "token_id": body.token_id},
    )
    minted = await mint_with_metadata(
        ledger, publisher, body.token_id, body.supply_key,
        build_request_metadata(body),
    )
    serial = minted.receipt.serial_number
    return {
        "success": True,
        "serialNumber": str(serial),
        "tokenId": body.token_id,
        "ipfsURL": minted.metadata_uri,
        "gatewayUrl": publisher.gateway_url(minted.metadata_uri),
        "explorerUrl": ledger.explorer_url(body.token_id, serial),
    }
