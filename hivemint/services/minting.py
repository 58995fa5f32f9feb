"""Minting — publish metadata, then mint one serial pointing at it.

Invariants:
    - Publishing never fails (publisher falls back), so a mint is always attempted
    - Exactly one mint transaction per call
"""

import logging
from dataclasses import dataclass

from hivemint.core.domain_types import MintReceipt, SigningKey, TokenIdStr
from hivemint.core.repository_protocols import LedgerClient, MetadataPublisher
from hivemint.core.token_metadata import HIVE_ID_TRAIT, build_metadata
from hivemint.schemas.hive import MintNftRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MintedToken:
    metadata_uri: str
    receipt: MintReceipt


def build_request_metadata(body: MintNftRequest) -> dict:
    """Metadata for a standalone mint from caller-supplied hive attributes."""
    return build_metadata(
        body.name, body.description, body.image_url,
        [
            (HIVE_ID_TRAIT, body.hive_id),
            ("Location", body.location),
            ("Farmer", body.farmer),
            ("Investment", f"${body.investment_amount}"),
            ("Status", body.status),
        ],
    )


async def mint_with_metadata(
    ledger: LedgerClient,
    publisher: MetadataPublisher,
    token_id: str,
    supply_key: str,
    document: dict,
) -> MintedToken:
    """Pin `document` and mint a serial in `token_id` carrying its URI."""
    uri = await publisher.publish(document)
    receipt = await ledger.mint(TokenIdStr(token_id), SigningKey(supply_key), uri)
    return MintedToken(metadata_uri=uri, receipt=receipt)
