"""Boundary Protocols — contracts between the workflow services and external systems.

Invariants:
    - Services never import a concrete ledger, publisher, or store
    - All IO operations accessed through Protocol types
    - Implementations constructed in main.py lifespan and injected per request
    - compare_and_swap matches on status AND reservation timestamp, so a lease
      taken over by reconciliation invalidates the previous holder's commit

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Key material crosses the LedgerClient boundary as opaque SigningKey strings,
      so a key-custody service can replace caller-supplied keys without touching
      workflow code
"""

from datetime import datetime
from typing import Protocol

from hivemint.core.domain_types import (
    AccountIdStr, CollectionCreated, HiveStatus, MintReceipt, SigningKey,
    TokenIdStr, TransferReceipt,
)
from hivemint.core.hive_record import HiveRecord


class MetadataPublisher(Protocol):
    """Contract for pinning metadata documents — never raises."""
    async def publish(self, document: dict) -> str: ...
    def gateway_url(self, uri: str) -> str | None: ...


class LedgerClient(Protocol):
    """Contract for token transactions — each call awaits the finality receipt."""
    @property
    def treasury_account_id(self) -> AccountIdStr: ...
    async def create_collection(self) -> CollectionCreated: ...
    async def mint(
        self, token_id: TokenIdStr, supply_key: SigningKey, metadata_uri: str,
    ) -> MintReceipt: ...
    async def transfer(
        self,
        token_id: TokenIdStr,
        serial_number: int,
        sender: AccountIdStr,
        receiver: AccountIdStr,
        authority_key: SigningKey | None = None,
    ) -> TransferReceipt: ...
    async def nft_owner(
        self, token_id: TokenIdStr, serial_number: int,
    ) -> AccountIdStr | None: ...
    def explorer_url(self, token_id: str, serial_number: int | None = None) -> str: ...


class HiveStore(Protocol):
    """Contract for hive record persistence — implemented by infrastructure."""
    async def get(self, hive_id: str) -> HiveRecord | None: ...
    async def list_by_status(self, status: HiveStatus) -> list[HiveRecord]: ...
    async def compare_and_swap(
        self,
        hive_id: str,
        expected_status: HiveStatus,
        updated: HiveRecord,
        expected_reserved_at: datetime | None = None,
    ) -> bool: ...
