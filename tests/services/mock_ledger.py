"""Mock Ledger & Publisher — stand-ins for HederaLedgerClient and PinataMetadataPublisher.

Invariants:
    - FakeLedgerClient records every call in `calls` as (operation, args) tuples
    - Serial numbers start at 1 per fake instance and increase per mint
    - mint_error / transfer_error, when set, are raised instead of succeeding
    - mint_barrier(n) holds every mint until n mints are in flight
    - holders tracks who owns each minted serial; a transfer from a non-holder
      fails the way the ledger does
    - transfer_gate, when set, holds every transfer until the event is set

Design Decisions:
    - Flat fake classes (no inheritance): structural match with the Protocols
"""

import asyncio

from hivemint.core.domain_types import (
    AccountIdStr, CollectionCreated, MintReceipt, SigningKey, TokenIdStr,
    TransferReceipt,
)
from hivemint.core.errors import TransferError
from hivemint.core.token_metadata import explorer_url, fallback_uri, hive_id_of


class FakeLedgerClient:
    """Replaces HederaLedgerClient. No network, deterministic receipts."""

    def __init__(self, treasury: str = "0.0.2", network: str = "testnet"):
        self.treasury = treasury
        self.network = network
        self.calls: list[tuple] = []
        self.create_error: Exception | None = None
        self.mint_error: Exception | None = None
        self.transfer_error: Exception | None = None
        self._next_serial = 1
        self._next_token = 5678
        self._barrier_size = 0
        self._in_flight = 0
        self._barrier = asyncio.Event()
        self.holders: dict[tuple[str, int], str] = {}
        self.transfer_gate: asyncio.Event | None = None
        self.transfer_started = asyncio.Event()

    @property
    def treasury_account_id(self) -> AccountIdStr:
        return AccountIdStr(self.treasury)

    @property
    def operations(self) -> list[str]:
        return [c[0] for c in self.calls]

    def mint_barrier(self, size: int) -> None:
        self._barrier_size = size

    def explorer_url(self, token_id: str, serial_number: int | None = None) -> str:
        return explorer_url(self.network, token_id, serial_number)

    async def create_collection(self) -> CollectionCreated:
        self.calls.append(("create_collection", ()))
        if self.create_error:
            raise self.create_error
        n = self._next_token
        self._next_token += 1
        return CollectionCreated(
            token_id=TokenIdStr(f"0.0.{n}"),
            supply_key=SigningKey(f"302e-supply-{n}"),
            admin_key=SigningKey(f"302e-admin-{n}"),
            transaction_id=f"0.0.2@1700000000.{n:09d}",
        )

    async def mint(
        self, token_id: TokenIdStr, supply_key: SigningKey, metadata_uri: str,
    ) -> MintReceipt:
        self.calls.append(("mint", (token_id, supply_key, metadata_uri)))
        if self._barrier_size:
            self._in_flight += 1
            if self._in_flight >= self._barrier_size:
                self._barrier.set()
            await self._barrier.wait()
        if self.mint_error:
            raise self.mint_error
        serial = self._next_serial
        self._next_serial += 1
        self.holders[(token_id, serial)] = self.treasury
        return MintReceipt(
            serial_number=serial,
            transaction_id=f"0.0.2@1700000001.{serial:09d}",
        )

    async def transfer(
        self,
        token_id: TokenIdStr,
        serial_number: int,
        sender: AccountIdStr,
        receiver: AccountIdStr,
        authority_key: SigningKey | None = None,
    ) -> TransferReceipt:
        self.calls.append(
            ("transfer", (token_id, serial_number, sender, receiver, authority_key)),
        )
        self.transfer_started.set()
        if self.transfer_gate is not None:
            await self.transfer_gate.wait()
        if self.transfer_error:
            raise self.transfer_error
        if self.holders.get((token_id, serial_number), sender) != sender:
            raise TransferError("SENDER_DOES_NOT_OWN_NFT_SERIAL_NO")
        self.holders[(token_id, serial_number)] = receiver
        return TransferReceipt(
            transaction_id=f"0.0.2@1700000002.{serial_number:09d}",
            status="SUCCESS",
        )

    async def nft_owner(
        self, token_id: TokenIdStr, serial_number: int,
    ) -> AccountIdStr | None:
        self.calls.append(("nft_owner", (token_id, serial_number)))
        holder = self.holders.get((token_id, serial_number))
        return AccountIdStr(holder) if holder else None


class FakePublisher:
    """Replaces PinataMetadataPublisher. `reachable=False` forces the fallback path."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.documents: list[dict] = []

    async def publish(self, document: dict) -> str:
        self.documents.append(document)
        if not self.reachable:
            return fallback_uri(document)
        return f"ipfs://bafytest{hive_id_of(document) or 'x'}".lower()

    def gateway_url(self, uri: str) -> str | None:
        if not uri.startswith("ipfs://"):
            return None
        return f"https://gateway.example.com/ipfs/{uri[len('ipfs://'):]}"
