"""Hedera Ledger Client — wraps hiero-sdk-python for collection, mint, and transfer.

Invariants:
    - Each operation submits exactly one transaction and waits for its receipt
      (nft_owner is a read-only query)
    - No retry, no idempotency: resubmitting a mint creates another serial
    - Metadata pointers > 100 bytes rejected before any SDK call
    - Every SDK failure or non-SUCCESS receipt mapped to a LedgerError subclass
      with the ledger's message passed through verbatim

Design Decisions:
    - SDK calls are blocking gRPC: run in a worker thread via asyncio.to_thread
    - Operator credentials supplied explicitly at construction (no ambient env lookups)
    - Keys leave and enter the client as DER hex strings; only this module
      parses them into SDK key objects
"""

import asyncio
import logging

from hiero_sdk_python import (
    AccountId,
    Client,
    Network,
    NftId,
    PrivateKey,
    ResponseCode,
    SupplyType,
    TokenCreateTransaction,
    TokenId,
    TokenMintTransaction,
    TokenNftInfoQuery,
    TokenType,
    TransferTransaction,
)

from hivemint.core.domain_types import (
    AccountIdStr, CollectionCreated, MintReceipt, SigningKey, TokenIdStr,
    TransferReceipt,
)
from hivemint.core.errors import (
    CreationError, ErrorContext, LedgerError, MintError, TransferError,
)
from hivemint.core.token_metadata import encode_metadata_pointer, explorer_url

logger = logging.getLogger(__name__)


def _status_name(status) -> str:
    """Human-readable receipt status (e.g. SUCCESS, INVALID_SIGNATURE)."""
    try:
        return ResponseCode(status).name
    except ValueError:
        return str(status)


def _key_to_string(key: PrivateKey) -> SigningKey:
    return SigningKey(key.to_string_der())


class HederaLedgerClient:
    """Submits token transactions signed by the operator and caller-supplied keys."""

    def __init__(
        self,
        operator_account_id: str,
        operator_private_key: str,
        network: str = "testnet",
        collection_name: str = "Ecolive Hives",
        collection_symbol: str = "HIVE",
    ):
        if not operator_account_id or not operator_private_key:
            raise ValueError(
                "operator_account_id and operator_private_key are required",
            )
        self.network = network
        self.collection_name = collection_name
        self.collection_symbol = collection_symbol
        self._operator_id = AccountId.from_string(operator_account_id)
        self._operator_key = PrivateKey.from_string(operator_private_key)
        self._client = Client(Network(network=network))
        self._client.set_operator(self._operator_id, self._operator_key)

    @property
    def treasury_account_id(self) -> AccountIdStr:
        return AccountIdStr(str(self._operator_id))

    def explorer_url(self, token_id: str, serial_number: int | None = None) -> str:
        return explorer_url(self.network, token_id, serial_number)

    # ─── Operations ─────────────────────────────────────────────

    async def create_collection(self) -> CollectionCreated:
        """Create an infinite-supply NFT collection with fresh supply/admin keys."""
        logger.info("Creating NFT collection")
        try:
            created = await asyncio.to_thread(self._create_collection_sync)
        except LedgerError:
            raise
        except Exception as e:
            logger.error(f"Token creation failed: {e}", exc_info=True)
            raise CreationError(str(e))
        logger.info(
            f"Created NFT collection {created.token_id}",
            extra={
                "token_id": created.token_id,
                "transaction_id": created.transaction_id,
            },
        )
        return created

    async def mint(
        self, token_id: TokenIdStr, supply_key: SigningKey, metadata_uri: str,
    ) -> MintReceipt:
        """Mint one serial carrying metadata_uri, signed by the supply key."""
        context = ErrorContext(token_id=token_id)
        pointer = encode_metadata_pointer(metadata_uri, context=context)
        logger.info(
            f"Minting NFT with metadata {metadata_uri!r} ({len(pointer)} bytes)",
            extra={"token_id": token_id},
        )
        try:
            receipt = await asyncio.to_thread(
                self._mint_sync, token_id, supply_key, pointer,
            )
        except LedgerError:
            raise
        except Exception as e:
            logger.error(f"Mint failed: {e}", extra={"token_id": token_id})
            raise MintError(str(e), context)
        logger.info(
            f"Minted NFT #{receipt.serial_number}",
            extra={
                "token_id": token_id,
                "serial_number": receipt.serial_number,
                "transaction_id": receipt.transaction_id,
            },
        )
        return receipt

    async def transfer(
        self,
        token_id: TokenIdStr,
        serial_number: int,
        sender: AccountIdStr,
        receiver: AccountIdStr,
        authority_key: SigningKey | None = None,
    ) -> TransferReceipt:
        """Move one serial from sender to receiver. Defaults to treasury signing."""
        context = ErrorContext(token_id=token_id, serial_number=serial_number)
        logger.info(
            f"Transferring NFT #{serial_number} from {sender} to {receiver}",
            extra={"token_id": token_id, "serial_number": serial_number},
        )
        try:
            receipt = await asyncio.to_thread(
                self._transfer_sync,
                token_id, serial_number, sender, receiver, authority_key,
            )
        except LedgerError:
            raise
        except Exception as e:
            logger.error(
                f"Transfer failed: {e}",
                extra={"token_id": token_id, "serial_number": serial_number},
            )
            raise TransferError(str(e), context)
        logger.info(
            f"Transfer complete, status {receipt.status}",
            extra={
                "token_id": token_id,
                "serial_number": serial_number,
                "transaction_id": receipt.transaction_id,
                "ledger_status": receipt.status,
            },
        )
        return receipt

    async def nft_owner(
        self, token_id: TokenIdStr, serial_number: int,
    ) -> AccountIdStr | None:
        """Account currently holding the serial (a query, no transaction)."""
        try:
            owner = await asyncio.to_thread(
                self._nft_owner_sync, token_id, serial_number,
            )
        except Exception as e:
            logger.error(
                f"NFT info query failed: {e}",
                extra={"token_id": token_id, "serial_number": serial_number},
            )
            raise LedgerError(
                str(e), "NFT_INFO_ERROR",
                ErrorContext(token_id=token_id, serial_number=serial_number),
            )
        return AccountIdStr(owner) if owner else None

    # ─── Blocking SDK calls (worker thread) ─────────────────────

    def _create_collection_sync(self) -> CollectionCreated:
        supply_key = PrivateKey.generate_ed25519()
        admin_key = PrivateKey.generate_ed25519()
        tx = (
            TokenCreateTransaction()
            .set_token_name(self.collection_name)
            .set_token_symbol(self.collection_symbol)
            .set_token_type(TokenType.NON_FUNGIBLE_UNIQUE)
            .set_decimals(0)
            .set_initial_supply(0)
            .set_treasury_account_id(self._operator_id)
            .set_supply_type(SupplyType.INFINITE)
            .set_supply_key(supply_key)
            .set_admin_key(admin_key)
        )
        receipt, transaction_id = self._execute(
            tx, [self._operator_key, admin_key], CreationError,
        )
        return CollectionCreated(
            token_id=TokenIdStr(str(receipt.token_id)),
            supply_key=_key_to_string(supply_key),
            admin_key=_key_to_string(admin_key),
            transaction_id=transaction_id,
        )

    def _mint_sync(
        self, token_id: str, supply_key: str, pointer: bytes,
    ) -> MintReceipt:
        tx = (
            TokenMintTransaction()
            .set_token_id(TokenId.from_string(token_id))
            .set_metadata([pointer])
        )
        receipt, transaction_id = self._execute(
            tx, [PrivateKey.from_string(supply_key)], MintError,
        )
        if not receipt.serial_numbers:
            raise MintError("Mint receipt carried no serial number")
        return MintReceipt(
            serial_number=int(receipt.serial_numbers[0]),
            transaction_id=transaction_id,
        )

    def _transfer_sync(
        self,
        token_id: str,
        serial_number: int,
        sender: str,
        receiver: str,
        authority_key: str | None,
    ) -> TransferReceipt:
        signer = (
            PrivateKey.from_string(authority_key) if authority_key
            else self._operator_key
        )
        nft_id = NftId(TokenId.from_string(token_id), serial_number)
        tx = TransferTransaction().add_nft_transfer(
            nft_id, AccountId.from_string(sender), AccountId.from_string(receiver),
        )
        receipt, transaction_id = self._execute(tx, [signer], TransferError)
        return TransferReceipt(
            transaction_id=transaction_id, status=_status_name(receipt.status),
        )

    def _nft_owner_sync(self, token_id: str, serial_number: int) -> str | None:
        nft_id = NftId(TokenId.from_string(token_id), serial_number)
        info = TokenNftInfoQuery().set_nft_id(nft_id).execute(self._client)
        return str(info.account_id) if info.account_id else None

    def _execute(self, tx, signers: list, error_cls: type[LedgerError]):
        """Freeze, sign, submit; return (receipt, transaction id) or raise error_cls."""
        tx.freeze_with(self._client)
        for key in signers:
            tx.sign(key)
        receipt = tx.execute(self._client)
        transaction_id = str(tx.transaction_id)
        if receipt.status != ResponseCode.SUCCESS:
            raise error_cls(
                f"Transaction {transaction_id} failed with status "
                f"{_status_name(receipt.status)}",
            )
        return receipt, transaction_id
