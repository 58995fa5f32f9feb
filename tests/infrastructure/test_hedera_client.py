"""Hedera ledger client — transaction assembly and error mapping, no network.

Invariants:
    - Every created collection carries freshly generated supply/admin keys
    - Oversize metadata pointers are rejected before any transaction is built
    - SDK exceptions surface as LedgerError subclasses with the message verbatim
    - Transfers are signed by the operator unless an authority key is given

Design Decisions:
    - The client is built with __new__. Most tests replace `_execute`, so real
      transaction objects are assembled but never submitted; the `_execute`
      tests drive the real freeze/sign/submit sequence on a recording fake
"""

from types import SimpleNamespace

import pytest
from hiero_sdk_python import AccountId, PrivateKey, ResponseCode

from hivemint.core.errors import (
    CreationError, LedgerError, MetadataTooLargeError, MintError, TransferError,
)
from hivemint.infrastructure import hedera_client
from hivemint.infrastructure.hedera_client import HederaLedgerClient


class RecordingExecutor:
    """Stands in for HederaLedgerClient._execute."""

    def __init__(self, receipt=None, error: Exception | None = None):
        self.receipt = receipt or SimpleNamespace(
            status=None, token_id="0.0.5678", serial_numbers=[7],
        )
        self.error = error
        self.calls = []

    def __call__(self, tx, signers, error_cls):
        self.calls.append((tx, signers, error_cls))
        if self.error:
            raise self.error
        return self.receipt, f"0.0.2@1700000000.{len(self.calls):09d}"


@pytest.fixture
def operator_key():
    return PrivateKey.generate_ed25519()


@pytest.fixture
def client(operator_key):
    ledger = HederaLedgerClient.__new__(HederaLedgerClient)
    ledger.network = "testnet"
    ledger.collection_name = "Ecolive Hives"
    ledger.collection_symbol = "HIVE"
    ledger._operator_id = AccountId.from_string("0.0.2")
    ledger._operator_key = operator_key
    ledger._client = None
    return ledger


@pytest.fixture
def executor(client):
    recorder = RecordingExecutor()
    client._execute = recorder
    return recorder


def test_missing_credentials_rejected():
    with pytest.raises(ValueError):
        HederaLedgerClient("", "")


def test_treasury_is_operator(client):
    assert client.treasury_account_id == "0.0.2"


def test_explorer_url_uses_network(client):
    assert client.explorer_url("0.0.5678", 3) == (
        "https://hashscan.io/testnet/token/0.0.5678/3"
    )


async def test_create_collection_returns_fresh_keys(client, executor, operator_key):
    first = await client.create_collection()
    second = await client.create_collection()

    assert first.token_id == "0.0.5678"
    assert first.transaction_id == "0.0.2@1700000000.000000001"
    assert first.supply_key != first.admin_key
    assert first.supply_key != second.supply_key
    assert first.admin_key != second.admin_key
    _, signers, error_cls = executor.calls[0]
    assert signers[0] is operator_key
    assert len(signers) == 2
    assert error_cls is CreationError


async def test_create_collection_sdk_failure_maps_to_creation_error(client):
    client._execute = RecordingExecutor(error=RuntimeError("INSUFFICIENT_PAYER_BALANCE"))

    with pytest.raises(CreationError) as exc:
        await client.create_collection()
    assert exc.value.message == "INSUFFICIENT_PAYER_BALANCE"


async def test_mint_returns_serial_from_receipt(client, executor):
    supply_key = PrivateKey.generate_ed25519().to_string_der()

    receipt = await client.mint("0.0.5678", supply_key, "ipfs://bafyabc")

    assert receipt.serial_number == 7
    assert receipt.transaction_id == "0.0.2@1700000000.000000001"
    assert executor.calls[0][2] is MintError


async def test_mint_rejects_oversize_pointer_before_submission(client, executor):
    uri = "ipfs://" + "b" * 94

    with pytest.raises(MetadataTooLargeError) as exc:
        await client.mint("0.0.5678", "unused", uri)

    assert exc.value.size == 101
    assert exc.value.message == "Metadata too long: 101 bytes (max 100 bytes)"
    assert executor.calls == []


async def test_mint_accepts_pointer_at_limit(client, executor):
    supply_key = PrivateKey.generate_ed25519().to_string_der()

    await client.mint("0.0.5678", supply_key, "ipfs://" + "b" * 93)

    assert len(executor.calls) == 1


async def test_mint_without_serial_raises(client):
    client._execute = RecordingExecutor(
        receipt=SimpleNamespace(status=None, serial_numbers=[]),
    )
    supply_key = PrivateKey.generate_ed25519().to_string_der()

    with pytest.raises(MintError):
        await client.mint("0.0.5678", supply_key, "ipfs://bafyabc")


async def test_mint_sdk_failure_passes_message_through(client):
    client._execute = RecordingExecutor(error=RuntimeError("INVALID_SIGNATURE"))
    supply_key = PrivateKey.generate_ed25519().to_string_der()

    with pytest.raises(MintError) as exc:
        await client.mint("0.0.5678", supply_key, "ipfs://bafyabc")
    assert exc.value.message == "INVALID_SIGNATURE"
    assert exc.value.context.token_id == "0.0.5678"


async def test_transfer_defaults_to_operator_signature(client, executor, operator_key):
    receipt = await client.transfer("0.0.5678", 7, "0.0.2", "0.0.1234")

    _, signers, error_cls = executor.calls[0]
    assert signers == [operator_key]
    assert error_cls is TransferError
    assert receipt.transaction_id == "0.0.2@1700000000.000000001"


async def test_transfer_with_authority_key(client, executor, operator_key):
    authority = PrivateKey.generate_ed25519()

    await client.transfer(
        "0.0.5678", 7, "0.0.2", "0.0.1234", authority.to_string_der(),
    )

    _, signers, _ = executor.calls[0]
    assert len(signers) == 1
    assert signers[0] is not operator_key


async def test_transfer_failure_maps_to_transfer_error(client):
    client._execute = RecordingExecutor(
        error=RuntimeError("TOKEN_NOT_ASSOCIATED_TO_ACCOUNT"),
    )

    with pytest.raises(TransferError) as exc:
        await client.transfer("0.0.5678", 7, "0.0.2", "0.0.1234")
    assert exc.value.message == "TOKEN_NOT_ASSOCIATED_TO_ACCOUNT"
    assert exc.value.context.serial_number == 7


# -- _execute: freeze, sign, submit, receipt status --------------------------

class FakeTransaction:
    """Records the freeze/sign/execute sequence; execute returns a canned receipt."""

    def __init__(self, status, transaction_id="0.0.2@1700000000.000000042", **receipt):
        self.status = status
        self.transaction_id = transaction_id
        self.receipt_fields = receipt
        self.steps = []

    def freeze_with(self, client):
        self.steps.append(("freeze", client))
        return self

    def sign(self, key):
        self.steps.append(("sign", key))
        return self

    def execute(self, client):
        self.steps.append(("execute", client))
        return SimpleNamespace(status=self.status, **self.receipt_fields)

    def add_nft_transfer(self, nft_id, sender, receiver):
        self.steps.append(("add_nft_transfer", nft_id.serial_number, str(sender), str(receiver)))
        return self


def test_execute_freezes_signs_then_submits(client, operator_key):
    client._client = sentinel = object()
    extra_key = PrivateKey.generate_ed25519()
    tx = FakeTransaction(ResponseCode.SUCCESS)

    receipt, transaction_id = client._execute(tx, [operator_key, extra_key], MintError)

    assert [s[0] for s in tx.steps] == ["freeze", "sign", "sign", "execute"]
    assert tx.steps[0][1] is sentinel
    assert tx.steps[1][1] is operator_key
    assert tx.steps[2][1] is extra_key
    assert receipt.status == ResponseCode.SUCCESS
    assert transaction_id == "0.0.2@1700000000.000000042"


@pytest.mark.parametrize("error_cls", [CreationError, MintError, TransferError])
def test_execute_non_success_receipt_raises_given_error(client, operator_key, error_cls):
    tx = FakeTransaction(ResponseCode.INVALID_SIGNATURE)

    with pytest.raises(error_cls) as exc:
        client._execute(tx, [operator_key], error_cls)

    assert "INVALID_SIGNATURE" in exc.value.message
    assert "0.0.2@1700000000.000000042" in exc.value.message
    assert exc.value.http_status == 500


async def test_transfer_rejected_receipt_surfaces_as_transfer_error(
    client, operator_key, monkeypatch,
):
    """Real _execute path: the receipt status reaches the caller unchanged."""
    tx = FakeTransaction(ResponseCode.ACCOUNT_FROZEN_FOR_TOKEN)
    monkeypatch.setattr(hedera_client, "TransferTransaction", lambda: tx)

    with pytest.raises(TransferError) as exc:
        await client.transfer("0.0.5678", 7, "0.0.2", "0.0.1234")

    assert "ACCOUNT_FROZEN_FOR_TOKEN" in exc.value.message
    assert ("add_nft_transfer", 7, "0.0.2", "0.0.1234") in tx.steps
    assert ("sign", operator_key) in tx.steps


async def test_transfer_success_reports_status_name(client, monkeypatch):
    tx = FakeTransaction(ResponseCode.SUCCESS)
    monkeypatch.setattr(hedera_client, "TransferTransaction", lambda: tx)

    receipt = await client.transfer("0.0.5678", 7, "0.0.2", "0.0.1234")

    assert receipt.status == "SUCCESS"
    assert receipt.transaction_id == "0.0.2@1700000000.000000042"


# -- nft_owner ----------------------------------------------------------------

async def test_nft_owner_returns_holder(client, monkeypatch):
    monkeypatch.setattr(client, "_nft_owner_sync", lambda token_id, serial: "0.0.1234")
    assert await client.nft_owner("0.0.5678", 7) == "0.0.1234"


async def test_nft_owner_query_failure_maps_to_ledger_error(client, monkeypatch):
    def fail(token_id, serial):
        raise RuntimeError("INVALID_NFT_ID")

    monkeypatch.setattr(client, "_nft_owner_sync", fail)

    with pytest.raises(LedgerError) as exc:
        await client.nft_owner("0.0.5678", 7)
    assert exc.value.code == "NFT_INFO_ERROR"
    assert exc.value.message == "INVALID_NFT_ID"
