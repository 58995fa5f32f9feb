"""Error hierarchy tests — status codes, codes, and the failure envelope."""

from hivemint.core.errors import (
    ConflictError,
    ErrorCategory,
    ErrorContext,
    HiveNotFoundError,
    HiveStoreError,
    LedgerError,
    MetadataTooLargeError,
    MintError,
    TransferError,
)


def test_to_response_envelope():
    assert TransferError("ACCOUNT_FROZEN_FOR_TOKEN").to_response() == {
        "success": False,
        "error": "ACCOUNT_FROZEN_FOR_TOKEN",
        "code": "TRANSFER_ERROR",
    }


def test_not_found_default_and_custom_message():
    assert HiveNotFoundError("HIVE-9").message == "Hive with id HIVE-9 not found"
    err = HiveNotFoundError("HIVE-9", "Hive not found")
    assert err.message == "Hive not found"
    assert err.http_status == 404
    assert err.context.hive_id == "HIVE-9"


def test_conflict_is_client_error():
    err = ConflictError("This hive has already been sold")
    assert err.http_status == 400
    assert err.category == ErrorCategory.CONFLICT


def test_metadata_too_large_is_a_mint_error():
    err = MetadataTooLargeError(120, 100)
    assert isinstance(err, MintError)
    assert isinstance(err, LedgerError)
    assert err.code == "METADATA_TOO_LARGE"
    assert err.http_status == 500


def test_store_error_is_unavailable():
    err = HiveStoreError("disk full", "write")
    assert err.http_status == 503
    assert err.message == "Hive store write failed: disk full"


def test_context_log_extra_drops_empty_fields():
    context = ErrorContext(hive_id="HIVE-001", serial_number=0)
    assert context.log_extra() == {"hive_id": "HIVE-001", "serial_number": 0}
