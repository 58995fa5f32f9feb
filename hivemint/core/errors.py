"""Error Hierarchy — typed, categorized exceptions for every hivemint failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400/404) are recoverable; ledger and store errors (5xx) are not
    - to_response() always produces the {success: false, error} envelope
    - Ledger messages are passed through verbatim (no rewording)

Design Decisions:
    - Single hierarchy with HiveMintError base: one global handler catches all
    - PublishFailure never reaches the API layer: the publisher recovers with a
      fallback URI, the class exists so the recovery path is typed
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    LEDGER = "ledger"
    STORAGE = "storage"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    hive_id: str | None = None
    token_id: str | None = None
    serial_number: int | None = None
    transaction_id: str | None = None

    def log_extra(self) -> dict:
        """Non-empty identifiers, shaped for logging's `extra=`."""
        return {
            k: v for k, v in (
                ("hive_id", self.hive_id),
                ("token_id", self.token_id),
                ("serial_number", self.serial_number),
                ("transaction_id", self.transaction_id),
            ) if v is not None
        }


class HiveMintError(Exception):
    """Base exception for all hivemint errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the uniform failure payload."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class HiveNotFoundError(HiveMintError):
    """No hive record with the requested id."""
    def __init__(self, hive_id: str, message: str | None = None):
        super().__init__(
            message or f"Hive with id {hive_id} not found",
            "HIVE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ErrorContext(hive_id=hive_id), 404,
        )
        self.hive_id = hive_id


class ConflictError(HiveMintError):
    """Hive is no longer available for purchase."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "HIVE_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Metadata Publishing ────────────────────────────────────────

class PublishFailure(HiveMintError):
    """Pinning provider unreachable or returned no content hash."""
    def __init__(self, message: str):
        super().__init__(
            message, "PUBLISH_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, None, 502,
        )


# ─── Ledger Errors (500-level) ──────────────────────────────────

class LedgerError(HiveMintError):
    """A transaction was rejected by the ledger or never reached finality."""
    def __init__(
        self, message: str, code: str = "LEDGER_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.LEDGER,
            ErrorSeverity.CRITICAL, context, 500,
        )


class CreationError(LedgerError):
    """Collection-creation transaction failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "CREATION_ERROR", context)


class MintError(LedgerError):
    """Mint transaction failed."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
        code: str = "MINT_ERROR",
    ):
        super().__init__(message, code, context)


class MetadataTooLargeError(MintError):
    """Metadata pointer exceeds the on-ledger size limit. Raised before submission."""
    def __init__(self, size: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Metadata too long: {size} bytes (max {limit} bytes)",
            context, code="METADATA_TOO_LARGE",
        )
        self.size = size
        self.limit = limit


class TransferError(LedgerError):
    """NFT transfer transaction failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "TRANSFER_ERROR", context)


# ─── Storage Errors ─────────────────────────────────────────────

class HiveStoreError(HiveMintError):
    """Hive record storage could not be read or written."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Hive store {operation} failed: {message}",
            "HIVE_STORE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
