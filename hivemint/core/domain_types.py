"""Domain Types — identifiers, hive lifecycle states, and ledger receipts.

Invariants:
    - Ledger identifiers are carried as their canonical "shard.realm.num" strings
    - A hive moves available -> minted-pending-transfer -> sold, never backwards
    - Receipts are immutable values derived from a single transaction receipt

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, type-checker support
    - str Enum for HiveStatus: serializes to the persisted JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

HiveId = NewType("HiveId", str)
TokenIdStr = NewType("TokenIdStr", str)        # "0.0.5678"
AccountIdStr = NewType("AccountIdStr", str)    # "0.0.1234"
SigningKey = NewType("SigningKey", str)        # DER-encoded private key, hex


# ─── Enums ───────────────────────────────────────────────────────

class HiveStatus(str, Enum):
    """Hive lifecycle states — maps to the persisted `status` field."""
    AVAILABLE = "available"
    MINTED_PENDING_TRANSFER = "minted-pending-transfer"
    SOLD = "sold"


# ─── Ledger Receipts ─────────────────────────────────────────────

@dataclass(frozen=True)
class CollectionCreated:
    """Result of a collection-creation transaction. Keys are returned in cleartext."""
    token_id: TokenIdStr
    supply_key: SigningKey
    admin_key: SigningKey
    transaction_id: str


@dataclass(frozen=True)
class MintReceipt:
    serial_number: int
    transaction_id: str


@dataclass(frozen=True)
class TransferReceipt:
    transaction_id: str
    status: str
