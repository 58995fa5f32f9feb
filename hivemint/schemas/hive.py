"""Hive Schemas — request bodies for the token and purchase endpoints.

Invariants:
    - Ledger identifiers in requests must be "shard.realm.num"
    - Every BuyHiveRequest field is mandatory; MintNftRequest fills hive attributes with defaults

Design Decisions:
    - The persisted record (HiveRecord) lives in core; only API input is modelled here
"""

from pydantic import BaseModel, ConfigDict, Field

LEDGER_ID_PATTERN = r"^\d+\.\d+\.\d+$"


class BuyHiveRequest(BaseModel):
    """Purchase request — every field is mandatory."""
    model_config = ConfigDict(populate_by_name=True)

    hive_id: str = Field(alias="hiveId", min_length=1)
    investor_account_id: str = Field(
        alias="investorAccountId", pattern=LEDGER_ID_PATTERN,
    )
    token_id: str = Field(alias="tokenId", pattern=LEDGER_ID_PATTERN)
    supply_key: str = Field(alias="supplyKey", min_length=1)


class MintNftRequest(BaseModel):
    """Single mint request — collection credentials plus optional hive attributes."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token_id: str = Field(alias="tokenId", pattern=LEDGER_ID_PATTERN)
    supply_key: str = Field(alias="supplyKey", min_length=1)
    name: str = "Ecolive Hive"
    description: str = "Beehive investment NFT"
    image_url: str = Field(
        "https://via.placeholder.com/400x300?text=Beehive", alias="imageURL",
    )
    hive_id: str = Field("HIVE-001", alias="hiveId")
    location: str = "Nairobi, Kenya"
    farmer: str = "John Doe"
    investment_amount: int | float = Field(5000, alias="investmentAmount")
    status: str = "active"
