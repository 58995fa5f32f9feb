"""Token Metadata — metadata documents, on-ledger pointers, and explorer links.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - The on-ledger pointer is the UTF-8 encoded URI and never exceeds 100 bytes
    - fallback_uri depends only on the "Hive ID" attribute (same input, same URI)
    - Attribute order is preserved: the first attribute names the pinned object

Design Decisions:
    - Documents are plain dicts: they are serialized to the pinning provider as-is
"""

from hivemint.core.errors import ErrorContext, MetadataTooLargeError
from hivemint.core.hive_record import HiveRecord

METADATA_POINTER_LIMIT = 100
HIVE_ID_TRAIT = "Hive ID"
IPFS_PREFIX = "ipfs://"
FALLBACK_PREFIX = "hive:"
EXPLORER_BASE = "https://hashscan.io"


def build_metadata(
    name: str, description: str, image: str, traits: list[tuple[str, object]],
) -> dict:
    """Assemble an OpenSea-style metadata document."""
    return {
        "name": name,
        "description": description,
        "image": image,
        "attributes": [
            {"trait_type": trait, "value": value} for trait, value in traits
        ],
    }


def build_purchase_metadata(hive: HiveRecord, owner: str) -> dict:
    """Metadata for a hive minted as part of a purchase."""
    return build_metadata(
        hive.name, hive.description, hive.image,
        [
            (HIVE_ID_TRAIT, hive.id),
            ("Location", hive.location),
            ("Farmer", hive.farmer),
            ("Investment", f"{hive.price} HBAR"),
            ("Status", "sold"),
            ("Owner", owner),
        ],
    )


def hive_id_of(document: dict) -> str | None:
    """Value of the "Hive ID" attribute, if the document carries one."""
    for attribute in document.get("attributes") or []:
        if attribute.get("trait_type") == HIVE_ID_TRAIT:
            return str(attribute.get("value"))
    return None


def fallback_uri(document: dict) -> str:
    """Stable pointer used when the pinning provider is unavailable."""
    return f"{FALLBACK_PREFIX}{hive_id_of(document) or 'unknown'}"


def pinned_object_name(document: dict) -> str:
    """Display name for the pinned object: first attribute value."""
    attributes = document.get("attributes") or []
    label = attributes[0].get("value") if attributes else document.get("name")
    return f"Ecolive Hive #{label}"


def encode_metadata_pointer(
    uri: str, limit: int = METADATA_POINTER_LIMIT,
    context: ErrorContext | None = None,
) -> bytes:
    """Encode the URI for the mint transaction, rejecting oversize pointers."""
    encoded = uri.encode("utf-8")
    if len(encoded) > limit:
        raise MetadataTooLargeError(len(encoded), limit, context)
    return encoded


def gateway_url(uri: str, gateway: str) -> str | None:
    """HTTPS rendering of an ipfs:// URI on the given gateway host."""
    if not gateway or not uri.startswith(IPFS_PREFIX):
        return None
    host = gateway.removeprefix("https://").removeprefix("http://").rstrip("/")
    return f"https://{host}/ipfs/{uri[len(IPFS_PREFIX):]}"


def explorer_url(network: str, token_id: str, serial: int | None = None) -> str:
    """HashScan link for a collection or one of its serials."""
    url = f"{EXPLORER_BASE}/{network}/token/{token_id}"
    if serial is not None:
        url = f"{url}/{serial}"
    return url
