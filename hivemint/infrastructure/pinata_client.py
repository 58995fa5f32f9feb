"""Pinata Metadata Publisher — pins metadata JSON to IPFS, falls back to a stable pointer.

Invariants:
    - publish() never raises: any failure yields fallback_uri(document)
    - Exactly one outbound request per publish() call, no retry
    - Success URI is ipfs://<IpfsHash>

Design Decisions:
    - httpx.AsyncClient injected or owned: tests pass a client on MockTransport
    - Failures are funnelled through PublishFailure so every cause is logged
      the same way before the fallback is taken
"""

import logging

import httpx

from hivemint.core.errors import PublishFailure
from hivemint.core.token_metadata import (
    IPFS_PREFIX, fallback_uri, gateway_url, hive_id_of, pinned_object_name,
)

logger = logging.getLogger(__name__)


class PinataMetadataPublisher:
    """Publishes metadata documents through Pinata's pinJSONToIPFS endpoint."""

    def __init__(
        self,
        jwt: str,
        api_url: str,
        gateway: str = "",
        http_client: httpx.AsyncClient | None = None,
    ):
        self.jwt = jwt
        self.api_url = api_url
        self.gateway = gateway
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient()

    async def publish(self, document: dict) -> str:
        """Pin the document and return its URI, or the fallback pointer."""
        try:
            cid = await self._pin(document)
        except PublishFailure as e:
            uri = fallback_uri(document)
            logger.warning(
                f"Pinata failed, using fallback metadata {uri}: {e.message}",
                extra={"hive_id": hive_id_of(document)},
            )
            return uri
        uri = f"{IPFS_PREFIX}{cid}"
        logger.info(
            f"IPFS upload success: {uri}",
            extra={"hive_id": hive_id_of(document)},
        )
        return uri

    def gateway_url(self, uri: str) -> str | None:
        return gateway_url(uri, self.gateway)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def _pin(self, document: dict) -> str:
        """POST the document; return the content hash or raise PublishFailure."""
        payload = {
            "pinataMetadata": {"name": pinned_object_name(document)},
            "pinataContent": document,
        }
        try:
            response = await self.http.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.jwt}"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise PublishFailure(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise PublishFailure(f"transport error: {e}")
        except ValueError as e:
            raise PublishFailure(f"malformed response: {e}")
        cid = data.get("IpfsHash") if isinstance(data, dict) else None
        if not cid:
            raise PublishFailure("response has no IpfsHash")
        return cid
