"""Marketplace listings client using httpx."""

import time

import httpx
import structlog

from storefront.listings.models import Envelope, NetworkError
from storefront.listings.query import FeedQuery

logger = structlog.get_logger(__name__)

TOKEN_PATH = "/v1/auth/token"
LISTINGS_QUERY_PATH = "/v1/api/listings/query"


class HttpListingClient:
    """Queries the public listings endpoint with an anonymous access token."""

    def __init__(
        self,
        base_url: str,
        client_id: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client_id = client_id
        self._timeout = timeout
        self._transport = transport
        self._token: str | None = None
        self._token_expires_at = 0.0

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        if self._token is not None and time.monotonic() < self._token_expires_at:
            return self._token
        response = await client.post(
            TOKEN_PATH,
            data={
                "client_id": self._client_id,
                "grant_type": "client_credentials",
                "scope": "public-read",
            },
        )
        response.raise_for_status()
        body = response.json()
        self._token = body["access_token"]
        # Refresh a little before the server-side expiry
        self._token_expires_at = time.monotonic() + float(body.get("expires_in", 0)) - 5
        return self._token

    async def query(self, feed_query: FeedQuery) -> Envelope:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                token = await self._access_token(client)
                response = await client.get(
                    LISTINGS_QUERY_PATH,
                    params=feed_query.to_params(),
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Accept": "application/json",
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc
        except (ValueError, KeyError, TypeError) as exc:
            raise NetworkError(f"unreadable response: {exc}") from exc

        envelope = Envelope.from_json(payload)
        logger.debug(
            "listings_response",
            primary=len(envelope.primary),
            included=len(envelope.included),
            has_images=any(e.type == "image" for e in envelope.included),
        )
        return envelope
