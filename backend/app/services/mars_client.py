"""Mars real-estate web service client."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

import httpx
from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.schemas.listing import Listing, ListingFilter
from app.services.listing_source import ListingSource, ListingSourceError

logger = logging.getLogger(__name__)

REALESTATE_PATH = "/realestate"

_listings_adapter = TypeAdapter(list[Listing])


def decode_listings(payload: object) -> list[Listing]:
    """Validate a decoded JSON payload into listings.

    The service answers with a bare JSON array; anything else is rejected.
    """
    if not isinstance(payload, list):
        raise ListingSourceError(
            f"Expected a JSON array of listings, got {type(payload).__name__}"
        )
    try:
        return _listings_adapter.validate_python(payload)
    except ValidationError as e:
        raise ListingSourceError(
            f"Malformed listing payload ({e.error_count()} errors)"
        ) from e


class MarsApiClient(ListingSource):
    """HTTP client for the Mars real-estate web service.

    Supports use as an async context manager to share a single
    ``httpx.AsyncClient`` across fetches::

        async with MarsApiClient() as client:
            listings = await client.fetch_listings()

    Without the context manager a fresh ``httpx.AsyncClient`` is created
    per request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        url = base_url if base_url is not None else settings.mars_api_base_url
        if not url:
            raise ValueError("MARS_API_BASE_URL is not configured")
        self._timeout = (
            timeout if timeout is not None else settings.mars_api_timeout_seconds
        )
        if self._timeout <= 0:
            raise ValueError("timeout must be > 0")
        self._base_url = url.rstrip("/")
        self._transport = transport
        # Shared HTTP client, set when used as async context manager
        self._shared_http: httpx.AsyncClient | None = None

    @property
    def source_name(self) -> str:
        return "mars-api"

    # -- async context manager -------------------------------------------------

    async def __aenter__(self) -> MarsApiClient:
        if self._shared_http is not None:
            raise RuntimeError("MarsApiClient context manager is not reentrant")
        self._shared_http = self._new_http_client()
        return self

    async def aclose(self) -> None:
        if self._shared_http is not None:
            await self._shared_http.aclose()
            self._shared_http = None

    # -- public API ------------------------------------------------------------

    async def fetch_listings(
        self, listing_filter: ListingFilter = ListingFilter.SHOW_ALL
    ) -> list[Listing]:
        """
        Fetch listings from ``GET /realestate?filter=<value>``.

        Every transport, status or decode failure surfaces as
        ``ListingSourceError`` chained from the underlying error.
        """
        async with self._http_client() as http:
            return await self._do_fetch(http, listing_filter)

    # -- internals -------------------------------------------------------------

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    @contextlib.asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the shared HTTP client, or a temporary one-off client."""
        if self._shared_http is not None:
            yield self._shared_http
        else:
            async with self._new_http_client() as http:
                yield http

    async def _do_fetch(
        self,
        http: httpx.AsyncClient,
        listing_filter: ListingFilter,
    ) -> list[Listing]:
        params = {"filter": listing_filter.value}
        logger.info(
            "Mars API request: %s%s (filter=%s)",
            self._base_url,
            REALESTATE_PATH,
            listing_filter.value,
        )

        try:
            response = await http.get(REALESTATE_PATH, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Mars API HTTP error: %s - body: %s",
                e,
                e.response.text[:500],
            )
            raise ListingSourceError(
                f"Mars API returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Mars API request error: %r", e)
            raise ListingSourceError(f"Mars API request failed: {e!r}") from e
        except ValueError as e:
            logger.error("Mars API returned invalid JSON: %s", e)
            raise ListingSourceError("Mars API returned invalid JSON") from e

        listings = decode_listings(data)
        logger.info(
            "Mars API returned %d listings (filter=%s)",
            len(listings),
            listing_filter.value,
        )
        return listings
