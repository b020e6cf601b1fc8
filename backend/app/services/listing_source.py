"""Sources the overview screen can load Mars listings from."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from types import TracebackType

from app.schemas.listing import Listing, ListingFilter

logger = logging.getLogger(__name__)

MOCK_LISTINGS = [
    {
        "id": "424905",
        "img_src": "http://mars.jpl.nasa.gov/msl-raw-images/msss/01000/mcam/1000MR0044631300503690E01_DXXX.jpg",
        "price": 450000,
        "type": "buy",
    },
    {
        "id": "424906",
        "img_src": "http://mars.jpl.nasa.gov/msl-raw-images/msss/01000/mcam/1000ML0044631300305227E03_DXXX.jpg",
        "price": 8000000,
        "type": "rent",
    },
    {
        "id": "424907",
        "img_src": "http://mars.jpl.nasa.gov/msl-raw-images/msss/01000/mcam/1000MR0044631290503689E01_DXXX.jpg",
        "price": 11000000,
        "type": "rent",
    },
    {
        "id": "424908",
        "img_src": "http://mars.jpl.nasa.gov/msl-raw-images/msss/01000/mcam/1000MR0044631280503688E0B_DXXX.jpg",
        "price": 8000000,
        "type": "buy",
    },
]


class ListingSourceError(Exception):
    """Raised when listings cannot be fetched or decoded."""

    pass


class ListingSource(ABC):
    """Abstract source of Mars property listings."""

    @abstractmethod
    async def fetch_listings(
        self, listing_filter: ListingFilter = ListingFilter.SHOW_ALL
    ) -> list[Listing]:
        """
        Fetch the current listing collection.

        Args:
            listing_filter: Restrict results to rentals, sales, or neither.

        Returns:
            Listings in the order the source reports them.

        Raises:
            ListingSourceError: On network, HTTP status or decode failures.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str: ...

    async def __aenter__(self) -> ListingSource:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release any resources held by the source."""
        return None


class StaticListingSource(ListingSource):
    """Serves a fixed collection of listings from memory."""

    def __init__(self, listings: Iterable[Listing] | None = None) -> None:
        if listings is None:
            listings = [Listing.model_validate(raw) for raw in MOCK_LISTINGS]
        self._listings = list(listings)

    @property
    def source_name(self) -> str:
        return "static"

    async def fetch_listings(
        self, listing_filter: ListingFilter = ListingFilter.SHOW_ALL
    ) -> list[Listing]:
        if listing_filter is ListingFilter.SHOW_ALL:
            results = list(self._listings)
        else:
            results = [
                listing
                for listing in self._listings
                if listing.type == listing_filter.value
            ]
        logger.info(
            "Static source returned %d listings (filter=%s)",
            len(results),
            listing_filter.value,
        )
        return results
