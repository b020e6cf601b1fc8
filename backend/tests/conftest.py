"""Pytest configuration and fixtures for tests."""

from __future__ import annotations

import asyncio
import os
import sys

import pytest

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.schemas.listing import Listing, ListingFilter  # noqa: E402
from app.services.listing_source import ListingSource  # noqa: E402


def make_listing(listing_id: str, *, price: float = 450000, type: str = "buy") -> Listing:
    return Listing(
        id=listing_id,
        img_src=f"http://mars.jpl.nasa.gov/msl-raw-images/{listing_id}.jpg",
        price=price,
        type=type,
    )


class FakeListingSource(ListingSource):
    """Source whose fetches stay pending until the test settles them."""

    source_name = "fake"

    def __init__(self) -> None:
        self.calls: list[ListingFilter] = []
        self.pending: list[asyncio.Future] = []

    async def fetch_listings(
        self, listing_filter: ListingFilter = ListingFilter.SHOW_ALL
    ) -> list[Listing]:
        self.calls.append(listing_filter)
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    async def wait_for_calls(self, count: int = 1) -> None:
        """Yield to the loop until ``count`` fetches have started."""
        for _ in range(100):
            if len(self.pending) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} fetches, saw {len(self.pending)}")

    def resolve(self, listings: list[Listing], index: int = -1) -> None:
        self.pending[index].set_result(list(listings))

    def reject(self, error: BaseException, index: int = -1) -> None:
        self.pending[index].set_exception(error)


@pytest.fixture
def listings() -> list[Listing]:
    return [
        make_listing("424905", price=450000, type="buy"),
        make_listing("424906", price=8000000, type="rent"),
        make_listing("424907", price=11000000, type="rent"),
    ]


@pytest.fixture
def fake_source() -> FakeListingSource:
    return FakeListingSource()
