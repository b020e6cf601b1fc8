from __future__ import annotations

from app.config import settings
from app.services.listing_source import ListingSource, StaticListingSource


def get_listing_source() -> ListingSource:
    if settings.use_mock_listings:
        return StaticListingSource()

    from app.services.mars_client import MarsApiClient

    return MarsApiClient()
