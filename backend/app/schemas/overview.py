from __future__ import annotations

from pydantic import BaseModel

from app.schemas.listing import ListingFilter, ListingResponse
from app.viewmodels.overview import ListingStatus


class OverviewResponse(BaseModel):
    status: ListingStatus | None
    listings: list[ListingResponse]
    filter: ListingFilter
    total: int


class NavigationResponse(BaseModel):
    pending: bool
    listing: ListingResponse | None = None
