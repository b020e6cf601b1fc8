from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ListingFilter(str, Enum):
    """Values accepted by the web service's ``filter`` query parameter."""

    SHOW_RENT = "rent"
    SHOW_BUY = "buy"
    SHOW_ALL = "all"


class Listing(BaseModel):
    """One Mars property as returned by the real-estate web service."""

    id: str
    img_src_url: str = Field(alias="img_src")
    price: float
    type: str

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @property
    def is_rental(self) -> bool:
        return self.type == "rent"


class ListingResponse(BaseModel):
    id: str
    img_src_url: str
    price: float
    type: str
    is_rental: bool

    model_config = {"from_attributes": True}
