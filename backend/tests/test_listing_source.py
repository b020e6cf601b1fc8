"""Tests for the static listing source and the source factory."""

from __future__ import annotations

import os
import sys
from unittest.mock import patch

import pytest

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.schemas.listing import ListingFilter  # noqa: E402
from app.services.factory import get_listing_source  # noqa: E402
from app.services.listing_source import (  # noqa: E402
    MOCK_LISTINGS,
    ListingSource,
    StaticListingSource,
)
from app.services.mars_client import MarsApiClient  # noqa: E402
from conftest import make_listing  # noqa: E402


class TestListingSource:
    def test_cannot_instantiate_abstract_source(self):
        with pytest.raises(TypeError):
            ListingSource()  # type: ignore[abstract]


class TestStaticListingSource:
    @pytest.mark.asyncio
    async def test_defaults_to_sample_listings(self):
        source = StaticListingSource()
        listings = await source.fetch_listings()
        assert [l.id for l in listings] == [raw["id"] for raw in MOCK_LISTINGS]
        assert source.source_name == "static"

    @pytest.mark.asyncio
    async def test_filters_by_type(self):
        source = StaticListingSource(
            [make_listing("1", type="buy"), make_listing("2", type="rent")]
        )
        rent = await source.fetch_listings(ListingFilter.SHOW_RENT)
        buy = await source.fetch_listings(ListingFilter.SHOW_BUY)
        assert [l.id for l in rent] == ["2"]
        assert [l.id for l in buy] == ["1"]

    @pytest.mark.asyncio
    async def test_usable_as_async_context_manager(self):
        source = StaticListingSource()
        async with source as entered:
            assert entered is source
            assert len(await entered.fetch_listings()) == len(MOCK_LISTINGS)

    @pytest.mark.asyncio
    async def test_returns_a_copy(self):
        source = StaticListingSource([make_listing("1")])
        first = await source.fetch_listings()
        first.clear()
        assert len(await source.fetch_listings()) == 1


class TestGetListingSource:
    def test_mock_listings_setting(self):
        with patch("app.services.factory.settings") as mock_settings:
            mock_settings.use_mock_listings = True
            assert isinstance(get_listing_source(), StaticListingSource)

    def test_remote_by_default(self):
        with patch("app.services.factory.settings") as mock_settings:
            mock_settings.use_mock_listings = False
            assert isinstance(get_listing_source(), MarsApiClient)
