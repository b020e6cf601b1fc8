"""View model behind the listing overview screen."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from types import TracebackType

from app.schemas.listing import Listing, ListingFilter
from app.services.listing_source import ListingSource
from app.viewmodels.observable import MappedField, NavigationSignal, ObservableField

logger = logging.getLogger(__name__)


class ListingStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    DONE = "done"


@dataclass(frozen=True)
class OverviewState:
    """Status and listings, always published together."""

    status: ListingStatus
    listings: tuple[Listing, ...] = ()


class OverviewViewModel:
    """Loads Mars listings and exposes their status to the view.

    A fetch starts as soon as the view model is created. The view observes
    ``state`` (or the ``status`` / ``listings`` projections of it) and
    ``navigate_to_selected_listing``; it calls ``acknowledge_navigation()``
    once it has navigated so the event does not fire again.

    All writes happen on ``loop``. Calling ``clear()`` cancels the in-flight
    fetch and freezes every field.
    """

    def __init__(
        self,
        source: ListingSource,
        *,
        listing_filter: ListingFilter = ListingFilter.SHOW_ALL,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._source = source
        # Raises RuntimeError when created outside a running loop without one
        self._loop = loop or asyncio.get_running_loop()
        self._listing_filter = listing_filter
        self._fetch_task: asyncio.Task[None] | None = None
        self._cleared = False

        self.state: ObservableField[OverviewState] = ObservableField(name="overview.state")
        self.status: MappedField[OverviewState, ListingStatus] = self.state.map(
            lambda s: s.status, name="overview.status"
        )
        self.listings: MappedField[OverviewState, tuple[Listing, ...]] = self.state.map(
            lambda s: s.listings, name="overview.listings"
        )
        self.navigate_to_selected_listing: NavigationSignal[Listing] = NavigationSignal(
            name="overview.navigate_to_selected_listing"
        )

        self.refresh_listings()

    # -- async context manager -------------------------------------------------

    async def __aenter__(self) -> OverviewViewModel:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # -- public API ------------------------------------------------------------

    @property
    def listing_filter(self) -> ListingFilter:
        return self._listing_filter

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    def refresh_listings(
        self, listing_filter: ListingFilter | None = None
    ) -> asyncio.Task[None] | None:
        """Publish LOADING now and schedule a fetch.

        A fetch still in flight is cancelled; only the newest one may
        publish. Returns the scheduled task, or None once cleared.
        """
        if self._cleared:
            logger.debug("refresh_listings() ignored: view model is cleared")
            return None

        if listing_filter is not None:
            self._listing_filter = listing_filter

        if self._fetch_task is not None and not self._fetch_task.done():
            logger.info("Superseding in-flight listing fetch")
            self._fetch_task.cancel()
            self._fetch_task = None

        previous = self.state.value.listings if self.state.has_value else ()
        self.state.set(OverviewState(ListingStatus.LOADING, previous))

        # An observer may have cleared us while handling LOADING.
        if self._cleared:
            return None

        task = self._loop.create_task(self._fetch(self._listing_filter))
        self._fetch_task = task
        return task

    def update_filter(self, listing_filter: ListingFilter) -> asyncio.Task[None] | None:
        return self.refresh_listings(listing_filter)

    def find_listing(self, listing_id: str) -> Listing | None:
        for listing in self.listings.value or ():
            if listing.id == listing_id:
                return listing
        return None

    def select_listing(self, listing: Listing) -> None:
        if self._cleared:
            return
        self.navigate_to_selected_listing.emit(listing)

    def acknowledge_navigation(self) -> None:
        if self._cleared:
            return
        self.navigate_to_selected_listing.clear()

    def clear(self) -> None:
        """Tear down: cancel the in-flight fetch and stop publishing."""
        if self._cleared:
            return
        self._cleared = True
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        logger.info("Overview view model cleared")

    async def aclose(self) -> None:
        """``clear()`` and wait for the cancelled fetch to unwind."""
        task = self._fetch_task
        self.clear()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    # -- internals -------------------------------------------------------------

    async def _fetch(self, listing_filter: ListingFilter) -> None:
        task = asyncio.current_task()
        try:
            listings = await self._source.fetch_listings(listing_filter)
        except Exception as e:
            logger.warning(
                "Fetching listings from %s failed (filter=%s): %s",
                self._source.source_name,
                listing_filter.value,
                e,
            )
            self._publish(task, OverviewState(ListingStatus.ERROR, ()))
            return

        self._publish(task, OverviewState(ListingStatus.DONE, tuple(listings)))

    def _publish(self, task: asyncio.Task | None, state: OverviewState) -> None:
        if self._cleared or task is not self._fetch_task:
            logger.debug("Dropping %s result from a stale fetch", state.status.value)
            return
        # Settled before observers run, so a retry from a callback does not
        # cancel the task that is publishing.
        self._fetch_task = None
        self.state.set(state)
        logger.info(
            "Listings %s (%d listings)", state.status.value, len(state.listings)
        )
