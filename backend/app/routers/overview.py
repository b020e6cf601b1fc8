from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.schemas.listing import ListingFilter, ListingResponse
from app.schemas.overview import NavigationResponse, OverviewResponse
from app.viewmodels.overview import OverviewViewModel

# Every handler is ``async def`` so view-model fields are only touched on the
# event loop that owns the view model.
router = APIRouter(prefix="/overview")


async def get_overview_view_model(request: Request) -> OverviewViewModel:
    view_model: OverviewViewModel | None = getattr(
        request.app.state, "overview_view_model", None
    )
    if view_model is None or view_model.is_cleared:
        raise HTTPException(status_code=503, detail="Overview screen is not available")
    return view_model


def _to_response(view_model: OverviewViewModel) -> OverviewResponse:
    # One read of the snapshot keeps status and listings paired.
    state = view_model.state.value
    status = state.status if state is not None else None
    listings = state.listings if state is not None else ()
    return OverviewResponse(
        status=status,
        listings=[ListingResponse.model_validate(listing) for listing in listings],
        filter=view_model.listing_filter,
        total=len(listings),
    )


@router.get("", response_model=OverviewResponse)
async def get_overview(
    view_model: OverviewViewModel = Depends(get_overview_view_model),
) -> OverviewResponse:
    return _to_response(view_model)


@router.post("/refresh", response_model=OverviewResponse)
async def refresh_overview(
    listing_filter: ListingFilter | None = Query(None, alias="filter"),
    view_model: OverviewViewModel = Depends(get_overview_view_model),
) -> OverviewResponse:
    """Start a new fetch; the response reports LOADING."""
    view_model.refresh_listings(listing_filter)
    return _to_response(view_model)

@router.post("/select/{listing_id}", response_model=NavigationResponse)
async def select_listing(
    listing_id: str,
    view_model: OverviewViewModel = Depends(get_overview_view_model),
) -> NavigationResponse:
    listing = view_model.find_listing(listing_id)
    if listing is None:
        raise HTTPException(status_code=404, detail=f"Listing {listing_id} not found")
    view_model.select_listing(listing)
    return NavigationResponse(
        pending=True, listing=ListingResponse.model_validate(listing)
    )


@router.get("/navigation", response_model=NavigationResponse)
async def get_navigation(
    view_model: OverviewViewModel = Depends(get_overview_view_model),
) -> NavigationResponse:
    listing = view_model.navigate_to_selected_listing.peek()
    if listing is None:
        return NavigationResponse(pending=False)
    return NavigationResponse(
        pending=True, listing=ListingResponse.model_validate(listing)
    )


@router.post("/navigation/ack", response_model=NavigationResponse)
async def acknowledge_navigation(
    view_model: OverviewViewModel = Depends(get_overview_view_model),
) -> NavigationResponse:
    view_model.acknowledge_navigation()
    return NavigationResponse(pending=False)
