"""View models exposing observable screen state."""

from app.viewmodels.observable import MappedField, NavigationSignal, ObservableField
from app.viewmodels.overview import ListingStatus, OverviewState, OverviewViewModel

__all__ = [
    "MappedField",
    "NavigationSignal",
    "ObservableField",
    "ListingStatus",
    "OverviewState",
    "OverviewViewModel",
]
