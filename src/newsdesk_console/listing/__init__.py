"""
Faceted listing controller.

Facet resolution, pagination, gated retrieval, view-state projection and
refetch-after-mutation, shared by every listing screen.
"""

from .facets import ALL_STATUSES, Facet, FacetInputs, FacetSelection, NewsStatus, resolve, select
from .models import ListingQuery, ListingResult, Phase, ViewState
from .pagination import PaginationState
from .retrieval import FetchFn, RetrievalBinding, RetrievalState
from .projector import project
from .mutations import MutationKind, MutationRefetchCoordinator
from .controller import FacetedListingController, MutationClient

__all__ = [
    "ALL_STATUSES",
    "Facet",
    "FacetInputs",
    "FacetSelection",
    "NewsStatus",
    "resolve",
    "select",
    "ListingQuery",
    "ListingResult",
    "Phase",
    "ViewState",
    "PaginationState",
    "FetchFn",
    "RetrievalBinding",
    "RetrievalState",
    "project",
    "MutationKind",
    "MutationRefetchCoordinator",
    "FacetedListingController",
    "MutationClient",
]
