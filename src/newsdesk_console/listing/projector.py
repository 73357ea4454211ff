"""Projection of per-facet retrieval states into one view state."""

from typing import Mapping, Optional

from newsdesk_console.listing.facets import Facet
from newsdesk_console.listing.models import ListingResult, Phase, ViewState
from newsdesk_console.listing.retrieval import RetrievalState


def project(
    active_facet: Facet,
    states: Mapping[Facet, RetrievalState],
    snapshot: Optional[ListingResult] = None,
) -> ViewState:
    """Build the view state from the active facet's retrieval state.

    States of suppressed facets are ignored. ``snapshot`` is the hydration
    result for the default listing; it only ever stands in for facet NONE
    and only until that facet's first fetch completes.

    Phases:
        IDLE                   nothing has run and no snapshot applies
        LOADING                first fetch in flight, nothing to show
        READY                  a result is shown and nothing is in flight
        BACKGROUND_REFRESHING  a result is shown while a newer fetch runs
        ERROR                  the fetch failed and nothing can be shown

    A failure with an earlier result still available stays READY with
    ``error_detail`` set, so the list remains visible.
    """
    state = states.get(active_facet) or RetrievalState()

    result = state.result
    if result is None and active_facet is Facet.NONE and not state.resolved:
        result = snapshot

    if state.fetching:
        phase = Phase.BACKGROUND_REFRESHING if result is not None else Phase.LOADING
        return ViewState(phase, active_facet, result)

    if state.error is not None:
        phase = Phase.READY if result is not None else Phase.ERROR
        return ViewState(phase, active_facet, result, error_detail=state.error)

    if result is not None:
        return ViewState(Phase.READY, active_facet, result)

    return ViewState(Phase.IDLE, active_facet, None)
