"""Map state transitions - Pure functions.

Holds the town count and the drawn marker set as an immutable value.
Every transition returns a new state, so the shell can swap the whole
value atomically.

Overlapping fetches are ordered by sequence number: each fetch takes a
ticket when it starts and its markers are applied only if no newer fetch
has been applied in the meantime.
"""

from dataclasses import dataclass, replace

from src.core.markers import Marker


@dataclass(frozen=True)
class MapState:
    """Immutable snapshot of what the map shows.

    Attributes:
        town_count: Number of towns to request (N)
        markers: Marker set currently drawn
        last_issued: Sequence number of the newest fetch started
        last_applied: Sequence number of the fetch whose markers are drawn
        render_version: Incremented every time a marker set is applied
    """
    town_count: int
    markers: tuple[Marker, ...] = ()
    last_issued: int = 0
    last_applied: int = 0
    render_version: int = 0


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one fetch-and-render cycle.

    Attributes:
        sequence: Monotonic sequence number
        town_count: Town count the fetch was issued with
    """
    sequence: int
    town_count: int


def initial_state(town_count: int) -> MapState:
    """Create the starting state with no markers drawn."""
    return MapState(town_count=town_count)


def set_town_count(state: MapState, town_count: int) -> MapState:
    """Return a new state with the town count updated.

    Pure function.

    Args:
        state: Current state
        town_count: New town count

    Returns:
        New state
    """
    return replace(state, town_count=town_count)


def issue_ticket(state: MapState) -> tuple[MapState, FetchTicket]:
    """Start a fetch: allocate the next sequence number.

    Pure function.

    Args:
        state: Current state

    Returns:
        Tuple of (new state, ticket for the fetch)
    """
    sequence = state.last_issued + 1
    ticket = FetchTicket(sequence=sequence, town_count=state.town_count)
    return replace(state, last_issued=sequence), ticket


def is_stale(state: MapState, ticket: FetchTicket) -> bool:
    """True if a newer fetch has already been applied."""
    return ticket.sequence <= state.last_applied


def apply_markers(
    state: MapState,
    ticket: FetchTicket,
    markers: tuple[Marker, ...],
) -> tuple[MapState, bool]:
    """Replace the marker set with the result of a fetch.

    Pure function. The previous marker set is discarded entirely. Results
    from a fetch older than the last applied one are ignored.

    Args:
        state: Current state
        ticket: Ticket of the fetch that produced the markers
        markers: New marker set

    Returns:
        Tuple of (new state, whether the markers were applied)
    """
    if is_stale(state, ticket):
        return state, False

    new_state = replace(
        state,
        markers=tuple(markers),
        last_applied=ticket.sequence,
        render_version=state.render_version + 1,
    )
    return new_state, True
