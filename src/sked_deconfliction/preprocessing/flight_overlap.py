from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from sked_deconfliction.domain.flight import Flight

DEFAULT_OVERLAP_BUFFER_MINUTES = 15


def flights_overlap(a: Flight, b: Flight, buffer_minutes: int = DEFAULT_OVERLAP_BUFFER_MINUTES) -> bool:
    """
    True if the two active windows [takeoff, land] overlap by more than
    `buffer_minutes`. A flight landing within the buffer of another's
    takeoff does not conflict with it.
    """
    s1, e1 = a.start_minutes, a.end_minutes
    s2, e2 = b.start_minutes, b.end_minutes
    return s1 < e2 - buffer_minutes and s2 < e1 - buffer_minutes


def compute_overlap_index(
        flights: Sequence[Flight],
        buffer_minutes: int = DEFAULT_OVERLAP_BUFFER_MINUTES,
) -> Dict[str, List[Flight]]:
    """
    Returns dict[flight_id] = overlapping flights (input order).
    Computed once per run so allocators do not rescan the whole day.
    """
    index: Dict[str, List[Flight]] = {f.flight_id: [] for f in flights}
    n = len(flights)

    for i in range(n):
        for j in range(i + 1, n):
            if flights_overlap(flights[i], flights[j], buffer_minutes):
                index[flights[i].flight_id].append(flights[j])
                index[flights[j].flight_id].append(flights[i])

    # keep input order regardless of which side discovered the pair
    order = {f.flight_id: k for k, f in enumerate(flights)}
    for fid in index:
        index[fid].sort(key=lambda f: order[f.flight_id])
    return index


def compute_overlap_pairs(
        flights: Sequence[Flight],
        buffer_minutes: int = DEFAULT_OVERLAP_BUFFER_MINUTES,
) -> List[Tuple[str, str]]:
    """
    Returns list of (flight_id1, flight_id2), in input order, that overlap.
    """
    pairs: List[Tuple[str, str]] = []
    n = len(flights)

    for i in range(n):
        for j in range(i + 1, n):
            if flights_overlap(flights[i], flights[j], buffer_minutes):
                pairs.append((flights[i].flight_id, flights[j].flight_id))

    return pairs
