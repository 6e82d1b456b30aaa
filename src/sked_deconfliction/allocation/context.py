from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Sequence, Tuple

from sked_deconfliction.domain.assignments import DeconflictResult
from sked_deconfliction.domain.flight import Flight


@dataclass(frozen=True)
class AllocationContext:
    """
    What an allocator may see while deciding one flight.

    Attributes
    ----------
    flight : Flight
        The flight being allocated.
    overlapping : Tuple[Flight, ...]
        Every other flight of the day whose window overlaps this one,
        decided or not.
    prior : Tuple[DeconflictResult, ...]
        Results already produced in this pass for overlapping flights.
        Only these count as resources in use.
    """
    flight: Flight
    overlapping: Tuple[Flight, ...]
    prior: Tuple[DeconflictResult, ...]

    @classmethod
    def build(
        cls,
        flight: Flight,
        overlapping: Sequence[Flight],
        results: Sequence[DeconflictResult],
    ) -> AllocationContext:
        ids = {f.flight_id for f in overlapping}
        prior = tuple(r for r in results if r.flight.flight_id in ids)
        return cls(flight=flight, overlapping=tuple(overlapping), prior=prior)

    @property
    def involved_flight_ids(self) -> Tuple[str, ...]:
        return (self.flight.flight_id,) + tuple(f.flight_id for f in self.overlapping)

    @property
    def overlapping_event_types(self) -> FrozenSet[str]:
        return frozenset(f.event_type for f in self.overlapping)
