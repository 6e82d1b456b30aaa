from __future__ import annotations

import logging
from typing import List, Sequence

from sked_deconfliction.allocation.airspace import allocate_airspace
from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.allocation.frequency import allocate_frequencies
from sked_deconfliction.allocation.tacan import allocate_tacan
from sked_deconfliction.domain.assignments import Conflict, DeconflictionRun, DeconflictResult
from sked_deconfliction.domain.flight import Flight
from sked_deconfliction.domain.resources import ResourceConfig
from sked_deconfliction.preprocessing.flight_overlap import compute_overlap_index

logger = logging.getLogger(__name__)


class DeconflictionEngine:
    """
    Greedy chronological allocator for airspace, TACAN and radio channels.

    Flights are decided one at a time in takeoff order. Each flight only
    sees resources held by overlapping flights decided before it, so a
    later flight never changes an earlier allocation and a flight that
    cannot be satisfied gets conflicts instead of stopping the run.
    """

    def __init__(self, config: ResourceConfig) -> None:
        self.config = config

    def run(self, flights: Sequence[Flight]) -> DeconflictionRun:
        # stable: ties keep the grouper's line-number order
        ordered = sorted(flights, key=lambda f: f.scheduled_to)
        overlaps = compute_overlap_index(ordered, self.config.overlap_buffer_minutes)

        results: List[DeconflictResult] = []
        all_conflicts: List[Conflict] = []

        for flight in ordered:
            ctx = AllocationContext.build(flight, overlaps[flight.flight_id], results)
            result = self.allocate(ctx)
            if result.conflicts:
                logger.debug(
                    "%s: %s",
                    flight.flight_id,
                    ", ".join(c.conflict_type.value for c in result.conflicts),
                )
            results.append(result)
            all_conflicts.extend(result.conflicts)

        logger.info(
            "Deconflicted %d flights: %d conflicts on %d flights",
            len(results),
            len(all_conflicts),
            sum(1 for r in results if r.conflicts),
        )
        return DeconflictionRun(results=results, conflicts=all_conflicts)

    def allocate(self, ctx: AllocationContext) -> DeconflictResult:
        conflicts: List[Conflict] = []

        airspace, air_conflicts = allocate_airspace(ctx, self.config)
        conflicts.extend(air_conflicts)

        tacan, tacan_conflicts = allocate_tacan(ctx, self.config)
        conflicts.extend(tacan_conflicts)

        frequencies, freq_conflicts = allocate_frequencies(ctx, tacan, self.config)
        conflicts.extend(freq_conflicts)

        return DeconflictResult(
            flight=ctx.flight,
            airspace=airspace,
            tacan=tuple(tacan),
            frequencies=frequencies,
            conflicts=tuple(conflicts),
        )


def run_deconfliction(flights: Sequence[Flight], config: ResourceConfig) -> DeconflictionRun:
    return DeconflictionEngine(config).run(flights)
