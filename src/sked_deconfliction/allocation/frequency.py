from __future__ import annotations

from typing import List, Sequence, Set, Tuple

from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.domain.assignments import (
    Conflict,
    ConflictType,
    FrequencyAssignment,
    TacanAssignment,
)
from sked_deconfliction.domain.resources import ResourceConfig


def used_cms(ctx: AllocationContext) -> Set[float]:
    return {cm for res in ctx.prior for cm in res.frequencies.cms}


def allocate_frequencies(
    ctx: AllocationContext,
    tacan: Sequence[TacanAssignment],
    config: ResourceConfig,
) -> Tuple[FrequencyAssignment, List[Conflict]]:
    """
    Preset inherited from the TACAN outcome plus auxiliary (CM) channels.

    Every overflow TACAN pair lacks a preset, so it costs one extra CM.
    When all pairs are overflow no preset is shown at all.
    """
    flight = ctx.flight
    rule = config.rule_for(flight.event_type)
    if rule is None or not rule.needs_tacan or flight.is_single:
        return FrequencyAssignment(), []

    preset = None
    preset_name = None
    if tacan and tacan[0].preset_freq:
        preset = tacan[0].preset_freq
        preset_name = tacan[0].preset_name

    needed = rule.needs_cm
    overflow = [t for t in tacan if t.is_overflow]
    if overflow:
        needed += len(overflow)
        if all(t.is_overflow for t in tacan):
            preset = None
            preset_name = None

    used = used_cms(ctx)
    cms: List[float] = []
    for freq in config.cm_pool:
        if len(cms) >= needed:
            break
        if freq not in used:
            cms.append(freq)

    assignment = FrequencyAssignment(preset=preset, preset_name=preset_name, cms=tuple(cms))
    if len(cms) < needed:
        return assignment, [
            Conflict(
                conflict_type=ConflictType.CM_EXHAUSTED,
                message=(
                    f"ChatterMark pool exhausted for {flight.flight_id} ({flight.event_type}). "
                    f"Needed {needed} CM(s), only {len(cms)} available."
                ),
                involved_flight_ids=ctx.involved_flight_ids,
            )
        ]
    return assignment, []
