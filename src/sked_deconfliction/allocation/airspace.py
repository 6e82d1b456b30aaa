from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.domain.assignments import AirspaceAssignment, Conflict, ConflictType
from sked_deconfliction.domain.resources import Airspace, EventTypeRule, ResourceConfig


def needs_no_airspace(full_event_code: str, config: ResourceConfig) -> bool:
    code = full_event_code.upper()
    return any(code.startswith(prefix) for prefix in config.no_airspace_codes)


def airspace_usage(ctx: AllocationContext, config: ResourceConfig) -> Dict[Airspace, int]:
    """Block-units already committed per pool by overlapping, decided flights."""
    used: Dict[Airspace, int] = {a: 0 for a in config.airspaces}
    for res in ctx.prior:
        if res.airspace is None:
            continue
        used[res.airspace.airspace] = used.get(res.airspace.airspace, 0) + res.airspace.block_units
    return used


def effective_preference(
    rule: EventTypeRule,
    ctx: AllocationContext,
    config: ResourceConfig,
) -> List[Airspace]:
    """
    Pool order for this flight: the rule's preference followed by the
    remaining pools. Rules with `yields_to` flip the order when one of
    those event types is up at the same time.
    """
    order = [a for a in rule.preferred_airspace if a in config.airspaces]
    order += [a for a in config.airspaces if a not in order]
    if rule.yields_to and ctx.overlapping_event_types & set(rule.yields_to):
        order.reverse()
    return order


def pick_physical_block(
    airspace: Airspace,
    ctx: AllocationContext,
    config: ResourceConfig,
) -> str:
    pool = config.pool(airspace)
    in_use: Set[str] = {
        res.airspace.physical_block
        for res in ctx.prior
        if res.airspace is not None and res.airspace.airspace is airspace
    }
    for block in pool.physical_blocks:
        if block not in in_use:
            return block
    return pool.fallback_block


def _utilization_text(used: Dict[Airspace, int], config: ResourceConfig) -> str:
    return ", ".join(
        f"{pool.label}: {used.get(a, 0)}/{pool.block_units} used"
        for a, pool in config.airspaces.items()
    )


def allocate_airspace(
    ctx: AllocationContext,
    config: ResourceConfig,
) -> Tuple[Optional[AirspaceAssignment], List[Conflict]]:
    flight = ctx.flight
    rule = config.rule_for(flight.event_type)
    if rule is None or rule.block_units == 0:
        return None, []
    if needs_no_airspace(flight.full_event_code, config):
        return None, []

    used = airspace_usage(ctx, config)
    available = {a: config.pool(a).block_units - used.get(a, 0) for a in config.airspaces}
    order = effective_preference(rule, ctx, config)

    # ideal size against every pool before flexing down anywhere
    for blocks in rule.block_options:
        for airspace in order:
            if available[airspace] >= blocks:
                return (
                    AirspaceAssignment(
                        airspace=airspace,
                        block_units=blocks,
                        physical_block=pick_physical_block(airspace, ctx, config),
                        flexed_down=blocks < rule.block_units,
                    ),
                    [],
                )

    needed = min(rule.block_options)
    conflict = Conflict(
        conflict_type=ConflictType.AIRSPACE_FULL,
        message=(
            f"Airspace full for {flight.flight_id} ({flight.event_type}): needs {needed}+ "
            f"block units, only {max(available.values(), default=0)} available in any single "
            f"airspace. {_utilization_text(used, config)}."
        ),
        involved_flight_ids=ctx.involved_flight_ids,
    )
    return None, [conflict]
