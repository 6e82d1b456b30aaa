from __future__ import annotations

from typing import List, Optional, Set, Tuple

from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.domain.assignments import Conflict, ConflictType, TacanAssignment
from sked_deconfliction.domain.resources import ResourceConfig, TacanPair

# X/Y pairing: base channel N is flown with N + 63.
PAIR_OFFSET = 63
MAX_OVERFLOW_BASE = 63


def used_bases(ctx: AllocationContext) -> Set[int]:
    return {t.base for res in ctx.prior for t in res.tacan}


def _dedicated(pair: TacanPair) -> TacanAssignment:
    return TacanAssignment(
        base=pair.base,
        paired=pair.paired,
        preset_name=pair.preset_name,
        preset_freq=pair.preset_freq,
        is_overflow=False,
    )


def _overflow_ok(base: int, used: Set[int], config: ResourceConfig) -> bool:
    return (
        base not in config.reserved_channels
        and base not in used
        and base + PAIR_OFFSET <= config.tacan_max
    )


def find_available_pair(used: Set[int], config: ResourceConfig) -> Optional[TacanAssignment]:
    """First open dedicated pair, else the lowest valid ad-hoc base."""
    for pair in config.dedicated_tacan_pairs:
        if pair.base not in used:
            return _dedicated(pair)

    for base in range(1, MAX_OVERFLOW_BASE + 1):
        if _overflow_ok(base, used, config):
            return TacanAssignment(base=base, paired=base + PAIR_OFFSET, is_overflow=True)
    return None


def find_sequential_pairs(used: Set[int], config: ResourceConfig) -> Optional[List[TacanAssignment]]:
    """Two pairs with adjacent base channels, dedicated first."""
    pairs = config.dedicated_tacan_pairs
    for a, b in zip(pairs, pairs[1:]):
        if b.base - a.base == 1 and a.base not in used and b.base not in used:
            return [_dedicated(a), _dedicated(b)]

    for base in range(1, MAX_OVERFLOW_BASE):
        if _overflow_ok(base, used, config) and _overflow_ok(base + 1, used, config):
            return [
                TacanAssignment(base=base, paired=base + PAIR_OFFSET, is_overflow=True),
                TacanAssignment(base=base + 1, paired=base + 1 + PAIR_OFFSET, is_overflow=True),
            ]
    return None


def allocate_tacan(
    ctx: AllocationContext,
    config: ResourceConfig,
) -> Tuple[List[TacanAssignment], List[Conflict]]:
    flight = ctx.flight
    rule = config.rule_for(flight.event_type)
    if rule is None or not rule.needs_tacan or flight.is_single:
        return [], []

    used = used_bases(ctx)

    if rule.needs_sequential_pairs:
        seq = find_sequential_pairs(used, config)
        if seq is None:
            return [], [
                Conflict(
                    conflict_type=ConflictType.DTF_SEQUENTIAL_UNAVAILABLE,
                    message=(
                        f"No sequential TACAN pair available for {flight.flight_id} "
                        f"({flight.event_type}). All sequential pairs are in use."
                    ),
                    involved_flight_ids=ctx.involved_flight_ids,
                )
            ]
        return seq, []

    pair = find_available_pair(used, config)
    if pair is None:
        return [], [
            Conflict(
                conflict_type=ConflictType.TACAN_EXHAUSTED,
                message=(
                    f"No TACAN pair available for {flight.flight_id} ({flight.event_type}). "
                    f"{len(used)} base channels in use."
                ),
                involved_flight_ids=ctx.involved_flight_ids,
            )
        ]
    return [pair], []
