from __future__ import annotations

from sked_deconfliction.domain.resources import ResourceConfig


def validate_resource_config(config: ResourceConfig) -> None:
    if not config.airspaces:
        raise ValueError("Resource config has no airspace pools")
    if config.overlap_buffer_minutes < 0:
        raise ValueError("overlap_buffer_minutes must be >= 0")
    if not config.callsign_prefix or not config.callsign_prefix.isalpha():
        raise ValueError(f"Invalid callsign prefix: {config.callsign_prefix!r}")

    for a, pool in config.airspaces.items():
        if pool.block_units <= 0:
            raise ValueError(f"Airspace {a.value} must have block_units > 0")
        if len(set(pool.physical_blocks)) != len(pool.physical_blocks):
            raise ValueError(f"Duplicate physical block label in airspace {a.value}")

    largest_pool = max(p.block_units for p in config.airspaces.values())

    for code, r in config.event_types.items():
        if not code or code != code.upper():
            raise ValueError(f"Event type code must be upper case: {code!r}")
        if r.block_units < 0:
            raise ValueError(f"Event {code} has negative block_units")
        if r.block_units_min is not None and not (0 < r.block_units_min < r.block_units):
            raise ValueError(f"Event {code} block_units_min must be below block_units ({r.block_units})")
        if min(r.block_options) > largest_pool:
            raise ValueError(f"Event {code} needs more block units than any airspace holds")
        for a in r.preferred_airspace:
            if a not in config.airspaces:
                raise ValueError(f"Event {code} prefers unknown airspace {a.value}")
        for other in r.yields_to:
            if other not in config.event_types:
                raise ValueError(f"Event {code} yields to unknown event type {other}")
        if not (0 <= r.needs_cm <= len(config.cm_pool)):
            raise ValueError(f"Event {code} needs_cm out of range")
        if r.needs_tacan and r.tacan_pairs <= 0:
            raise ValueError(f"Event {code} needs TACAN but tacan_pairs is {r.tacan_pairs}")
        if r.tacan_sequential and r.tacan_pairs != 2:
            raise ValueError(f"Event {code} is sequential but does not need exactly 2 pairs")
        # allocator hands out one pair, or two sequential ones
        if r.needs_tacan and not (r.tacan_pairs == 1 or r.needs_sequential_pairs):
            raise ValueError(
                f"Event {code} needs {r.tacan_pairs} TACAN pairs; only 1, or 2 sequential, are supported"
            )

    bases = [p.base for p in config.dedicated_tacan_pairs]
    if len(set(bases)) != len(bases):
        raise ValueError("Duplicate base channel in dedicated TACAN pairs")
    for p in config.dedicated_tacan_pairs:
        if not (1 <= p.base <= config.tacan_max) or not (1 <= p.paired <= config.tacan_max):
            raise ValueError(f"TACAN pair {p.base}/{p.paired} outside 1..{config.tacan_max}")

    if len(set(config.cm_pool)) != len(config.cm_pool):
        raise ValueError("Duplicate frequency in CM pool")
