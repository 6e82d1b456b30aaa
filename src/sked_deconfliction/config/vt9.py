from __future__ import annotations

from typing import Dict

from sked_deconfliction.domain.resources import (
    Airspace,
    AirspacePoolConfig,
    EventTypeRule,
    ResourceConfig,
    TacanPair,
)

SCHEDULE_URL_TEMPLATE = (
    "https://www.cnatra.navy.mil/scheds/TW1/SQ-VT-9/!{date}!VT-9!Frontpage.pdf"
)

A4 = Airspace.AREA4
MOA2 = Airspace.MOA2


def _no_resources(name: str) -> EventTypeRule:
    return EventTypeRule(name=name, block_units=0)


VT9_EVENT_TYPES: Dict[str, EventTypeRule] = {
    "TR": EventTypeRule(name="TR", block_units=1, preferred_airspace=(A4,)),
    "IR": _no_resources("IR"),
    "AN": _no_resources("AN"),
    "FRM": EventTypeRule(
        name="FRM", block_units=1, preferred_airspace=(A4,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "DIV": EventTypeRule(
        name="DIV", block_units=2, preferred_airspace=(A4,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "DTF": EventTypeRule(
        name="DTF", block_units=2, preferred_airspace=(MOA2,),
        needs_tacan=True, needs_cm=2, tacan_pairs=2, tacan_sequential=True,
    ),
    # TAC works MOA 2 unless BFM/FTX are up at the same time.
    "TAC": EventTypeRule(
        name="TAC", block_units=2, block_units_min=1,
        preferred_airspace=(MOA2, A4), yields_to=("BFM", "FTX"),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "BFM": EventTypeRule(
        name="BFM", block_units=2, preferred_airspace=(MOA2,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "FTX": EventTypeRule(
        name="FTX", block_units=2, preferred_airspace=(MOA2,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "SEM": EventTypeRule(
        name="SEM", block_units=2, preferred_airspace=(MOA2,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "SLL": _no_resources("SLL"),
    "ON": _no_resources("ON"),
    "OCF": EventTypeRule(
        name="OCF", block_units=1, preferred_airspace=(A4,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "BITS": EventTypeRule(
        name="BITS", block_units=1, preferred_airspace=(A4,),
        needs_tacan=True, needs_cm=1, tacan_pairs=1,
    ),
    "IPROF": _no_resources("IPROF"),
}

VT9_AIRSPACES: Dict[Airspace, AirspacePoolConfig] = {
    A4: AirspacePoolConfig(
        label="Area 4",
        block_units=4,
        physical_blocks=("A4-1", "A4-2", "A4-3", "A4-4"),
    ),
    # 4 math units shown as two physical halves; a third split is the overflow.
    MOA2: AirspacePoolConfig(
        label="MOA 2",
        block_units=4,
        physical_blocks=("MOA2-A", "MOA2-B"),
        overflow_block="MOA2-C",
    ),
}

VT9_DEDICATED_TACAN_PAIRS = (
    TacanPair(base=17, paired=80, preset_name="TAC17", preset_freq=265.9),
    TacanPair(base=18, paired=81, preset_name="TAC18", preset_freq=261.35),
    TacanPair(base=19, paired=82, preset_name="TAC19", preset_freq=264.35),
    TacanPair(base=20, paired=83, preset_name="TAC20", preset_freq=271.7),
    TacanPair(base=21, paired=84, preset_name="TAC21", preset_freq=225.8),
)

# Held by VT-7, never handed out as overflow bases.
VT9_RESERVED_CHANNELS = frozenset({22, 23, 24, 25, 26})

VT9_CM_POOL = (
    234.5, 246.7, 246.8, 246.9, 299.5, 300.6, 303.0, 333.3, 333.55, 357.0,
)

VT9_CONFIG = ResourceConfig(
    event_types=VT9_EVENT_TYPES,
    airspaces=VT9_AIRSPACES,
    dedicated_tacan_pairs=VT9_DEDICATED_TACAN_PAIRS,
    reserved_channels=VT9_RESERVED_CHANNELS,
    tacan_max=126,
    cm_pool=VT9_CM_POOL,
    overlap_buffer_minutes=15,
    callsign_prefix="BT",
    no_airspace_codes=("TR43", "TR44"),
)
