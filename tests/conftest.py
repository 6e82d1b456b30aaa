from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from sked_deconfliction.config.vt9 import VT9_CONFIG
from sked_deconfliction.domain.assignments import (
    AirspaceAssignment,
    DeconflictResult,
    FrequencyAssignment,
    TacanAssignment,
)
from sked_deconfliction.domain.flight import Flight, FlightType, format_hhmm
from sked_deconfliction.domain.resources import (
    Airspace,
    AirspacePoolConfig,
    EventTypeRule,
    ResourceConfig,
)
from sked_deconfliction.domain.schedule_line import ScheduleLine

SAMPLES_DIR = Path(__file__).resolve().parents[1] / "data" / "samples"
CONFIG_DIR = Path(__file__).resolve().parents[1] / "data" / "config"

_TYPES_BY_COUNT = {1: FlightType.SINGLE, 2: FlightType.SECTION, 4: FlightType.DIVISION}


def make_line(
    callsign: str = "BT21",
    to: int = 800,
    land: int = 930,
    event_type: str = "FRM",
    full_code: Optional[str] = None,
    line_num: int = 101,
    brief: Optional[int] = None,
    remarks: str = "",
    raw_text: str = "",
) -> ScheduleLine:
    return ScheduleLine(
        line_num=line_num,
        callsign=callsign,
        brief_time=brief if brief is not None else max(to - 130, 0),
        scheduled_to=to,
        scheduled_land=land,
        event_type=event_type,
        full_event_code=full_code or f"{event_type}4101",
        flight_hours=1.5,
        remarks=remarks,
        raw_text=raw_text or f"{line_num} {callsign} {to:04d} {land:04d} {event_type}",
    )


def make_flight(
    family: str = "BT2",
    to: int = 800,
    land: int = 930,
    event_type: str = "FRM",
    positions: int = 2,
    full_code: Optional[str] = None,
) -> Flight:
    lines = tuple(
        make_line(
            callsign=f"{family}{p}",
            to=to,
            land=land,
            event_type=event_type,
            full_code=full_code,
        )
        for p in range(1, positions + 1)
    )
    return Flight(
        flight_id=f"{family}-{format_hhmm(to)}",
        callsign=family,
        lines=lines,
        event_type=event_type,
        full_event_code=full_code or f"{event_type}4101",
        brief_time=lines[0].brief_time,
        scheduled_to=to,
        scheduled_land=land,
        flight_type=_TYPES_BY_COUNT[positions],
    )


def single_pool_config(units: int = 4, **overrides) -> ResourceConfig:
    """VT-9 channels with one Area 4 pool and a 1-unit TR rule."""
    rules: Dict[str, EventTypeRule] = {
        "TR": EventTypeRule(name="TR", block_units=1, preferred_airspace=(Airspace.AREA4,)),
        "FRM": EventTypeRule(
            name="FRM", block_units=1, preferred_airspace=(Airspace.AREA4,),
            needs_tacan=True, needs_cm=1, tacan_pairs=1,
        ),
    }
    fields = dict(
        event_types=rules,
        airspaces={
            Airspace.AREA4: AirspacePoolConfig(
                label="Area 4",
                block_units=units,
                physical_blocks=tuple(f"A4-{i}" for i in range(1, units + 1)),
            )
        },
        dedicated_tacan_pairs=VT9_CONFIG.dedicated_tacan_pairs,
        reserved_channels=VT9_CONFIG.reserved_channels,
        tacan_max=VT9_CONFIG.tacan_max,
        cm_pool=VT9_CONFIG.cm_pool,
    )
    fields.update(overrides)
    return ResourceConfig(**fields)


def sample_pages() -> List[str]:
    return [
        p.read_text(encoding="utf-8")
        for p in sorted(SAMPLES_DIR.glob("vt9_*.txt"))
    ]


@pytest.fixture
def vt9_config() -> ResourceConfig:
    return VT9_CONFIG


@pytest.fixture
def pages() -> List[str]:
    return sample_pages()


def make_result(
    flight: Flight,
    airspace: Optional[AirspaceAssignment] = None,
    tacan_bases: Sequence[int] = (),
    cms: Sequence[float] = (),
) -> DeconflictResult:
    return DeconflictResult(
        flight=flight,
        airspace=airspace,
        tacan=tuple(TacanAssignment(base=b, paired=b + 63) for b in tacan_bases),
        frequencies=FrequencyAssignment(cms=tuple(cms)),
    )
