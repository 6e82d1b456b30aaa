from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sked_deconfliction.config.vt9 import VT9_CONFIG
from sked_deconfliction.domain.assignments import (
    Conflict,
    DeconflictionRun,
    DeconflictResult,
)
from sked_deconfliction.domain.flight import Flight, format_hhmm
from sked_deconfliction.domain.resources import ResourceConfig
from sked_deconfliction.domain.schedule_line import ScheduleLine
from sked_deconfliction.preprocessing.event_codes import EventCodeTable
from sked_deconfliction.preprocessing.flight_grouper import group_into_flights
from sked_deconfliction.preprocessing.line_extractor import extract_schedule_lines
from sked_deconfliction.solver.deconfliction_engine import DeconflictionEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    lines_parsed: int
    flights: int
    assigned: int
    conflicts: int


@dataclass(frozen=True)
class ScheduleSolution:
    lines: List[ScheduleLine] = field(default_factory=list)
    flights: List[Flight] = field(default_factory=list)
    run: DeconflictionRun = field(default_factory=DeconflictionRun)

    @property
    def results(self) -> List[DeconflictResult]:
        return self.run.results

    @property
    def conflicts(self) -> List[Conflict]:
        return self.run.conflicts

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def summary(self) -> RunSummary:
        return RunSummary(
            lines_parsed=len(self.lines),
            flights=len(self.flights),
            assigned=sum(1 for r in self.results if r.is_clean),
            conflicts=len(self.conflicts),
        )


def solve_schedule(
    pages: Iterable[str],
    config: ResourceConfig = VT9_CONFIG,
) -> ScheduleSolution:
    """
    Run the full pipeline on one day's page texts:
    extract lines -> group flights -> deconflict.

    An input without any recognizable flight row yields an empty
    solution; callers report that as "no flights found".
    """
    table = EventCodeTable(config.event_types.keys())
    lines = list(extract_schedule_lines(pages, table, callsign_prefix=config.callsign_prefix))
    if not lines:
        logger.warning("No schedule lines found in input text")
        return ScheduleSolution()

    flights = group_into_flights(lines)
    run = DeconflictionEngine(config).run(flights)
    return ScheduleSolution(lines=lines, flights=flights, run=run)


def _result_to_dict(r: DeconflictResult) -> Dict[str, Any]:
    f = r.flight
    airspace: Optional[Dict[str, Any]] = None
    if r.airspace is not None:
        airspace = {
            "airspace": r.airspace.airspace.value,
            "block_units": r.airspace.block_units,
            "physical_block": r.airspace.physical_block,
            "flexed_down": r.airspace.flexed_down,
        }
    return {
        "flight_id": f.flight_id,
        "callsign": f.callsign,
        "flight_type": f.flight_type.value,
        "event_type": f.event_type,
        "full_event_code": f.full_event_code,
        "brief": format_hhmm(f.brief_time),
        "takeoff": format_hhmm(f.scheduled_to),
        "land": format_hhmm(f.scheduled_land),
        "student_swap": f.is_student_swap,
        "lines": [l.line_num for l in f.lines],
        "callsigns": [l.callsign for l in f.lines],
        "airspace": airspace,
        "tacan": [
            {
                "base": t.base,
                "paired": t.paired,
                "preset_name": t.preset_name,
                "preset_freq": t.preset_freq,
                "is_overflow": t.is_overflow,
            }
            for t in r.tacan
        ],
        "frequencies": {
            "preset": r.frequencies.preset,
            "preset_name": r.frequencies.preset_name,
            "cms": list(r.frequencies.cms),
        },
        "conflicts": [c.conflict_type.value for c in r.conflicts],
    }


def conflict_to_dict(c: Conflict) -> Dict[str, Any]:
    return {
        "type": c.conflict_type.value,
        "message": c.message,
        "involved_flight_ids": list(c.involved_flight_ids),
    }


def solution_to_dict(solution: ScheduleSolution) -> Dict[str, Any]:
    s = solution.summary()
    return {
        "summary": {
            "lines_parsed": s.lines_parsed,
            "flights": s.flights,
            "assigned": s.assigned,
            "conflicts": s.conflicts,
        },
        "results": [_result_to_dict(r) for r in solution.results],
        "conflicts": [conflict_to_dict(c) for c in solution.conflicts],
    }


def save_solution(solution: ScheduleSolution, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "solution.json"
    out_path.write_text(json.dumps(solution_to_dict(solution), indent=2), encoding="utf-8")
    return out_path
