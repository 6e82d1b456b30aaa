from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from sked_deconfliction.domain.flight import Flight
from sked_deconfliction.domain.resources import Airspace


class ConflictType(str, Enum):
    AIRSPACE_FULL = "airspace_full"
    TACAN_EXHAUSTED = "tacan_exhausted"
    DTF_SEQUENTIAL_UNAVAILABLE = "dtf_sequential_unavailable"
    CM_EXHAUSTED = "cm_exhausted"


@dataclass(frozen=True)
class AirspaceAssignment:
    airspace: Airspace
    block_units: int
    physical_block: str
    flexed_down: bool = False


@dataclass(frozen=True)
class TacanAssignment:
    base: int
    paired: int
    preset_name: Optional[str] = None
    preset_freq: Optional[float] = None
    is_overflow: bool = False

    @property
    def label(self) -> str:
        return f"{self.base}/{self.paired}"


@dataclass(frozen=True)
class FrequencyAssignment:
    preset: Optional[float] = None
    preset_name: Optional[str] = None
    cms: Tuple[float, ...] = ()


@dataclass(frozen=True)
class Conflict:
    """
    An allocation that could not be satisfied.

    Attributes
    ----------
    conflict_type : ConflictType
        Which resource ran out.
    message : str
        Human readable explanation with utilization figures.
    involved_flight_ids : Tuple[str, ...]
        The flight that failed, followed by every flight overlapping it.
    """
    conflict_type: ConflictType
    message: str
    involved_flight_ids: Tuple[str, ...]


@dataclass(frozen=True)
class DeconflictResult:
    flight: Flight
    airspace: Optional[AirspaceAssignment]
    tacan: Tuple[TacanAssignment, ...]
    frequencies: FrequencyAssignment
    conflicts: Tuple[Conflict, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.conflicts


@dataclass(frozen=True)
class DeconflictionRun:
    results: List[DeconflictResult] = field(default_factory=list)
    conflicts: List[Conflict] = field(default_factory=list)

    def result_for(self, flight_id: str) -> Optional[DeconflictResult]:
        for r in self.results:
            if r.flight.flight_id == flight_id:
                return r
        return None
