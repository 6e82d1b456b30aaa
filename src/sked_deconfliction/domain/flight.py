from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from sked_deconfliction.domain.schedule_line import ScheduleLine


def hhmm_to_minutes(hhmm: int) -> int:
    return (hhmm // 100) * 60 + hhmm % 100


def format_hhmm(hhmm: int) -> str:
    return f"{hhmm:04d}"


class FlightType(str, Enum):
    SINGLE = "single"
    SECTION = "section"
    DIVISION = "division"


@dataclass(frozen=True)
class Flight:
    """
    Represents one logical sortie to deconflict.

    A Flight groups 1, 2 or 4 schedule lines of the same callsign family
    taking off at the same time. It is the unit every allocator works on:
    its active window [scheduled_to, scheduled_land] decides which other
    flights compete with it for airspace, TACAN and radio channels.

    Attributes
    ----------
    flight_id : str
        Stable identifier "<family>-<HHMM>", e.g. "BT2-0730".
    callsign : str
        Callsign family shared by all lines, e.g. "BT2".
    lines : Tuple[ScheduleLine, ...]
        Constituent schedule lines in document order.
    event_type : str
        Representative event category (lead line if any, else first line).
    full_event_code : str
        Representative full event code.
    brief_time : int
        Earliest brief across lines (HHMM).
    scheduled_to : int
        Earliest takeoff across lines (HHMM).
    scheduled_land : int
        Latest landing across lines (HHMM).
    flight_type : FlightType
        single / section / division from distinct position digits.
    is_student_swap : bool
        True when any line was tagged as a student swap.
    """
    flight_id: str
    callsign: str
    lines: Tuple[ScheduleLine, ...]
    event_type: str
    full_event_code: str
    brief_time: int
    scheduled_to: int
    scheduled_land: int
    flight_type: FlightType
    is_student_swap: bool = False

    @property
    def start_minutes(self) -> int:
        return hhmm_to_minutes(self.scheduled_to)

    @property
    def end_minutes(self) -> int:
        return hhmm_to_minutes(self.scheduled_land)

    @property
    def is_single(self) -> bool:
        return self.flight_type is FlightType.SINGLE
