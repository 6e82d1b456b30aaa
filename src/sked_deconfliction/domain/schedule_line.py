from __future__ import annotations

from dataclasses import dataclass, replace

SWAP_MARKER = "SWAP"


@dataclass(frozen=True)
class ScheduleLine:
    """
    Represents one printed row of the daily flight schedule.

    A ScheduleLine is what the extractor recovers from a single row of
    page text. Several lines are later merged into one Flight by the
    grouper (sections, divisions, student swaps).

    Attributes
    ----------
    line_num : int
        Line number printed in the first column of the schedule.
    callsign : str
        Normalized callsign, e.g. "BT21". The character after the
        squadron prefix is the flight-family digit, the last one the
        position inside the flight.
    brief_time : int
        Brief time as HHMM (e.g. 615 for 06:15).
    scheduled_to : int
        Scheduled takeoff as HHMM.
    scheduled_land : int
        Scheduled landing as HHMM.
    event_type : str
        Short event category matched against the configured table
        (e.g. "BFM").
    full_event_code : str
        Event token as printed (e.g. "BFM4601" or "FRM LEAD").
    flight_hours : float
        Planned flight duration in hours, 0.0 when unreadable.
    remarks : str
        Known remark keywords found after the row, "; "-joined.
    raw_text : str
        The matched text, kept for provenance and lead-role detection.
    """
    line_num: int
    callsign: str
    brief_time: int
    scheduled_to: int
    scheduled_land: int
    event_type: str
    full_event_code: str
    flight_hours: float
    remarks: str
    raw_text: str

    @property
    def position_digit(self) -> str:
        return self.callsign[-1]

    @property
    def family(self) -> str:
        """Callsign family, e.g. "BT2" for "BT21"."""
        return self.callsign[:-1]

    @property
    def is_swap(self) -> bool:
        return SWAP_MARKER in self.remarks

    def with_remark(self, marker: str) -> ScheduleLine:
        remarks = f"{self.remarks}; {marker}" if self.remarks else marker
        return replace(self, remarks=remarks)
