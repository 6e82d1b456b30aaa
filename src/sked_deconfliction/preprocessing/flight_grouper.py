from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Tuple

from sked_deconfliction.domain.flight import Flight, FlightType, format_hhmm
from sked_deconfliction.domain.schedule_line import SWAP_MARKER, ScheduleLine
from sked_deconfliction.preprocessing.event_codes import has_lead_marker

logger = logging.getLogger(__name__)


def sort_lines(lines: Iterable[ScheduleLine]) -> List[ScheduleLine]:
    """
    Takeoff time, then printed line number, then callsign. Lines split
    from one combined row share a line number; the callsign keeps their
    order independent of input order.
    """
    return sorted(lines, key=lambda l: (l.scheduled_to, l.line_num, l.callsign))


def mark_student_swaps(lines: List[ScheduleLine]) -> List[ScheduleLine]:
    """
    Tag runs of consecutive lines with the same callsign, takeoff and land.

    Such a run is one sortie printed once per student. Every line of the
    run is kept and gets the SWAP remark so grouping treats them as one
    flight without losing the individual rows.
    """
    result: List[ScheduleLine] = []
    i = 0
    n = len(lines)
    while i < n:
        current = lines[i]
        j = i + 1
        while (
            j < n
            and lines[j].callsign == current.callsign
            and lines[j].scheduled_to == current.scheduled_to
            and lines[j].scheduled_land == current.scheduled_land
        ):
            j += 1

        if j - i > 1:
            result.extend(line.with_remark(SWAP_MARKER) for line in lines[i:j])
        else:
            result.append(current)
        i = j
    return result


def classify_flight(lines: List[ScheduleLine]) -> FlightType:
    positions = {l.position_digit for l in lines}
    if len(positions) >= 4:
        return FlightType.DIVISION
    if len(positions) >= 2:
        return FlightType.SECTION
    return FlightType.SINGLE


def flight_key(line: ScheduleLine) -> Tuple[str, int]:
    return line.family, line.scheduled_to


def build_flight(family: str, group: List[ScheduleLine]) -> Flight:
    scheduled_to = min(l.scheduled_to for l in group)
    lead = next((l for l in group if has_lead_marker(l.raw_text)), group[0])
    return Flight(
        flight_id=f"{family}-{format_hhmm(scheduled_to)}",
        callsign=family,
        lines=tuple(group),
        event_type=lead.event_type,
        full_event_code=lead.full_event_code,
        brief_time=min(l.brief_time for l in group),
        scheduled_to=scheduled_to,
        scheduled_land=max(l.scheduled_land for l in group),
        flight_type=classify_flight(group),
        is_student_swap=any(l.is_swap for l in group),
    )


def group_into_flights(lines: Iterable[ScheduleLine]) -> List[Flight]:
    """
    Group schedule lines into flights.

    Lines of the same callsign family (prefix + family digit) taking off
    at the same time form one flight. The result is sorted by takeoff,
    which is the order the deconfliction engine processes flights in.
    """
    marked = mark_student_swaps(sort_lines(lines))

    groups: Dict[Tuple[str, int], List[ScheduleLine]] = OrderedDict()
    for line in marked:
        groups.setdefault(flight_key(line), []).append(line)

    flights = [build_flight(family, group) for (family, _), group in groups.items()]
    flights.sort(key=lambda f: f.scheduled_to)

    logger.info(
        "Grouped %d lines into %d flights (%d student swaps)",
        len(marked),
        len(flights),
        sum(1 for f in flights if f.is_student_swap),
    )
    return flights
