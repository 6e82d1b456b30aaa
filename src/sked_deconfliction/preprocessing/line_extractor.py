from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence, Union

from sked_deconfliction.domain.schedule_line import ScheduleLine
from sked_deconfliction.preprocessing.event_codes import EventCodeTable

logger = logging.getLogger(__name__)

REMARK_KEYWORDS = ("RTB", "O/I", "MB", "CRM-F", "CS/HS", "HP/HS", "HS/SD", "HS")
REMARKS_WINDOW = 40

# Horizontal whitespace only: a match must never run into the next printed row.
_WS = r"[ \t]"


def build_row_pattern(callsign_prefix: str = "BT") -> Pattern[str]:
    """
    Regex for one flight row:

        lineNum  callsign  brief  takeoff  land  <middle>  flightHours

    Times may carry a space from text extraction ("06 15"), callsigns
    too ("BT 3 2"), and combined callsigns use "/" ("BT21/22").
    The flight hours group is optional; a row without it still matches
    and the middle runs to the end of the row.
    """
    prefix = re.escape(callsign_prefix)
    time = rf"\d{{2}}{_WS}*\d{{2}}"
    return re.compile(
        rf"(?<!\d)(?P<line>\d{{3,4}}){_WS}+"
        rf"(?P<callsign>{prefix}{_WS}*\d{_WS}*\d(?:{_WS}*/{_WS}*\d(?:{_WS}*\d)?)*){_WS}+"
        rf"(?P<brief>{time}){_WS}+"
        rf"(?P<to>{time}){_WS}+"
        rf"(?P<land>{time})(?=[ \t]|$)"
        rf"(?P<middle>[^\n]*?)"
        rf"(?:{_WS}+(?P<hours>\d+\.\d)(?=[ \t]|$)|{_WS}*$)",
        re.MULTILINE,
    )


def parse_time(s: str) -> Optional[int]:
    """
    "06 15" -> 615, "0815" -> 815. None for anything that is not a
    valid 24h clock time.
    """
    cleaned = re.sub(r"\s+", "", s)
    if not cleaned.isdigit():
        return None
    n = int(cleaned)
    hh, mm = divmod(n, 100)
    if hh > 23 or mm > 59:
        return None
    return n


def parse_flight_hours(s: Optional[str]) -> float:
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        return 0.0


def normalize_callsign(raw: str) -> str:
    return re.sub(r"\s+", "", raw)


def expand_combined_callsign(raw: str, callsign_prefix: str = "BT") -> List[str]:
    """
    "BT21/22"       -> ["BT21", "BT22"]
    "BT81/82/83/84" -> ["BT81", "BT82", "BT83", "BT84"]
    "BT21/2"        -> ["BT21", "BT22"]

    Two-digit suffixes are full family+position numbers; one-digit
    suffixes reuse the base callsign's family digit.
    """
    normalized = normalize_callsign(raw)
    if "/" not in normalized:
        return [normalized]

    base = normalized[: len(callsign_prefix) + 1]
    positions = normalized[len(callsign_prefix) + 1:].split("/")

    out: List[str] = []
    for pos in positions:
        if len(pos) == 2:
            out.append(callsign_prefix + pos)
        else:
            out.append(base + pos)
    return out


def extract_remarks(
    after_text: str,
    keywords: Sequence[str] = REMARK_KEYWORDS,
    row_tokens: Sequence[str] = (),
) -> str:
    """
    Keywords found in the text following a row. `row_tokens` are whole
    words from inside the row; they only count on an exact match, so a
    name like "LAMB" never reads as "MB".
    """
    tokens = {t.upper() for t in row_tokens}
    found = [kw for kw in keywords if kw in after_text or kw in tokens]
    return "; ".join(found)


def join_pages(pages: Iterable[str]) -> str:
    return "\n".join(p.replace("\r\n", "\n").replace("\r", "\n") for p in pages)


def extract_schedule_lines(
    pages: Iterable[str],
    event_codes: Union[EventCodeTable, Iterable[str]],
    *,
    callsign_prefix: str = "BT",
) -> Iterator[ScheduleLine]:
    """
    Yield every flight row found in the page texts.

    Rows with an invalid time or without a recognizable event code are
    skipped; this function never raises on bad input text.
    """
    table = event_codes if isinstance(event_codes, EventCodeTable) else EventCodeTable(event_codes)
    full_text = join_pages(pages)
    pattern = build_row_pattern(callsign_prefix)

    n_rows = 0
    n_lines = 0
    for m in pattern.finditer(full_text):
        brief = parse_time(m.group("brief"))
        takeoff = parse_time(m.group("to"))
        land = parse_time(m.group("land"))
        if brief is None or takeoff is None or land is None:
            logger.debug("Skipping row %s: invalid time in %r", m.group("line"), m.group(0))
            continue

        event = table.find_event(m.group("middle"))
        if event is None:
            logger.debug("Skipping row %s: no event code in %r", m.group("line"), m.group(0))
            continue

        after = full_text[m.end(): m.end() + REMARKS_WINDOW].split("\n", 1)[0]
        # without an hours column the trailing remarks fall inside the middle group
        row_tokens = m.group("middle").split() if m.group("hours") is None else ()
        remarks = extract_remarks(after, row_tokens=row_tokens)
        flight_hours = parse_flight_hours(m.group("hours"))
        line_num = int(m.group("line"))

        n_rows += 1
        for callsign in expand_combined_callsign(m.group("callsign"), callsign_prefix):
            n_lines += 1
            yield ScheduleLine(
                line_num=line_num,
                callsign=callsign,
                brief_time=brief,
                scheduled_to=takeoff,
                scheduled_land=land,
                event_type=event.event_type,
                full_event_code=event.full_code,
                flight_hours=flight_hours,
                remarks=remarks,
                raw_text=m.group(0),
            )

    logger.info("Extracted %d schedule lines from %d rows", n_lines, n_rows)
