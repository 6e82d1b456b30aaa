from __future__ import annotations

from sked_deconfliction.preprocessing.event_codes import EventCodeTable
from sked_deconfliction.preprocessing.line_extractor import (
    expand_combined_callsign,
    extract_remarks,
    extract_schedule_lines,
    parse_flight_hours,
    parse_time,
)

CODES = EventCodeTable(["TR", "FRM", "DIV", "DTF", "TAC", "BFM", "BIT", "BITS", "IR"])


def _extract(text: str):
    return list(extract_schedule_lines([text], CODES))


def test_parse_time_accepts_split_digits():
    assert parse_time("0815") == 815
    assert parse_time("06 15") == 615
    assert parse_time("0000") == 0


def test_parse_time_rejects_invalid_clock_values():
    assert parse_time("2460") is None
    assert parse_time("0775") is None
    assert parse_time("ab12") is None


def test_parse_flight_hours_defaults_to_zero():
    assert parse_flight_hours("1.5") == 1.5
    assert parse_flight_hours(None) == 0.0
    assert parse_flight_hours("") == 0.0


def test_expand_combined_callsign():
    assert expand_combined_callsign("BT21/22") == ["BT21", "BT22"]
    assert expand_combined_callsign("BT81/82/83/84") == ["BT81", "BT82", "BT83", "BT84"]
    assert expand_combined_callsign("BT21/2") == ["BT21", "BT22"]
    assert expand_combined_callsign("BT 3 2") == ["BT32"]


def test_extract_remarks_keeps_keyword_order():
    assert extract_remarks("  RTB O/I") == "RTB; O/I"
    assert extract_remarks("   ") == ""


def test_single_row_fields():
    lines = _extract("101  BT21  0600  0730  0900  SMITH  BAKER  FRM4101 LEAD  1.5  RTB\n")

    assert len(lines) == 1
    line = lines[0]
    assert line.line_num == 101
    assert line.callsign == "BT21"
    assert (line.brief_time, line.scheduled_to, line.scheduled_land) == (600, 730, 900)
    assert line.event_type == "FRM"
    assert line.full_event_code == "FRM4101"
    assert line.flight_hours == 1.5
    assert line.remarks == "RTB"
    assert "LEAD" in line.raw_text


def test_missing_flight_hours_does_not_swallow_next_row():
    text = (
        "102  BT22  0600  0730  0900  JONES  CLARK  FRM4101\n"
        "103  BT31  0615  0745  0915  WHITE  HILL   TAC4201  1.5\n"
    )
    lines = _extract(text)

    assert [l.callsign for l in lines] == ["BT22", "BT31"]
    assert lines[0].flight_hours == 0.0
    assert lines[0].event_type == "FRM"
    assert lines[1].event_type == "TAC"


def test_combined_callsign_row_expands_to_lines_sharing_fields():
    lines = _extract("106  BT81/82/83/84  0700  0830  1000  REED  WOOD  DIV4401  1.5\n")

    assert [l.callsign for l in lines] == ["BT81", "BT82", "BT83", "BT84"]
    assert {(l.line_num, l.scheduled_to, l.event_type) for l in lines} == {(106, 830, "DIV")}


def test_time_with_extraction_space():
    lines = _extract("107  BT41  0600  07 30  0900  KING  LEWIS  BFM4301  1.5\n")

    assert len(lines) == 1
    assert lines[0].scheduled_to == 730


def test_longest_prefix_wins():
    lines = _extract("108  BT51  0600  0730  0900  KING  LEWIS  BITS1234  1.5\n")
    assert lines[0].event_type == "BITS"


def test_rows_with_bad_time_or_unknown_event_are_dropped():
    text = (
        "110  BT21  0600  0775  0900  SMITH  BAKER  FRM4101  1.5\n"
        "111  BT22  0600  0730  0900  SMITH  BAKER  XYZ999   1.5\n"
        "112  BT23  0600  0730  0900  SMITH  BAKER  FRM4101  1.5\n"
    )
    lines = _extract(text)
    assert [l.line_num for l in lines] == [112]


def test_role_marker_second_pass():
    lines = _extract("113  BT61  0600  0730  0900  SMITH  (FRM)  LEAD  1.5\n")

    assert len(lines) == 1
    assert lines[0].event_type == "FRM"
    assert lines[0].full_event_code == "FRM LEAD"


def test_rows_split_across_pages():
    pages = [
        "101  BT21  0600  0730  0900  SMITH  BAKER  FRM4101  1.5",
        "102  BT22  0600  0730  0900  JONES  CLARK  FRM4101  1.5",
    ]
    lines = list(extract_schedule_lines(pages, CODES))
    assert [l.line_num for l in lines] == [101, 102]


def test_no_rows_yields_nothing():
    assert _extract("VT-9 FRONT PAGE\nNO FLYING TODAY\n") == []


def test_sample_pages(pages, vt9_config):
    table = EventCodeTable(vt9_config.event_types.keys())
    lines = list(extract_schedule_lines(pages, table))

    assert len(lines) == 17
    by_num = {}
    for l in lines:
        by_num.setdefault(l.line_num, []).append(l)
    assert [l.callsign for l in by_num[107]] == ["BT61", "BT62"]
    assert by_num[108][0].full_event_code == "TR4301"
    assert by_num[103][0].remarks == "O/I"


def test_remarks_kept_when_flight_hours_missing():
    lines = _extract(
        "102  BT22  0600  0730  0900  JONES  CLARK  FRM4101  RTB\n"
        "103  BT23  0600  0730  0900  LAMB   CLARK  FRM4101\n"
    )

    assert [(l.callsign, l.remarks, l.flight_hours) for l in lines] == [
        ("BT22", "RTB", 0.0),
        ("BT23", "", 0.0),
    ]
    assert lines[0].event_type == "FRM"
