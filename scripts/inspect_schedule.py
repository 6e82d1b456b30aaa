from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

from sked_deconfliction.domain.flight import format_hhmm
from sked_deconfliction.preprocessing.event_codes import EventCodeTable
from sked_deconfliction.preprocessing.flight_grouper import group_into_flights
from sked_deconfliction.preprocessing.flight_overlap import compute_overlap_pairs
from sked_deconfliction.preprocessing.line_extractor import extract_schedule_lines
from sked_deconfliction.preprocessing.loaders import load_resource_config_or_default
from sked_deconfliction.preprocessing.page_text import TextFilePageProvider


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--pages", type=Path, nargs="+", required=True, help="Page text files of one day")
    parser.add_argument("--config", type=Path, default=None, help="Resource config JSON (default: built-in VT-9)")
    parser.add_argument("--show", type=int, default=10, help="Number of flights to list")
    args = parser.parse_args()

    config = load_resource_config_or_default(args.config)
    pages = TextFilePageProvider(args.pages).pages()
    table = EventCodeTable(config.event_types.keys())

    lines = list(extract_schedule_lines(pages, table, callsign_prefix=config.callsign_prefix))
    flights = group_into_flights(lines)

    print(f"Pages: {len(pages)}")
    print(f"Lines parsed: {len(lines)}")
    print(f"Flights: {len(flights)}")
    print("Flights by type:", dict(Counter(f.flight_type.value for f in flights)))
    print("Flights by event:", dict(sorted(Counter(f.event_type for f in flights).items())))
    print(f"Student swaps: {sum(1 for f in flights if f.is_student_swap)}")

    pairs = compute_overlap_pairs(flights, config.overlap_buffer_minutes)
    print(f"Overlapping flight pairs ({config.overlap_buffer_minutes} min buffer): {len(pairs)}")
    for a, b in pairs[: args.show]:
        print(f"  {a} <> {b}")

    for f in flights[: args.show]:
        print(
            f"  {f.flight_id:<10} {f.flight_type.value:<8} {f.full_event_code:<14} "
            f"{format_hhmm(f.scheduled_to)}-{format_hhmm(f.scheduled_land)} "
            f"lines={[l.line_num for l in f.lines]}"
        )


if __name__ == "__main__":
    main()
