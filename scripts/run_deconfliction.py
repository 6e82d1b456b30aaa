from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path

from sked_deconfliction.logging_utils import configure_logging
from sked_deconfliction.preprocessing.loaders import load_resource_config_or_default
from sked_deconfliction.preprocessing.page_text import TextFilePageProvider
from sked_deconfliction.preprocessing.validate_config import validate_resource_config
from sked_deconfliction.solver.solve_schedule import save_solution, solve_schedule
from sked_deconfliction.visualization.report import build_report_frames, save_plots, save_tables


DEFAULT_OUT_DIR = Path("outputs")


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--pages", type=Path, nargs="+", required=True, help="Page text files of one day")
    parser.add_argument("--config", type=Path, default=None, help="Resource config JSON (default: built-in VT-9)")
    parser.add_argument("--out-dir", type=Path, default=DEFAULT_OUT_DIR)
    parser.add_argument("--no-plots", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--show-conflicts", type=int, default=10)
    args = parser.parse_args()

    configure_logging(args.log_level)

    config = load_resource_config_or_default(args.config)
    validate_resource_config(config)

    pages = TextFilePageProvider(args.pages).pages()
    solution = solve_schedule(pages, config)
    if solution.is_empty or not solution.flights:
        print("No flights found.")
        return 1

    s = solution.summary()
    print("\nSummary")
    print(f"  lines_parsed: {s.lines_parsed}")
    print(f"  flights: {s.flights}")
    print(f"  assigned: {s.assigned}")
    print(f"  conflicts: {s.conflicts}")
    if solution.conflicts:
        print("  by type:", dict(Counter(c.conflict_type.value for c in solution.conflicts)))

        print("\nConflicts")
        for c in solution.conflicts[: args.show_conflicts]:
            print(f"  [{c.conflict_type.value}] {c.message}")
        if len(solution.conflicts) > args.show_conflicts:
            print(f"  ... and {len(solution.conflicts) - args.show_conflicts} more")

    report_dir = args.out_dir / "report"
    out_path = save_solution(solution, args.out_dir)

    frames = build_report_frames(solution, config)
    save_tables(frames, report_dir)
    if not args.no_plots:
        save_plots(frames, solution, report_dir, config)

    print("\nOutputs")
    print(f"  solution_json: {out_path}")
    print(f"  report_dir: {report_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
