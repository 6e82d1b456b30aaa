from __future__ import annotations

import argparse
from pathlib import Path

from sked_deconfliction.preprocessing.loaders import load_resource_config_or_default
from sked_deconfliction.preprocessing.validate_config import validate_resource_config


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Resource config JSON (default: built-in VT-9 table)",
    )
    args = parser.parse_args()

    config = load_resource_config_or_default(args.config)
    validate_resource_config(config)

    print("Config OK")
    print("Airspaces:")
    for a, pool in config.airspaces.items():
        print(f"  {a.value}: {pool.label}, {pool.block_units} units, blocks={list(pool.physical_blocks)}")
    print(f"Dedicated TACAN pairs: {[f'{p.base}/{p.paired}' for p in config.dedicated_tacan_pairs]}")
    print(f"Reserved channels: {sorted(config.reserved_channels)}")
    print(f"CM pool size: {len(config.cm_pool)}")
    print(f"Overlap buffer: {config.overlap_buffer_minutes} min")
    print("Event types:")
    for code, r in config.event_types.items():
        blocks = f"{r.block_units}" + (f" (min {r.block_units_min})" if r.can_flex else "")
        pref = ",".join(a.value for a in r.preferred_airspace) or "-"
        print(f"  {code:<6} blocks={blocks:<10} pref={pref:<12} tacan={r.tacan_pairs} cm={r.needs_cm}")


if __name__ == "__main__":
    main()
