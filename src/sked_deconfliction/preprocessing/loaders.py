from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from sked_deconfliction.config.vt9 import VT9_CONFIG
from sked_deconfliction.domain.resources import (
    Airspace,
    AirspacePoolConfig,
    EventTypeRule,
    ResourceConfig,
    TacanPair,
)


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _airspace(value: str) -> Airspace:
    try:
        return Airspace(value)
    except ValueError:
        raise ValueError(f"Unknown airspace: {value!r}") from None


def _load_event_types(obj: Dict[str, Any]) -> Dict[str, EventTypeRule]:
    rules: Dict[str, EventTypeRule] = {}
    for code, r in obj.items():
        name = r.get("name", code)
        bmin = r.get("block_units_min")
        rules[code] = EventTypeRule(
            name=name,
            block_units=int(r.get("block_units", 0)),
            block_units_min=int(bmin) if bmin is not None else None,
            preferred_airspace=tuple(_airspace(a) for a in r.get("preferred_airspace", [])),
            yields_to=tuple(r.get("yields_to", [])),
            needs_tacan=bool(r.get("needs_tacan", False)),
            needs_cm=int(r.get("needs_cm", 0)),
            tacan_pairs=int(r.get("tacan_pairs", 0)),
            tacan_sequential=bool(r.get("tacan_sequential", False)),
        )
    return rules


def _load_airspaces(obj: Dict[str, Any]) -> Dict[Airspace, AirspacePoolConfig]:
    return {
        _airspace(key): AirspacePoolConfig(
            label=a.get("label", key),
            block_units=int(a["block_units"]),
            physical_blocks=tuple(a.get("physical_blocks", [])),
            overflow_block=a.get("overflow_block"),
        )
        for key, a in obj.items()
    }


def _load_tacan_pairs(items: List[Dict[str, Any]]) -> tuple:
    pairs = []
    for p in items:
        freq = p.get("preset_freq")
        pairs.append(
            TacanPair(
                base=int(p["base"]),
                paired=int(p["paired"]),
                preset_name=p.get("preset_name"),
                preset_freq=float(freq) if freq is not None else None,
            )
        )
    return tuple(pairs)


def resource_config_from_dict(obj: Dict[str, Any]) -> ResourceConfig:
    try:
        return ResourceConfig(
            event_types=_load_event_types(obj["event_types"]),
            airspaces=_load_airspaces(obj["airspaces"]),
            dedicated_tacan_pairs=_load_tacan_pairs(obj.get("dedicated_tacan_pairs", [])),
            reserved_channels=frozenset(int(c) for c in obj.get("reserved_channels", [])),
            tacan_max=int(obj.get("tacan_max", 126)),
            cm_pool=tuple(float(f) for f in obj.get("cm_pool", [])),
            overlap_buffer_minutes=int(obj.get("overlap_buffer_minutes", 15)),
            callsign_prefix=str(obj.get("callsign_prefix", "BT")),
            no_airspace_codes=tuple(obj.get("no_airspace_codes", ["TR43", "TR44"])),
        )
    except KeyError as e:
        raise ValueError(f"Resource config missing required key: {e}") from None


def load_resource_config(path: Path) -> ResourceConfig:
    return resource_config_from_dict(_read_json(path))


def load_resource_config_or_default(path: Optional[Path]) -> ResourceConfig:
    if path is None:
        return VT9_CONFIG
    return load_resource_config(path)


def config_to_dict(config: ResourceConfig) -> Dict[str, Any]:
    """Inverse of `resource_config_from_dict`, for writing editable JSON."""
    return {
        "event_types": {
            code: {
                "name": r.name,
                "block_units": r.block_units,
                "block_units_min": r.block_units_min,
                "preferred_airspace": [a.value for a in r.preferred_airspace],
                "yields_to": list(r.yields_to),
                "needs_tacan": r.needs_tacan,
                "needs_cm": r.needs_cm,
                "tacan_pairs": r.tacan_pairs,
                "tacan_sequential": r.tacan_sequential,
            }
            for code, r in config.event_types.items()
        },
        "airspaces": {
            a.value: {
                "label": p.label,
                "block_units": p.block_units,
                "physical_blocks": list(p.physical_blocks),
                "overflow_block": p.overflow_block,
            }
            for a, p in config.airspaces.items()
        },
        "dedicated_tacan_pairs": [
            {
                "base": p.base,
                "paired": p.paired,
                "preset_name": p.preset_name,
                "preset_freq": p.preset_freq,
            }
            for p in config.dedicated_tacan_pairs
        ],
        "reserved_channels": sorted(config.reserved_channels),
        "tacan_max": config.tacan_max,
        "cm_pool": list(config.cm_pool),
        "overlap_buffer_minutes": config.overlap_buffer_minutes,
        "callsign_prefix": config.callsign_prefix,
        "no_airspace_codes": list(config.no_airspace_codes),
    }
