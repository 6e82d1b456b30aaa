from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Airspace(str, Enum):
    AREA4 = "area4"
    MOA2 = "moa2"


@dataclass(frozen=True)
class AirspacePoolConfig:
    """
    Capacity and display labels of one shared airspace pool.

    Attributes
    ----------
    label : str
        Human readable name (e.g. "Area 4").
    block_units : int
        Total block-units the pool can hold at any instant.
    physical_blocks : Tuple[str, ...]
        Ordered physical block labels shown to crews.
    overflow_block : Optional[str]
        Label used when every physical block is taken. None falls back to
        the first physical block.
    """
    label: str
    block_units: int
    physical_blocks: Tuple[str, ...]
    overflow_block: Optional[str] = None

    @property
    def fallback_block(self) -> str:
        if self.overflow_block:
            return self.overflow_block
        return self.physical_blocks[0] if self.physical_blocks else self.label


@dataclass(frozen=True)
class EventTypeRule:
    """
    Resource needs of one event category.

    Attributes
    ----------
    name : str
        Event type code (e.g. "TAC").
    block_units : int
        Ideal airspace block-units. 0 means no airspace is needed.
    block_units_min : Optional[int]
        Smaller acceptable block count (flex-down), if the event tolerates it.
    preferred_airspace : Tuple[Airspace, ...]
        Pools tried first, in order. Pools not listed are tried after.
    yields_to : Tuple[str, ...]
        Event types that, when overlapping, flip the preference order.
    needs_tacan : bool
        Whether the flight needs TACAN pairs and comm channels.
    needs_cm : int
        Base number of auxiliary (CM) channels.
    tacan_pairs : int
        Number of TACAN pairs required.
    tacan_sequential : bool
        Pairs must have adjacent base channels.
    """
    name: str
    block_units: int
    block_units_min: Optional[int] = None
    preferred_airspace: Tuple[Airspace, ...] = ()
    yields_to: Tuple[str, ...] = ()
    needs_tacan: bool = False
    needs_cm: int = 0
    tacan_pairs: int = 0
    tacan_sequential: bool = False

    @property
    def can_flex(self) -> bool:
        return bool(self.block_units_min) and self.block_units_min < self.block_units

    @property
    def block_options(self) -> List[int]:
        if self.can_flex:
            return [self.block_units, int(self.block_units_min)]
        return [self.block_units]

    @property
    def needs_sequential_pairs(self) -> bool:
        return self.tacan_sequential and self.tacan_pairs == 2


@dataclass(frozen=True)
class TacanPair:
    base: int
    paired: int
    preset_name: Optional[str] = None
    preset_freq: Optional[float] = None


@dataclass(frozen=True)
class ResourceConfig:
    """
    Complete, read-only resource table for one run.

    Attributes
    ----------
    event_types : Dict[str, EventTypeRule]
        Rules keyed by event type code. The keys double as the event-code
        table used by the extractor.
    airspaces : Dict[Airspace, AirspacePoolConfig]
        Pool capacities and labels.
    dedicated_tacan_pairs : Tuple[TacanPair, ...]
        Preset channel pairs, tried first and in order.
    reserved_channels : FrozenSet[int]
        Base channels never used for ad-hoc (overflow) pairing.
    tacan_max : int
        Highest valid TACAN channel.
    cm_pool : Tuple[float, ...]
        Auxiliary frequencies in allocation order.
    overlap_buffer_minutes : int
        Tolerance before two windows count as overlapping.
    callsign_prefix : str
        Squadron callsign prefix recognized by the extractor.
    no_airspace_codes : Tuple[str, ...]
        Full event code prefixes that never need airspace.
    """
    event_types: Dict[str, EventTypeRule]
    airspaces: Dict[Airspace, AirspacePoolConfig]
    dedicated_tacan_pairs: Tuple[TacanPair, ...]
    reserved_channels: FrozenSet[int]
    tacan_max: int
    cm_pool: Tuple[float, ...]
    overlap_buffer_minutes: int = 15
    callsign_prefix: str = "BT"
    no_airspace_codes: Tuple[str, ...] = field(default=("TR43", "TR44"))

    def rule_for(self, event_type: str) -> Optional[EventTypeRule]:
        return self.event_types.get(event_type)

    def pool(self, airspace: Airspace) -> AirspacePoolConfig:
        return self.airspaces[airspace]
