from conftest import make_flight, make_result

from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.allocation.frequency import allocate_frequencies
from sked_deconfliction.domain.assignments import ConflictType, FrequencyAssignment, TacanAssignment

DEDICATED = TacanAssignment(base=17, paired=80, preset_name="TAC17", preset_freq=265.9)


def _overflow(base):
    return TacanAssignment(base=base, paired=base + 63, is_overflow=True)


def _ctx(flight, used_cms=()):
    if not used_cms:
        return AllocationContext.build(flight, [], [])
    holder = make_flight("BT9", to=flight.scheduled_to, land=flight.scheduled_land)
    return AllocationContext.build(flight, [holder], [make_result(holder, cms=used_cms)])


def test_preset_from_dedicated_pair(vt9_config):
    flight = make_flight("BT2", event_type="FRM")
    freq, conflicts = allocate_frequencies(_ctx(flight), [DEDICATED], vt9_config)

    assert conflicts == []
    assert freq == FrequencyAssignment(preset=265.9, preset_name="TAC17", cms=(234.5,))


def test_overflow_pair_costs_extra_cm_and_drops_preset(vt9_config):
    flight = make_flight("BT2", event_type="FRM")
    freq, _ = allocate_frequencies(_ctx(flight), [_overflow(1)], vt9_config)

    assert freq.preset is None
    assert freq.preset_name is None
    assert freq.cms == (234.5, 246.7)


def test_mixed_dedicated_and_overflow_keeps_preset(vt9_config):
    flight = make_flight("BT6", event_type="DTF")
    freq, _ = allocate_frequencies(_ctx(flight), [DEDICATED, _overflow(1)], vt9_config)

    assert freq.preset == 265.9
    assert len(freq.cms) == 3


def test_skips_cms_held_by_overlapping_flights(vt9_config):
    flight = make_flight("BT2", event_type="FRM")
    freq, _ = allocate_frequencies(_ctx(flight, used_cms=(234.5, 246.7)), [DEDICATED], vt9_config)
    assert freq.cms == (246.8,)


def test_single_ship_gets_nothing(vt9_config):
    flight = make_flight("BT2", event_type="FRM", positions=1)
    assert allocate_frequencies(_ctx(flight), [], vt9_config) == (FrequencyAssignment(), [])


def test_cm_pool_exhausted_keeps_partial_result(vt9_config):
    flight = make_flight("BT6", event_type="DTF")
    held = vt9_config.cm_pool[:-1]
    freq, conflicts = allocate_frequencies(
        _ctx(flight, used_cms=held), [_overflow(1), _overflow(2)], vt9_config
    )

    assert freq.cms == (357.0,)
    assert [c.conflict_type for c in conflicts] == [ConflictType.CM_EXHAUSTED]
    assert "Needed 4 CM(s), only 1 available" in conflicts[0].message
