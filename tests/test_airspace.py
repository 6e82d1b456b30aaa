from conftest import make_flight, make_result, single_pool_config

from sked_deconfliction.allocation.airspace import allocate_airspace, needs_no_airspace
from sked_deconfliction.allocation.context import AllocationContext
from sked_deconfliction.domain.assignments import AirspaceAssignment, ConflictType
from sked_deconfliction.domain.resources import Airspace


def _held(family, airspace, units, block, to=800):
    flight = make_flight(family, to=to, land=930)
    return make_result(flight, AirspaceAssignment(airspace=airspace, block_units=units, physical_block=block))


def _ctx(flight, prior=(), undecided=()):
    overlapping = [r.flight for r in prior] + list(undecided)
    return AllocationContext.build(flight, overlapping, list(prior))


def test_single_flight_gets_preferred_pool(vt9_config):
    flight = make_flight("BT7", event_type="TR", full_code="TR4201", positions=1)
    assignment, conflicts = allocate_airspace(_ctx(flight), vt9_config)

    assert conflicts == []
    assert assignment == AirspaceAssignment(Airspace.AREA4, 1, "A4-1", flexed_down=False)


def test_no_airspace_events(vt9_config):
    tr43 = make_flight("BT7", event_type="TR", full_code="TR4301", positions=1)
    ir = make_flight("BT8", event_type="IR", positions=1)

    assert needs_no_airspace("tr4401", vt9_config)
    assert allocate_airspace(_ctx(tr43), vt9_config) == (None, [])
    assert allocate_airspace(_ctx(ir), vt9_config) == (None, [])


def test_tac_prefers_moa2_alone(vt9_config):
    tac = make_flight("BT3", event_type="TAC")
    assignment, _ = allocate_airspace(_ctx(tac), vt9_config)

    assert assignment.airspace is Airspace.MOA2
    assert assignment.block_units == 2
    assert assignment.physical_block == "MOA2-A"


def test_tac_moves_to_area4_when_bfm_is_up(vt9_config):
    tac = make_flight("BT3", to=745, land=915, event_type="TAC")
    bfm = make_flight("BT4", to=800, land=930, event_type="BFM")

    # BFM not decided yet still flips the order
    assignment, _ = allocate_airspace(_ctx(tac, undecided=[bfm]), vt9_config)
    assert assignment.airspace is Airspace.AREA4


def test_ideal_size_elsewhere_before_flexing(vt9_config):
    prior = [
        _held("BT1", Airspace.MOA2, 2, "MOA2-A"),
        _held("BT2", Airspace.MOA2, 1, "MOA2-B"),
        _held("BT4", Airspace.AREA4, 2, "A4-1"),
    ]
    tac = make_flight("BT3", event_type="TAC")
    assignment, _ = allocate_airspace(_ctx(tac, prior), vt9_config)

    assert assignment.airspace is Airspace.AREA4
    assert assignment.block_units == 2
    assert not assignment.flexed_down
    assert assignment.physical_block == "A4-2"


def test_flex_down_when_ideal_fits_nowhere(vt9_config):
    prior = [
        _held("BT1", Airspace.MOA2, 3, "MOA2-A"),
        _held("BT2", Airspace.AREA4, 3, "A4-1"),
    ]
    tac = make_flight("BT3", event_type="TAC")
    assignment, conflicts = allocate_airspace(_ctx(tac, prior), vt9_config)

    assert conflicts == []
    assert assignment.airspace is Airspace.MOA2
    assert assignment.block_units == 1
    assert assignment.flexed_down


def test_overflow_block_label(vt9_config):
    prior = [
        _held("BT1", Airspace.MOA2, 1, "MOA2-A"),
        _held("BT2", Airspace.MOA2, 1, "MOA2-B"),
    ]
    bfm = make_flight("BT3", event_type="BFM")
    assignment, _ = allocate_airspace(_ctx(bfm, prior), vt9_config)

    assert assignment.airspace is Airspace.MOA2
    assert assignment.physical_block == "MOA2-C"


def test_airspace_full_conflict():
    config = single_pool_config(units=4)
    prior = [_held(f"BT{i}", Airspace.AREA4, 1, f"A4-{i}") for i in range(1, 5)]
    late = make_flight("BT5", event_type="TR", positions=1)
    assignment, conflicts = allocate_airspace(_ctx(late, prior), config)

    assert assignment is None
    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.conflict_type is ConflictType.AIRSPACE_FULL
    assert "Area 4: 4/4 used" in conflict.message
    assert conflict.involved_flight_ids[0] == late.flight_id
    assert set(conflict.involved_flight_ids[1:]) == {r.flight.flight_id for r in prior}


def test_only_prior_results_count_as_usage():
    config = single_pool_config(units=1)
    other = make_flight("BT1", event_type="TR", positions=1)
    flight = make_flight("BT2", event_type="TR", positions=1)

    assignment, conflicts = allocate_airspace(_ctx(flight, undecided=[other]), config)
    assert conflicts == []
    assert assignment.block_units == 1
