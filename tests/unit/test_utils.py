"""Tests for utility functions."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    FlowNetwork,
    StructuralError,
    cut_capacity,
    extract_path,
    min_cut_edges,
    solve_circulation,
    solve_max_flow,
    validate_flow,
)


def _chain() -> FlowNetwork:
    network = FlowNetwork(4)
    network.add_edge(0, 1, 10)
    network.add_edge(1, 2, 4)
    network.add_edge(2, 3, 10)
    network.add_edge(0, 3, 1)
    return network


def test_validate_flow_accepts_solver_output():
    network = _chain()
    result = solve_max_flow(network, 0, 3)

    validation = validate_flow(network, result.flows, source=0, sink=3)

    assert validation.is_valid
    assert validation.errors == []
    assert set(validation.flow_balance) == {1, 2}
    assert all(balance == pytest.approx(0.0) for balance in validation.flow_balance.values())


def test_validate_flow_detects_capacity_violation():
    network = _chain()
    validation = validate_flow(network, {0: 4, 1: 5, 2: 5, 3: 0}, source=0, sink=3)

    assert not validation.is_valid
    assert validation.capacity_violations == [1]
    assert any("exceeds capacity" in error for error in validation.errors)
    assert validation.flow_balance[1] == pytest.approx(-1.0)


def test_validate_flow_detects_lower_bound_violation():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 5, lower=2)

    validation = validate_flow(network, {0: 1.0}, demands=[-1, 1])

    assert validation.lower_bound_violations == [0]
    assert any("below lower bound" in error for error in validation.errors)


def test_validate_flow_detects_imbalance():
    network = _chain()
    validation = validate_flow(network, {0: 3, 1: 2, 2: 2, 3: 0}, source=0, sink=3)

    assert not validation.is_valid
    assert any("Vertex 1: flow imbalance" in error for error in validation.errors)


def test_validate_flow_unknown_edge_id():
    validation = validate_flow(_chain(), {17: 1.0}, source=0, sink=3)
    assert any("Edge id 17" in error for error in validation.errors)


def test_validate_flow_on_reduced_network_uses_caller_units():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 5, lower=1)
    result = solve_circulation(network, [-3, 3])

    on_caller = validate_flow(network, result.flows, demands=[-3, 3])
    assert on_caller.is_valid

    reduced = result.network.copy()
    reduced_flows = {0: result.flows[0]}
    assert not validate_flow(reduced, reduced_flows, tolerance=1e-9).capacity_violations


def test_min_cut_edges_and_capacity():
    network = _chain()
    result = solve_max_flow(network, 0, 3)

    assert result.max_flow_value == pytest.approx(5.0)
    assert result.min_cut == {0, 1}
    assert min_cut_edges(network, result.min_cut) == [1, 3]
    assert cut_capacity(network, result.min_cut) == pytest.approx(5.0)


def test_cut_capacity_empty_side():
    assert cut_capacity(_chain(), set()) == 0


def test_extract_path_follows_flow():
    network = _chain()
    result = solve_max_flow(network, 0, 3)

    path = extract_path(network, result.flows, 0, 3)

    assert path is not None
    assert path.vertices in ([0, 3], [0, 1, 2, 3])
    assert path.flow > 0
    for edge_id in path.edges:
        assert result.flows[edge_id] > 0


def test_extract_path_prefers_fewest_edges():
    network = _chain()
    path = extract_path(network, {0: 1.0, 1: 1.0, 2: 1.0, 3: 1.0}, 0, 3)
    assert path.vertices == [0, 3]
    assert path.edges == [3]
    assert path.flow == 1.0


def test_extract_path_multi_hop_flow_is_minimum():
    network = _chain()
    path = extract_path(network, {0: 9.0, 1: 4.0, 2: 6.0}, 0, 3)
    assert path.vertices == [0, 1, 2, 3]
    assert path.edges == [0, 1, 2]
    assert path.flow == 4.0


def test_extract_path_no_path():
    assert extract_path(_chain(), {0: 1.0}, 0, 3) is None


def test_extract_path_same_vertex():
    path = extract_path(_chain(), {}, 2, 2)
    assert path.vertices == [2]
    assert path.edges == []


def test_extract_path_invalid_vertex():
    with pytest.raises(StructuralError):
        extract_path(_chain(), {}, 0, 9)
