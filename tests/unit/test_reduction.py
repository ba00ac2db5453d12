"""Tests for lower-bound elimination."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver.data import FlowNetwork  # noqa: E402
from flow_solver.reduction import demand_totals, reduce_lower_bounds  # noqa: E402


def test_demand_totals():
    assert demand_totals([-3, -3, 2, 4, 0]) == (6, 6)
    assert demand_totals([]) == (0, 0)


def test_lower_bound_folded_into_capacity():
    network = FlowNetwork(2)
    edge = network.add_edge(0, 1, 5, lower=1)

    reduction = reduce_lower_bounds(network, [-3, 3])

    assert edge.capacity == 4
    assert edge.lower == 0
    assert edge.offset == 1
    assert edge.upper == 5
    assert reduction.reduced_edges == [0]
    assert reduction.adjusted_demands == [-2.0, 2.0]
    assert reduction.deltas == [1.0, -1.0]
    assert reduction.balanced
    assert reduction.stage is None
    assert (reduction.sum_of_demands, reduction.sum_of_supplies) == (2.0, 2.0)


def test_caller_demands_not_mutated():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 5, lower=2)
    demands = [-3.0, 3.0]

    reduce_lower_bounds(network, demands)

    assert demands == [-3.0, 3.0]


def test_unbalanced_input_short_circuits_without_touching_network():
    network = FlowNetwork(2)
    edge = network.add_edge(0, 1, 5, lower=2)

    reduction = reduce_lower_bounds(network, [-3, 4])

    assert not reduction.balanced
    assert reduction.stage == "before"
    assert (reduction.sum_of_demands, reduction.sum_of_supplies) == (4, 3)
    assert reduction.reduced_edges == []
    assert edge.lower == 2 and edge.capacity == 5


def test_adjustments_are_order_independent():
    # Vertex 1 is a demand vertex whose sign flips once its incoming lower bound
    # is applied, and it also feeds a lower-bounded edge of its own.
    def build(order):
        network = FlowNetwork(3)
        specs = {"in": (0, 1, 6, 4), "out": (1, 2, 6, 3)}
        for key in order:
            tail, head, capacity, lower = specs[key]
            network.add_edge(tail, head, capacity, lower=lower)
        return network

    demands = [-2, 1, 1]
    first = reduce_lower_bounds(build(["in", "out"]), demands)
    second = reduce_lower_bounds(build(["out", "in"]), demands)

    assert first.adjusted_demands == second.adjusted_demands == [2.0, 0.0, -2.0]
    assert first.balanced and second.balanced


def test_balance_preserved_when_every_bound_is_satisfiable():
    network = FlowNetwork(4)
    network.add_edge(0, 1, 4, lower=2)
    network.add_edge(1, 2, 3, lower=3)
    network.add_edge(2, 3, 9, lower=1)
    network.add_edge(3, 0, 2, lower=2)

    reduction = reduce_lower_bounds(network, [-5, 0, 2, 3])

    assert reduction.balanced
    assert sum(reduction.adjusted_demands) == pytest.approx(0.0)
    assert len(reduction.reduced_edges) == 4


def test_zero_lower_bounds_untouched():
    network = FlowNetwork(2)
    edge = network.add_edge(0, 1, 5)
    reduction = reduce_lower_bounds(network, [0, 0])

    assert reduction.reduced_edges == []
    assert edge.capacity == 5 and edge.offset == 0
    assert reduction.adjusted_demands == [0.0, 0.0]


def test_tolerance_accepts_small_imbalance():
    network = FlowNetwork(2)
    reduction = reduce_lower_bounds(network, [-1.0, 1.0 + 1e-12], tolerance=1e-9)
    assert reduction.balanced
