import math
import sys
from pathlib import Path
from typing import List, Tuple

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import HealthCheck, given, settings  # type: ignore  # noqa: E402
from hypothesis import strategies as st  # type: ignore  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver.data import FlowNetwork  # noqa: E402
from flow_solver.solver import solve_circulation, solve_max_flow  # noqa: E402
from flow_solver.utils import cut_capacity, validate_flow  # noqa: E402

EdgeSpec = Tuple[int, int, int, int]


@st.composite
def _max_flow_instances(draw) -> Tuple[int, List[EdgeSpec]]:
    # Random directed graphs with parallel edges and self-loops; source 0, sink n - 1.
    size = draw(st.integers(min_value=2, max_value=8))
    vertex = st.integers(min_value=0, max_value=size - 1)
    edges = draw(
        st.lists(
            st.tuples(vertex, vertex, st.integers(min_value=0, max_value=20)),
            max_size=size * 4,
        )
    )
    return size, [(tail, head, capacity, 0) for tail, head, capacity in edges]


@st.composite
def _circulation_instances(draw) -> Tuple[int, List[EdgeSpec], List[int]]:
    # Demands are drawn balanced so most failures come from capacities or lower bounds.
    size = draw(st.integers(min_value=2, max_value=7))
    vertex = st.integers(min_value=0, max_value=size - 1)
    edges: List[EdgeSpec] = []
    for tail, head, capacity in draw(
        st.lists(
            st.tuples(vertex, vertex, st.integers(min_value=0, max_value=12)),
            max_size=size * 3,
        )
    ):
        lower = draw(st.integers(min_value=0, max_value=capacity))
        edges.append((tail, head, capacity, lower))

    demands = [draw(st.integers(min_value=-6, max_value=6)) for _ in range(size - 1)]
    demands.append(-sum(demands))
    return size, edges, demands


def _build(size: int, edges: List[EdgeSpec]) -> FlowNetwork:
    network = FlowNetwork(size)
    for tail, head, capacity, lower in edges:
        network.add_edge(tail, head, capacity, lower=lower)
    return network


@settings(max_examples=75, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_max_flow_instances())
def test_max_flow_conserves_flow_and_respects_capacity(instance: Tuple[int, List[EdgeSpec]]):
    size, edges = instance
    network = _build(size, edges)

    result = solve_max_flow(network, 0, size - 1)

    for edge in network.edges():
        assert -1e-9 <= edge.flow <= edge.capacity + 1e-9

    validation = validate_flow(network, result.flows, source=0, sink=size - 1)
    assert validation.is_valid, validation.errors

    out_of_source = sum(result.flows[e.index] for e in network.edges() if e.tail == 0)
    into_source = sum(result.flows[e.index] for e in network.edges() if e.head == 0)
    assert math.isclose(out_of_source - into_source, result.max_flow_value, abs_tol=1e-6)


@settings(max_examples=75, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_max_flow_instances())
def test_max_flow_equals_min_cut_capacity(instance: Tuple[int, List[EdgeSpec]]):
    size, edges = instance
    network = _build(size, edges)

    result = solve_max_flow(network, 0, size - 1)

    assert 0 in result.min_cut
    assert size - 1 not in result.min_cut
    assert math.isclose(cut_capacity(network, result.min_cut), result.max_flow_value, abs_tol=1e-6)
    assert all(bottleneck > 0 for bottleneck in result.bottlenecks)
    assert math.isclose(sum(result.bottlenecks), result.max_flow_value, abs_tol=1e-6)


@settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_max_flow_instances())
def test_max_flow_matches_networkx(instance: Tuple[int, List[EdgeSpec]]):
    nx = pytest.importorskip("networkx")
    size, edges = instance

    graph = nx.DiGraph()
    graph.add_nodes_from(range(size))
    for tail, head, capacity, _ in edges:
        if tail == head:
            continue
        if graph.has_edge(tail, head):
            graph[tail][head]["capacity"] += capacity
        else:
            graph.add_edge(tail, head, capacity=capacity)

    result = solve_max_flow(_build(size, edges), 0, size - 1)

    assert math.isclose(
        result.max_flow_value, nx.maximum_flow_value(graph, 0, size - 1), abs_tol=1e-6
    )


@settings(max_examples=75, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_circulation_instances())
def test_feasible_circulation_satisfies_every_constraint(
    instance: Tuple[int, List[EdgeSpec], List[int]],
):
    size, edges, demands = instance
    network = _build(size, edges)

    result = solve_circulation(network, demands)

    assert result.status in {"feasible", "insufficient_capacity"}
    if result.feasible:
        validation = validate_flow(network, result.flows, demands=demands)
        assert validation.is_valid, validation.errors
        assert math.isclose(result.max_flow_value, result.sum_of_demands, abs_tol=1e-6)
    else:
        assert result.max_flow_value < result.sum_of_demands


@settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_circulation_instances())
def test_circulation_verdict_is_stable(instance: Tuple[int, List[EdgeSpec], List[int]]):
    size, edges, demands = instance
    network = _build(size, edges)

    first = solve_circulation(network, demands)
    second = solve_circulation(network, demands)

    assert first.feasible == second.feasible
    assert first.status == second.status
    assert first.max_flow_value == second.max_flow_value
    # The caller's network keeps its bounds and carries no flow.
    assert [(e.capacity, e.lower, e.flow) for e in network.edges()] == [
        (capacity, lower, 0.0) for _, _, capacity, lower in edges
    ]
