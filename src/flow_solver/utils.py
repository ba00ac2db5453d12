"""Utility functions for analyzing and validating flow solutions."""

from __future__ import annotations

from collections import deque
from collections.abc import Collection, Mapping
from dataclasses import dataclass

import numpy as np

from .data import Demands, FlowNetwork, as_demand_vector


@dataclass
class FlowPath:
    """Represents a path from source to target with flow.

    Attributes:
        vertices: Sequence of vertices from source to target.
        edges: Sequence of edge ids along the path.
        flow: Flow value along the path (minimum flow on any edge).
    """

    vertices: list[int]
    edges: list[int]
    flow: float


@dataclass
class ValidationResult:
    """Results from validating a flow solution.

    Attributes:
        is_valid: True if the flow satisfies all constraints.
        errors: List of validation error messages (empty if valid).
        flow_balance: Vertex -> inflow minus outflow minus expected demand.
                      Zero everywhere for a valid flow (source and sink excluded).
        capacity_violations: Edge ids whose flow exceeds the upper bound.
        lower_bound_violations: Edge ids whose flow is below the lower bound.
    """

    is_valid: bool
    errors: list[str]
    flow_balance: dict[int, float]
    capacity_violations: list[int]
    lower_bound_violations: list[int]


def validate_flow(
    network: FlowNetwork,
    flows: Mapping[int, float],
    demands: Demands | None = None,
    source: int | None = None,
    sink: int | None = None,
    tolerance: float = 1e-6,
) -> ValidationResult:
    """Validate that a flow satisfies edge bounds and conservation.

    Checks:
    - Capacity constraints (flow <= upper bound for each edge)
    - Lower bound constraints (flow >= lower bound for each edge)
    - Conservation at each vertex other than ``source``/``sink``: inflow minus
      outflow equals the vertex demand (zero when ``demands`` is None)

    Bounds are read in the caller's units, so the check works both on the
    caller's network and on a lower-bound-reduced working network.

    Args:
        network: Network the flow was computed on.
        flows: Edge id -> flow, as reported in a result. Missing edges carry 0.
        demands: Optional per-vertex demand vector or mapping.
        source: Vertex exempt from conservation (max-flow source).
        sink: Vertex exempt from conservation (max-flow sink).
        tolerance: Numerical tolerance for constraint violations (default: 1e-6).

    Returns:
        ValidationResult with detailed information about any violations.
    """
    errors: list[str] = []
    capacity_violations: list[int] = []
    lower_bound_violations: list[int] = []

    vertex_count = network.vertex_count
    tails = np.fromiter((edge.tail for edge in network.edges()), dtype=np.int64)
    heads = np.fromiter((edge.head for edge in network.edges()), dtype=np.int64)
    values = np.zeros(network.edge_count, dtype=float)

    for edge_id, flow in flows.items():
        if not 0 <= edge_id < network.edge_count:
            errors.append(f"Edge id {edge_id} does not exist in the network")
            continue
        values[edge_id] = flow

    for edge in network.edges():
        flow = values[edge.index]
        if flow > edge.upper + tolerance:
            capacity_violations.append(edge.index)
            errors.append(
                f"Edge {edge.index} ({edge.tail}, {edge.head}): flow {flow:.6f} exceeds "
                f"capacity {edge.upper:.6f}"
            )
        lower = edge.lower + edge.offset
        if flow < lower - tolerance:
            lower_bound_violations.append(edge.index)
            errors.append(
                f"Edge {edge.index} ({edge.tail}, {edge.head}): flow {flow:.6f} below "
                f"lower bound {lower:.6f}"
            )

    # Net inflow per vertex, vectorized over all edges.
    balance = np.zeros(vertex_count, dtype=float)
    np.add.at(balance, heads, values)
    np.subtract.at(balance, tails, values)
    if demands is not None:
        expected = as_demand_vector(demands, vertex_count)
        balance -= np.asarray(expected, dtype=float)

    flow_balance: dict[int, float] = {}
    for vertex in range(vertex_count):
        if vertex in (source, sink):
            continue
        flow_balance[vertex] = float(balance[vertex])
        if abs(balance[vertex]) > tolerance:
            errors.append(
                f"Vertex {vertex}: flow imbalance {balance[vertex]:.6f} (should be zero)"
            )

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        flow_balance=flow_balance,
        capacity_violations=capacity_violations,
        lower_bound_violations=lower_bound_violations,
    )


def min_cut_edges(network: FlowNetwork, membership: Collection[int]) -> list[int]:
    """Ids of edges leaving the ``membership`` side of a cut."""
    side = set(membership)
    return [
        edge.index
        for edge in network.edges()
        if edge.tail in side and edge.head not in side
    ]


def cut_capacity(network: FlowNetwork, membership: Collection[int]) -> float:
    """Total upper-bound capacity of edges leaving the ``membership`` side.

    For a max-flow result, ``cut_capacity(network, result.min_cut)`` equals
    ``result.max_flow_value`` (max-flow/min-cut duality).
    """
    return sum(network.edge(index).upper for index in min_cut_edges(network, membership))


def extract_path(
    network: FlowNetwork,
    flows: Mapping[int, float],
    source: int,
    target: int,
    tolerance: float = 1e-6,
) -> FlowPath | None:
    """Extract a flow-carrying path from source to target.

    Uses breadth-first search over edges carrying positive flow in their
    forward direction. If multiple paths exist, returns one with the fewest
    edges (not necessarily the one with maximum flow).

    Args:
        network: Network the flow was computed on.
        flows: Edge id -> flow.
        source: Starting vertex.
        target: Ending vertex.
        tolerance: Minimum flow value to consider an edge active (default: 1e-6).

    Returns:
        FlowPath object if a path exists, None otherwise.

    Raises:
        StructuralError: If source or target is outside the network.
    """
    network.check_vertex(source, "Source")
    network.check_vertex(target, "Target")

    if source == target:
        return FlowPath(vertices=[source], edges=[], flow=0.0)

    parent: dict[int, int] = {}
    visited = {source}
    queue: deque[int] = deque([source])
    while queue and target not in visited:
        vertex = queue.popleft()
        for edge in network.adjacent_edges(vertex):
            if edge.tail != vertex or edge.head in visited:
                continue
            if flows.get(edge.index, 0.0) > tolerance:
                parent[edge.head] = edge.index
                visited.add(edge.head)
                queue.append(edge.head)

    if target not in visited:
        return None

    path_edges: list[int] = []
    path_vertices = [target]
    current = target
    while current != source:
        edge_id = parent[current]
        path_edges.append(edge_id)
        current = network.edge(edge_id).tail
        path_vertices.append(current)
    path_edges.reverse()
    path_vertices.reverse()

    return FlowPath(
        vertices=path_vertices,
        edges=path_edges,
        flow=min(flows[edge_id] for edge_id in path_edges),
    )
