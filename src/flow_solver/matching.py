"""Maximum bipartite matching as a unit-capacity max-flow problem."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .data import FlowNetwork, MaxFlowResult, SolverOptions
from .exceptions import StructuralError
from .maxflow import MaxFlowSolver


@dataclass
class MatchingNetwork:
    """Unit-capacity flow network for a bipartite graph.

    Left vertex ``i`` is network vertex ``i``, right vertex ``j`` is network
    vertex ``left_count + j``; the source and sink come last.
    """

    network: FlowNetwork
    left_count: int
    right_count: int
    source: int
    sink: int
    pair_edges: dict[int, tuple[int, int]] = field(default_factory=dict)


@dataclass
class MatchingResult:
    """Maximum matching extracted from a unit-capacity max-flow.

    Attributes:
        size: Number of matched pairs (equals the max-flow value).
        pairs: Matched (left, right) pairs, ordered by left vertex.
        matched_left: Left vertices whose source edge is saturated.
        flow_result: The underlying max-flow result on ``network``.
    """

    size: int
    pairs: list[tuple[int, int]]
    matched_left: set[int]
    flow_result: MaxFlowResult


def build_matching_network(
    left_count: int,
    right_count: int,
    pairs: Iterable[tuple[int, int]],
) -> MatchingNetwork:
    """Build ``source -> left -> right -> sink`` with capacity 1 on every edge."""
    if left_count < 0 or right_count < 0:
        raise StructuralError(
            f"Partition sizes must be non-negative, got {left_count} and {right_count}"
        )
    network = FlowNetwork(left_count + right_count + 2)
    source = left_count + right_count
    sink = source + 1
    matching = MatchingNetwork(
        network=network,
        left_count=left_count,
        right_count=right_count,
        source=source,
        sink=sink,
    )
    for left in range(left_count):
        network.add_edge(source, left, 1)
    for right in range(right_count):
        network.add_edge(left_count + right, sink, 1)
    for left, right in pairs:
        if not 0 <= left < left_count:
            raise StructuralError(f"Left vertex {left} outside [0, {left_count})", vertex=left)
        if not 0 <= right < right_count:
            raise StructuralError(f"Right vertex {right} outside [0, {right_count})", vertex=right)
        edge = network.add_edge(left, left_count + right, 1)
        matching.pair_edges[edge.index] = (left, right)
    return matching


def solve_bipartite_matching(
    left_count: int,
    right_count: int,
    pairs: Iterable[tuple[int, int]],
    options: SolverOptions | None = None,
) -> MatchingResult:
    """Compute a maximum matching between two vertex sets.

    Args:
        left_count: Number of left vertices, indexed ``0..left_count-1``.
        right_count: Number of right vertices, indexed ``0..right_count-1``.
        pairs: Allowed (left, right) pairings.
        options: Solver configuration options. If None, uses defaults.

    Examples:
        >>> result = solve_bipartite_matching(2, 2, [(0, 0), (0, 1), (1, 0)])
        >>> result.size, result.pairs
        (2, [(0, 1), (1, 0)])
    """
    matching = build_matching_network(left_count, right_count, pairs)
    options = options if options is not None else SolverOptions()
    flow_result = MaxFlowSolver(
        matching.network, matching.source, matching.sink, options=options
    ).solve()

    matched = sorted(
        pair
        for edge_id, pair in matching.pair_edges.items()
        if flow_result.flows[edge_id] > options.tolerance
    )
    matched_left = {
        edge.head
        for edge in matching.network.adjacent_edges(matching.source)
        if edge.tail == matching.source and edge.flow > options.tolerance
    }
    return MatchingResult(
        size=len(matched),
        pairs=matched,
        matched_left=matched_left,
        flow_result=flow_result,
    )
