"""Core data structures for max-flow and circulation problems."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Union

from .exceptions import InvalidProblemError, SolverConfigurationError, StructuralError


@dataclass(eq=False)
class FlowEdge:
    """Directed edge with capacity bounds and the flow currently routed on it.

    One edge object is shared by the adjacency lists of both endpoints. The
    residual graph is implicit: querying toward ``head`` gives the remaining
    forward room, querying toward ``tail`` gives the flow that can be cancelled.

    Attributes:
        tail: Vertex the edge leaves.
        head: Vertex the edge enters.
        capacity: Upper bound on ``flow``. After lower-bound reduction this is
                  ``upper - lower`` of the original edge.
        lower: Lower bound on flow (default: 0.0). Zero after reduction.
        flow: Flow currently on the edge, in the reduced range when ``offset`` > 0.
        offset: Units of flow forced by a lower bound that was folded out of the
                edge. ``flow + offset`` is the flow in the caller's units.
        index: Edge id within its network (insertion order), -1 until inserted.

    Examples:
        >>> edge = FlowEdge(tail=0, head=1, capacity=10.0)
        >>> edge.add_residual_flow_to(1, 4.0)
        >>> edge.residual_capacity_to(1), edge.residual_capacity_to(0)
        (6.0, 4.0)

    Raises:
        StructuralError: If capacity or lower bound is negative or not finite,
                         or if the lower bound exceeds the capacity.
    """

    tail: int
    head: int
    capacity: float
    lower: float = 0.0
    flow: float = 0.0
    offset: float = 0.0
    index: int = -1

    def __post_init__(self) -> None:
        if not math.isfinite(self.capacity) or self.capacity < 0:
            raise StructuralError(
                f"Edge {self.tail} -> {self.head} has capacity {self.capacity}. "
                f"Capacities must be finite and non-negative."
            )
        if not math.isfinite(self.lower) or self.lower < 0:
            raise StructuralError(
                f"Edge {self.tail} -> {self.head} has lower bound {self.lower}. "
                f"Lower bounds must be finite and non-negative."
            )
        if self.lower > self.capacity:
            raise StructuralError(
                f"Edge {self.tail} -> {self.head} has capacity ({self.capacity}) less than "
                f"lower bound ({self.lower}). Capacity must be >= lower bound."
            )

    @property
    def upper(self) -> float:
        """Upper bound in the caller's units (undoes lower-bound reduction)."""
        return self.capacity + self.offset

    @property
    def total_flow(self) -> float:
        """Flow in the caller's units, lower bound included."""
        return self.flow + self.offset

    def other(self, vertex: int) -> int:
        if vertex == self.tail:
            return self.head
        if vertex == self.head:
            return self.tail
        raise StructuralError(
            f"Vertex {vertex} is not an endpoint of edge {self.tail} -> {self.head}",
            vertex=vertex,
        )

    def residual_capacity_to(self, vertex: int) -> float:
        if vertex == self.head:
            return self.capacity - self.flow
        if vertex == self.tail:
            return self.flow
        raise StructuralError(
            f"Vertex {vertex} is not an endpoint of edge {self.tail} -> {self.head}",
            vertex=vertex,
        )

    def add_residual_flow_to(self, vertex: int, delta: float) -> None:
        # Saturation is not checked here; the solver only pushes bottleneck amounts.
        if vertex == self.head:
            self.flow += delta
        else:
            self.flow -= delta

    def __repr__(self) -> str:
        return f"FlowEdge({self.tail} -> {self.head}, flow={self.flow}/{self.capacity})"


class FlowNetwork:
    """Adjacency-list flow network over dense integer vertices ``0..n-1``.

    Edges are appended to both endpoints' adjacency lists and to an ordered edge
    list whose positions are the edge ids reported in results. Vertices can be
    appended after construction, which is how synthetic source/sink vertices
    are attached for circulation problems.

    Examples:
        >>> network = FlowNetwork(4)
        >>> network.add_edge(0, 1, 20)
        FlowEdge(0 -> 1, flow=0.0/20)
        >>> network.add_edge(1, 3, 10, lower=2)
        FlowEdge(1 -> 3, flow=0.0/10)
        >>> network.vertex_count, network.edge_count
        (4, 2)
    """

    def __init__(self, vertex_count: int):
        if vertex_count < 0:
            raise StructuralError(f"Vertex count must be non-negative, got {vertex_count}")
        self._adjacency: list[list[FlowEdge]] = [[] for _ in range(vertex_count)]
        self._edges: list[FlowEdge] = []

    @property
    def vertex_count(self) -> int:
        return len(self._adjacency)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def check_vertex(self, vertex: int, role: str = "Vertex") -> None:
        """Raise StructuralError unless ``vertex`` is a valid index."""
        if not 0 <= vertex < self.vertex_count:
            raise StructuralError(
                f"{role} {vertex} is outside the vertex range [0, {self.vertex_count})",
                vertex=vertex,
            )

    def add_vertex(self) -> int:
        """Append an isolated vertex and return its index."""
        self._adjacency.append([])
        return len(self._adjacency) - 1

    def add_edge(self, tail: int, head: int, capacity: float, lower: float = 0.0) -> FlowEdge:
        self.check_vertex(tail, "Edge tail")
        self.check_vertex(head, "Edge head")
        return self.insert_edge(
            FlowEdge(tail=tail, head=head, capacity=capacity, lower=lower)
        )

    def insert_edge(self, edge: FlowEdge) -> FlowEdge:
        """Attach an existing edge object and assign its edge id."""
        if edge.index >= 0:
            raise StructuralError(
                f"Edge {edge.tail} -> {edge.head} already belongs to a network (id {edge.index})"
            )
        self.check_vertex(edge.tail, "Edge tail")
        self.check_vertex(edge.head, "Edge head")
        edge.index = len(self._edges)
        self._edges.append(edge)
        self._adjacency[edge.tail].append(edge)
        if edge.head != edge.tail:
            self._adjacency[edge.head].append(edge)
        return edge

    def adjacent_edges(self, vertex: int) -> Sequence[FlowEdge]:
        """Edges incident to ``vertex`` in either direction. Do not mutate."""
        return self._adjacency[vertex]

    def edges(self) -> Iterator[FlowEdge]:
        return iter(self._edges)

    def edge(self, index: int) -> FlowEdge:
        return self._edges[index]

    def has_lower_bounds(self) -> bool:
        """True if any edge has a lower bound, including one already folded into ``offset``."""
        return any(edge.lower > 0 or edge.offset > 0 for edge in self._edges)

    def reset_flows(self) -> None:
        for edge in self._edges:
            edge.flow = 0.0

    def copy(self) -> FlowNetwork:
        """Return an independent network with the same vertices, edges and edge ids."""
        clone = FlowNetwork(self.vertex_count)
        for edge in self._edges:
            clone.insert_edge(replace(edge, index=-1))
        return clone

    def __repr__(self) -> str:
        return f"FlowNetwork(vertices={self.vertex_count}, edges={self.edge_count})"


# A demand vector: per-vertex sequence, or sparse mapping with missing vertices at 0.
Demands = Union[Sequence[float], Mapping[int, float]]


def _finite_demand(vertex: int, demand: float) -> float:
    value = float(demand)
    if not math.isfinite(value):
        raise StructuralError(
            f"Vertex {vertex} has demand {value}. Demands must be finite.",
            vertex=vertex,
        )
    return value


def as_demand_vector(demands: Demands, vertex_count: int) -> list[float]:
    """Normalize caller demands into a fresh dense list of finite floats."""
    if isinstance(demands, Mapping):
        vector = [0.0] * vertex_count
        for vertex, demand in demands.items():
            if not 0 <= vertex < vertex_count:
                raise StructuralError(
                    f"Demand given for vertex {vertex} outside the vertex range "
                    f"[0, {vertex_count})",
                    vertex=vertex,
                )
            vector[vertex] = _finite_demand(vertex, demand)
        return vector
    if len(demands) != vertex_count:
        raise StructuralError(
            f"Demand vector has {len(demands)} entries but the network has "
            f"{vertex_count} vertices"
        )
    return [_finite_demand(vertex, demand) for vertex, demand in enumerate(demands)]


@dataclass
class SolverOptions:
    """Configuration options for the augmenting-path solver.

    Attributes:
        tolerance: Residual capacities at or below this value are treated as
                   saturated, and supply/demand totals within it count as
                   balanced (default: 1e-9). Use 0.0 for exact integer data.
        record_paths: Keep the vertex sequence of every augmenting path in the
                      result (default: False). Paths are always logged at DEBUG.

    Examples:
        >>> options = SolverOptions(tolerance=1e-6, record_paths=True)
    """

    tolerance: float = 1e-9
    record_paths: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.tolerance) or self.tolerance < 0:
            raise SolverConfigurationError(
                f"Tolerance must be finite and non-negative, got {self.tolerance}. "
                f"Tolerance decides when a residual capacity counts as saturated."
            )


@dataclass(frozen=True)
class AugmentationInfo:
    """Progress information provided after an augmentation.

    Attributes:
        augmentation: Number of augmenting paths applied so far.
        bottleneck: Flow added by the latest path.
        total_flow: Flow value after the latest path.
        path_length: Number of edges on the latest path.
        elapsed_time: Seconds since the solve started.
    """

    augmentation: int
    bottleneck: float
    total_flow: float
    path_length: int
    elapsed_time: float


# Type alias for progress callback function
ProgressCallback = Callable[[AugmentationInfo], None]


@dataclass
class MaxFlowResult:
    """Output of a source-to-sink maximum-flow computation.

    Attributes:
        max_flow_value: Total flow from source to sink (equals the min-cut capacity).
        source: Source vertex.
        sink: Sink vertex.
        min_cut: Vertices reachable from the source in the final residual graph
                 (the source side of a minimum cut).
        flows: Edge id -> flow on that edge.
        augmentations: Number of augmenting paths applied.
        bottlenecks: Flow added by each augmenting path, in order.
        paths: Vertex sequence of each augmenting path when
               ``SolverOptions.record_paths`` is set.
    """

    max_flow_value: float
    source: int
    sink: int
    min_cut: set[int] = field(default_factory=set)
    flows: dict[int, float] = field(default_factory=dict)
    augmentations: int = 0
    bottlenecks: list[float] = field(default_factory=list)
    paths: list[list[int]] = field(default_factory=list)


@dataclass
class CirculationResult:
    """Output of a circulation-with-demands computation.

    Attributes:
        feasible: True when every demand can be met within the edge bounds.
        max_flow_value: Flow pushed from the synthetic source to the synthetic sink.
        sum_of_demands: Total positive demand checked against the flow value.
        sum_of_supplies: Total supply (magnitude of negative demands).
        status: 'feasible', 'unbalanced' (supply and demand totals differ, the
                augmentation loop is not run) or 'insufficient_capacity'.
        stage: For 'unbalanced', whether the totals differed 'before' or
               'after' lower-bound reduction. None otherwise.
        min_cut: Source side of the final residual graph, synthetic source included.
        flows: Caller edge id -> flow in the caller's units (lower bounds re-added).
        adjusted_demands: Per-vertex demands after lower-bound reduction.
        source: Synthetic source vertex in ``network`` (None when not built).
        sink: Synthetic sink vertex in ``network`` (None when not built).
        augmentations: Number of augmenting paths applied.
        network: Transformed working network (reduced edges plus synthetic
                 vertices and edges). None when the solve short-circuits before
                 reduction.
    """

    feasible: bool
    max_flow_value: float
    sum_of_demands: float
    sum_of_supplies: float
    status: str = "feasible"
    stage: str | None = None
    min_cut: set[int] = field(default_factory=set)
    flows: dict[int, float] = field(default_factory=dict)
    adjusted_demands: list[float] = field(default_factory=list)
    source: int | None = None
    sink: int | None = None
    augmentations: int = 0
    network: FlowNetwork | None = None


@dataclass
class FlowProblem:
    """A flow query with human-readable vertex labels.

    The core keys everything by integer index; this wrapper keeps the label
    mapping used by the JSON layer and example scripts.

    Attributes:
        network: The flow network, vertices in label order.
        labels: Vertex index -> label.
        demands: Vertex index -> demand (positive = needs inflow).
        source: Source vertex for max-flow queries, None for circulations.
        sink: Sink vertex for max-flow queries, None for circulations.
    """

    network: FlowNetwork
    labels: list[str]
    demands: list[float]
    source: int | None = None
    sink: int | None = None

    @property
    def is_max_flow(self) -> bool:
        return self.source is not None

    def index_of(self, label: str) -> int:
        try:
            return self.labels.index(label)
        except ValueError:
            raise InvalidProblemError(f"Unknown vertex '{label}'") from None


def build_problem(
    vertices: Iterable[Mapping[str, Any]],
    edges: Iterable[Mapping[str, Any]],
    source: str | None = None,
    sink: str | None = None,
) -> FlowProblem:
    """Factory helper used by the IO layer to assemble a FlowProblem."""
    labels: list[str] = []
    positions: dict[str, int] = {}
    demands: list[float] = []
    for vertex in vertices:
        vertex_id = str(vertex["id"])
        if vertex_id in positions:
            raise InvalidProblemError(
                f"Duplicate vertex id '{vertex_id}'. Each vertex must have a unique identifier."
            )
        positions[vertex_id] = len(labels)
        labels.append(vertex_id)
        demands.append(float(vertex.get("demand", 0.0)))

    network = FlowNetwork(len(labels))
    for edge in edges:
        tail = str(edge["tail"])
        head = str(edge["head"])
        for role, endpoint in (("tail", tail), ("head", head)):
            if endpoint not in positions:
                raise InvalidProblemError(
                    f"Edge {role} '{endpoint}' not found in vertex set. All edge endpoints "
                    f"must reference existing vertices."
                )
        if edge.get("capacity") is None:
            raise InvalidProblemError(
                f"Edge {tail} -> {head} has no capacity. Every edge needs a finite capacity."
            )
        network.add_edge(
            positions[tail],
            positions[head],
            float(edge["capacity"]),
            lower=float(edge.get("lower", 0.0)),
        )

    if (source is None) != (sink is None):
        raise InvalidProblemError(
            "Max-flow problems need both 'source' and 'sink'; circulation problems need neither."
        )
    source_index = sink_index = None
    if source is not None and sink is not None:
        for role, endpoint in (("Source", source), ("Sink", sink)):
            if str(endpoint) not in positions:
                raise InvalidProblemError(f"{role} '{endpoint}' not found in vertex set.")
        source_index = positions[str(source)]
        sink_index = positions[str(sink)]

    return FlowProblem(
        network=network,
        labels=labels,
        demands=demands,
        source=source_index,
        sink=sink_index,
    )
