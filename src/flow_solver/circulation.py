"""Circulation with demands, reduced to a single max-flow computation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .data import (
    CirculationResult,
    Demands,
    FlowNetwork,
    ProgressCallback,
    SolverOptions,
    as_demand_vector,
)
from .maxflow import MaxFlowSolver
from .reduction import reduce_lower_bounds


@dataclass
class CirculationNetwork:
    """Synthetic source/sink wiring added by :func:`build_circulation`.

    Attributes:
        source: Synthetic source vertex, feeding every supply vertex.
        sink: Synthetic sink vertex, drained by every demand vertex.
        supply_vertices: Vertices with negative demand.
        demand_vertices: Vertices with positive demand.
        total_demand: Capacity into the sink (sum of positive demands).
        total_supply: Capacity out of the source (sum of |negative demands|).
        synthetic_edges: Ids of the edges added for the source and sink.
    """

    source: int
    sink: int
    supply_vertices: list[int] = field(default_factory=list)
    demand_vertices: list[int] = field(default_factory=list)
    total_demand: float = 0.0
    total_supply: float = 0.0
    synthetic_edges: list[int] = field(default_factory=list)


def build_circulation(
    network: FlowNetwork,
    demands: Sequence[float],
    tolerance: float = 0.0,
) -> CirculationNetwork:
    """Append a synthetic source and sink wired to the supply and demand vertices.

    A supply vertex ``s`` gets an edge ``source -> s`` with capacity ``-demand[s]``,
    a demand vertex ``d`` gets ``d -> sink`` with capacity ``demand[d]``. Vertices
    whose demand is within ``tolerance`` of zero are left alone. A feasible
    circulation exists exactly when the maximum source-to-sink flow saturates
    every one of these edges.

    Args:
        network: Network with zero lower bounds; modified in place.
        demands: Balanced per-vertex demand for the network's original vertices.
        tolerance: Magnitude below which a demand counts as zero.
    """
    original_count = network.vertex_count
    supply_vertices = [v for v in range(original_count) if demands[v] < -tolerance]
    demand_vertices = [v for v in range(original_count) if demands[v] > tolerance]

    source = network.add_vertex()
    sink = network.add_vertex()
    wiring = CirculationNetwork(
        source=source,
        sink=sink,
        supply_vertices=supply_vertices,
        demand_vertices=demand_vertices,
    )
    for vertex in supply_vertices:
        edge = network.add_edge(source, vertex, -demands[vertex])
        wiring.total_supply += edge.capacity
        wiring.synthetic_edges.append(edge.index)
    for vertex in demand_vertices:
        edge = network.add_edge(vertex, sink, demands[vertex])
        wiring.total_demand += edge.capacity
        wiring.synthetic_edges.append(edge.index)
    return wiring


class CirculationSolver:
    """Solves circulation problems with vertex demands and edge lower bounds.

    The caller's network is never modified: the solver works on a copy, folds
    lower bounds into demands, attaches a synthetic source and sink, and runs
    :class:`MaxFlowSolver` on the result. The circulation is feasible when the
    resulting flow value equals the total demand.

    Attributes:
        network: The caller's network (read only).
        demands: Normalized copy of the caller's demand vector.
        options: Solver configuration.
    """

    def __init__(
        self,
        network: FlowNetwork,
        demands: Demands,
        options: SolverOptions | None = None,
    ):
        self.network = network
        self.demands = as_demand_vector(demands, network.vertex_count)
        self.options = options if options is not None else SolverOptions()
        self.logger = logging.getLogger(__name__)

    def solve(
        self,
        progress_callback: ProgressCallback | None = None,
        progress_interval: int = 1,
    ) -> CirculationResult:
        tolerance = self.options.tolerance
        working = self.network.copy()
        working.reset_flows()

        reduction = reduce_lower_bounds(working, self.demands, tolerance=tolerance)
        if not reduction.balanced:
            return CirculationResult(
                feasible=False,
                max_flow_value=0.0,
                sum_of_demands=reduction.sum_of_demands,
                sum_of_supplies=reduction.sum_of_supplies,
                status="unbalanced",
                stage=reduction.stage,
                adjusted_demands=reduction.adjusted_demands,
                network=working if reduction.stage == "after" else None,
            )

        wiring = build_circulation(working, reduction.adjusted_demands, tolerance=tolerance)
        self.logger.info(
            "Built circulation network",
            extra={
                "supply_vertices": len(wiring.supply_vertices),
                "demand_vertices": len(wiring.demand_vertices),
                "total_demand": wiring.total_demand,
            },
        )

        flow = MaxFlowSolver(working, wiring.source, wiring.sink, options=self.options).solve(
            progress_callback=progress_callback,
            progress_interval=progress_interval,
        )

        feasible = flow.max_flow_value >= reduction.sum_of_demands - tolerance
        if not feasible:
            self.logger.info(
                f"Circulation infeasible: flow {flow.max_flow_value} cannot meet demand "
                f"{reduction.sum_of_demands}",
                extra={
                    "max_flow_value": flow.max_flow_value,
                    "sum_of_demands": reduction.sum_of_demands,
                },
            )

        return CirculationResult(
            feasible=feasible,
            max_flow_value=flow.max_flow_value,
            sum_of_demands=reduction.sum_of_demands,
            sum_of_supplies=reduction.sum_of_supplies,
            status="feasible" if feasible else "insufficient_capacity",
            min_cut=flow.min_cut,
            flows={
                edge.index: edge.total_flow
                for edge in working.edges()
                if edge.index < self.network.edge_count
            },
            adjusted_demands=reduction.adjusted_demands,
            source=wiring.source,
            sink=wiring.sink,
            augmentations=flow.augmentations,
            network=working,
        )
