"""Edmonds-Karp maximum-flow solver."""

from __future__ import annotations

import logging
import math
import time

from .data import AugmentationInfo, FlowNetwork, MaxFlowResult, ProgressCallback, SolverOptions
from .exceptions import SolverConfigurationError, StructuralError
from .search import AugmentingPathFinder


class MaxFlowSolver:
    """Augmenting-path solver for the maximum source-to-sink flow.

    Repeatedly asks :class:`AugmentingPathFinder` for a shortest augmenting
    path, pushes the path's bottleneck capacity along it and stops when the
    sink is no longer reachable in the residual graph. Flow values are written
    into the network's edges in place.

    Attributes:
        network: The network being solved; its edge flows are updated in place.
        source: Source vertex.
        sink: Sink vertex.
        options: Solver configuration (tolerance, path recording).
        finder: Path finder holding the final ``marked`` bitmap after solve().

    See Also:
        - solve_max_flow(): Public API wrapper
        - solve_circulation(): Demand/lower-bound problems reduced to max-flow

    Note:
        Use solve_max_flow() or solve_circulation() instead of instantiating
        this class directly.
    """

    def __init__(
        self,
        network: FlowNetwork,
        source: int,
        sink: int,
        options: SolverOptions | None = None,
    ):
        network.check_vertex(source, "Source")
        network.check_vertex(sink, "Sink")
        if source == sink:
            raise StructuralError(f"Source and sink must differ, both are {source}", vertex=source)
        self.network = network
        self.source = source
        self.sink = sink
        self.options = options if options is not None else SolverOptions()
        self.logger = logging.getLogger(__name__)
        self.finder = AugmentingPathFinder(network, tolerance=self.options.tolerance)

    def solve(
        self,
        progress_callback: ProgressCallback | None = None,
        progress_interval: int = 1,
    ) -> MaxFlowResult:
        """Run augmentations until no augmenting path remains."""
        if progress_interval <= 0:
            raise SolverConfigurationError(
                f"progress_interval must be positive, got {progress_interval}"
            )
        start_time = time.perf_counter()
        total_flow = 0.0
        bottlenecks: list[float] = []
        paths: list[list[int]] = []

        self.logger.info(
            "Starting max-flow solve",
            extra={
                "vertices": self.network.vertex_count,
                "edges": self.network.edge_count,
                "source": self.source,
                "sink": self.sink,
            },
        )

        while self.finder.search(self.source, self.sink):
            path = self.finder.path_edges(self.sink)

            bottleneck = math.inf
            vertex = self.sink
            for edge in path:
                bottleneck = min(bottleneck, edge.residual_capacity_to(vertex))
                vertex = edge.other(vertex)

            vertex = self.sink
            for edge in path:
                edge.add_residual_flow_to(vertex, bottleneck)
                vertex = edge.other(vertex)

            total_flow += bottleneck
            bottlenecks.append(bottleneck)

            if self.options.record_paths or self.logger.isEnabledFor(logging.DEBUG):
                vertices = self.finder.path_vertices(self.sink)
                if self.options.record_paths:
                    paths.append(vertices)
                self.logger.debug(
                    f"Augmenting path {vertices} bottleneck={bottleneck}",
                    extra={"augmentation": len(bottlenecks), "total_flow": total_flow},
                )

            if progress_callback is not None and len(bottlenecks) % progress_interval == 0:
                progress_callback(
                    AugmentationInfo(
                        augmentation=len(bottlenecks),
                        bottleneck=bottleneck,
                        total_flow=total_flow,
                        path_length=len(path),
                        elapsed_time=time.perf_counter() - start_time,
                    )
                )

        min_cut = self.finder.reachable()
        self.logger.info(
            f"Max-flow solve finished: value={total_flow} after {len(bottlenecks)} augmentations",
            extra={
                "max_flow_value": total_flow,
                "augmentations": len(bottlenecks),
                "min_cut_size": len(min_cut),
                "elapsed_time": time.perf_counter() - start_time,
            },
        )

        return MaxFlowResult(
            max_flow_value=total_flow,
            source=self.source,
            sink=self.sink,
            min_cut=min_cut,
            flows={edge.index: edge.total_flow for edge in self.network.edges()},
            augmentations=len(bottlenecks),
            bottlenecks=bottlenecks,
            paths=paths,
        )
