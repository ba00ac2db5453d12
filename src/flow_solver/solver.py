"""Public solver entrypoints."""

from __future__ import annotations

from pathlib import Path

from .circulation import CirculationSolver
from .data import (
    CirculationResult,
    Demands,
    FlowNetwork,
    FlowProblem,
    MaxFlowResult,
    ProgressCallback,
    SolverOptions,
)
from .exceptions import StructuralError
from .io import load_problem as load_problem_file
from .io import save_result as save_result_file
from .maxflow import MaxFlowSolver


def solve_max_flow(
    network: FlowNetwork,
    source: int,
    sink: int,
    options: SolverOptions | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = 1,
) -> MaxFlowResult:
    """Compute a maximum flow from ``source`` to ``sink`` with Edmonds-Karp.

    Flows are written into the network's edges in place; any flow left from a
    previous solve is cleared first, so repeated solves give identical results.

    Args:
        network: Network with zero lower bounds on every edge.
        source: Source vertex.
        sink: Sink vertex, different from ``source``.
        options: Solver configuration options. If None, uses defaults.
        progress_callback: Optional callback receiving AugmentationInfo.
        progress_interval: Number of augmentations between callbacks (default: 1).

    Returns:
        MaxFlowResult containing:
        - max_flow_value: Total flow from source to sink
        - min_cut: Source side of a minimum cut
        - flows: Flow on each edge, keyed by edge id
        - augmentations / bottlenecks: Per-path progress record

    Raises:
        StructuralError: If source or sink is out of range, source == sink, or
                         the network has lower bounds (use solve_circulation()).

    Time Complexity:
        O(V * E^2): at most O(V * E) augmentations, each a BFS over the edges.

    Examples:
        >>> from flow_solver import FlowNetwork, solve_max_flow
        >>> network = FlowNetwork(4)
        >>> for tail, head, capacity in [(0, 1, 20), (0, 2, 10), (1, 3, 10),
        ...                              (1, 2, 30), (2, 3, 20)]:
        ...     _ = network.add_edge(tail, head, capacity)
        >>> result = solve_max_flow(network, source=0, sink=3)
        >>> result.max_flow_value, sorted(result.min_cut)
        (30.0, [0])
    """
    if network.has_lower_bounds():
        raise StructuralError(
            "Network has edges with lower bounds (possibly already folded into offsets). "
            "Plain max-flow assumes zero lower bounds; use solve_circulation() with a "
            "demand vector instead."
        )
    # Instantiate a fresh solver each call to avoid cross-run state sharing.
    solver = MaxFlowSolver(network, source, sink, options=options)
    network.reset_flows()
    return solver.solve(progress_callback=progress_callback, progress_interval=progress_interval)


def solve_circulation(
    network: FlowNetwork,
    demands: Demands,
    options: SolverOptions | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = 1,
) -> CirculationResult:
    """Decide whether a circulation meeting every demand and edge bound exists.

    Lower bounds are folded into vertex demands, a synthetic source feeds the
    supply vertices and a synthetic sink drains the demand vertices, and a
    single max-flow computation decides feasibility. The caller's network and
    demand vector are left untouched; the transformed network is returned in
    ``result.network``.

    Args:
        network: Network whose edges may carry lower bounds.
        demands: Per-vertex demand (positive = needs inflow, negative = supplies
                 outflow), as a sequence or a sparse ``{vertex: demand}`` mapping.
        options: Solver configuration options. If None, uses defaults.
        progress_callback: Optional callback receiving AugmentationInfo.
        progress_interval: Number of augmentations between callbacks (default: 1).

    Returns:
        CirculationResult. ``feasible`` is False with status 'unbalanced' when
        total supply and demand differ before or after lower-bound reduction
        (no augmentation is attempted), and with status 'insufficient_capacity'
        when the max-flow value falls short of the total demand.

    Raises:
        StructuralError: If the demand vector does not fit the network.

    Examples:
        >>> network = FlowNetwork(2)
        >>> _ = network.add_edge(0, 1, 5, lower=1)
        >>> result = solve_circulation(network, [-3, 3])
        >>> result.feasible, result.flows[0]
        (True, 3.0)
    """
    solver = CirculationSolver(network, demands, options=options)
    return solver.solve(progress_callback=progress_callback, progress_interval=progress_interval)


def solve_problem(
    problem: FlowProblem,
    options: SolverOptions | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = 1,
) -> MaxFlowResult | CirculationResult:
    """Solve a labelled problem: max-flow when it names a source and sink, else circulation."""
    if problem.source is not None and problem.sink is not None:
        return solve_max_flow(
            problem.network,
            problem.source,
            problem.sink,
            options=options,
            progress_callback=progress_callback,
            progress_interval=progress_interval,
        )
    return solve_circulation(
        problem.network,
        problem.demands,
        options=options,
        progress_callback=progress_callback,
        progress_interval=progress_interval,
    )


def load_problem(path: str | Path) -> FlowProblem:
    """Load a flow problem from a JSON file.

    Raises:
        FileNotFoundError: If file does not exist.
        InvalidProblemError: If JSON is malformed or problem is invalid.

    See Also:
        - save_result(): Save solution to JSON
        - build_problem(): Construct problem from dictionaries
    """
    # Reuse the IO helpers so callers interact with a single parsing implementation.
    return load_problem_file(path)


def save_result(
    path: str | Path,
    result: MaxFlowResult | CirculationResult,
    problem: FlowProblem | None = None,
) -> None:
    """Save a solver result to a JSON file, using the problem's labels when given."""
    save_result_file(path, result, problem=problem)
