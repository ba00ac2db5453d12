"""Custom exceptions for the flow solver library."""

from __future__ import annotations


class FlowSolverError(Exception):
    """Base exception for all flow solver errors.

    All custom exceptions in the flow_solver package inherit from this class,
    allowing users to catch all solver-related errors with a single except clause.

    Example:
        try:
            result = solve_max_flow(network, source=0, sink=3)
        except FlowSolverError as e:
            print(f"Solver error: {e}")
    """


class StructuralError(FlowSolverError):
    """Raised when a network or query is structurally malformed.

    This is caller misuse and is reported before any search runs:
    - Edge endpoint outside ``[0, vertex_count)``
    - Source equal to sink
    - Negative capacity, negative lower bound, or lower bound above capacity
    - Demand vector whose length does not match the vertex count
    - Lower-bounded edges handed to plain max-flow

    Infeasible circulations are NOT structural errors; they are reported
    through ``CirculationResult.feasible``.

    Example:
        StructuralError("Edge head 7 is outside the vertex range [0, 4)")
    """

    def __init__(self, message: str, vertex: int | None = None):
        """Initialize with message and the offending vertex, if any."""
        super().__init__(message)
        self.vertex = vertex


class InvalidProblemError(FlowSolverError):
    """Raised when a serialized problem definition is malformed.

    This includes:
    - Missing 'vertices'/'edges' arrays in JSON input
    - Duplicate vertex identifiers
    - Edges referencing unknown vertex identifiers
    - Only one of 'source'/'sink' given
    """


class SolverConfigurationError(FlowSolverError):
    """Raised when solver configuration or options are invalid.

    Example:
        SolverConfigurationError("tolerance must be non-negative, got -1e-06")
    """
