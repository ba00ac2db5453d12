"""High-level entrypoints for the max-flow and circulation solver library."""

from .circulation import CirculationNetwork, CirculationSolver, build_circulation
from .data import (
    AugmentationInfo,
    CirculationResult,
    FlowEdge,
    FlowNetwork,
    FlowProblem,
    MaxFlowResult,
    ProgressCallback,
    SolverOptions,
    build_problem,
)
from .exceptions import (
    FlowSolverError,
    InvalidProblemError,
    SolverConfigurationError,
    StructuralError,
)
from .matching import MatchingResult, build_matching_network, solve_bipartite_matching
from .maxflow import MaxFlowSolver
from .reduction import LowerBoundReduction, reduce_lower_bounds
from .search import AugmentingPathFinder
from .solver import (
    load_problem,
    save_result,
    solve_circulation,
    solve_max_flow,
    solve_problem,
)
from .utils import (
    FlowPath,
    ValidationResult,
    cut_capacity,
    extract_path,
    min_cut_edges,
    validate_flow,
)
from .visualization import visualize_flows, visualize_network

__version__ = "0.1.0"

__all__ = [
    # Main API
    "FlowNetwork",
    "FlowEdge",
    "solve_max_flow",
    "solve_circulation",
    "solve_problem",
    "solve_bipartite_matching",
    "build_problem",
    "load_problem",
    "save_result",
    # Configuration
    "SolverOptions",
    # Results
    "MaxFlowResult",
    "CirculationResult",
    "MatchingResult",
    "FlowProblem",
    # Progress tracking
    "ProgressCallback",
    "AugmentationInfo",
    # Building blocks
    "AugmentingPathFinder",
    "MaxFlowSolver",
    "CirculationSolver",
    "CirculationNetwork",
    "LowerBoundReduction",
    "reduce_lower_bounds",
    "build_circulation",
    "build_matching_network",
    # Utilities
    "validate_flow",
    "cut_capacity",
    "min_cut_edges",
    "extract_path",
    "FlowPath",
    "ValidationResult",
    # Visualization
    "visualize_network",
    "visualize_flows",
    # Exceptions
    "FlowSolverError",
    "StructuralError",
    "InvalidProblemError",
    "SolverConfigurationError",
    # Version
    "__version__",
]
