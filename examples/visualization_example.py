"""Visualization examples for max-flow and circulation problems.

Requires optional visualization dependencies:
    pip install 'flow_solver[visualization]'

Writes PNG files next to this script for:
1. The textbook max-flow network structure
2. Its maximum flow with the minimum cut highlighted
3. A circulation with demands and lower bounds, before and after solving
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    FlowNetwork,
    load_problem,
    solve_circulation,
    solve_problem,
    visualize_flows,
    visualize_network,
)


def print_section_header(title: str) -> None:
    """Print a formatted section header."""
    print("\n" + "=" * 80)
    print(title.center(80))
    print("=" * 80 + "\n")


def main() -> None:
    base_dir = Path(__file__).resolve().parent
    problem = load_problem(base_dir / "sample_max_flow.json")

    try:
        print_section_header("Example 1: Network Structure")
        fig = visualize_network(problem.network, labels=problem.labels, title="Textbook network")
        fig.savefig(base_dir / "network_structure.png")
        print("Saved network_structure.png")
    except ImportError as e:
        print("Error: Visualization dependencies not installed")
        print("Install with: pip install 'flow_solver[visualization]'")
        print(f"Details: {e}")
        sys.exit(1)

    print_section_header("Example 2: Maximum Flow and Minimum Cut")
    result = solve_problem(problem)
    fig = visualize_flows(problem.network, result, labels=problem.labels, layout="kamada_kawai")
    fig.savefig(base_dir / "max_flow.png")
    print(f"Max flow {result.max_flow_value:g}; saved max_flow.png")

    print_section_header("Example 3: Circulation with Lower Bounds")
    labels = ["supply", "relay", "demand"]
    network = FlowNetwork(3)
    network.add_edge(0, 1, 8, lower=2)
    network.add_edge(1, 2, 6)
    network.add_edge(0, 2, 3, lower=1)
    demands = [-7, 0, 7]
    fig = visualize_network(network, labels=labels, demands=demands, layout="circular")
    fig.savefig(base_dir / "circulation_structure.png")
    circulation = solve_circulation(network, demands)
    fig = visualize_flows(network, circulation, labels=labels, layout="circular")
    fig.savefig(base_dir / "circulation_flows.png")
    print(f"Feasible: {circulation.feasible}; saved circulation_structure.png, circulation_flows.png")


if __name__ == "__main__":
    main()
