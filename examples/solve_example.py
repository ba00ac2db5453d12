"""Example script demonstrating usage of the max-flow and circulation solver."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    CirculationResult,
    load_problem,
    save_result,
    solve_problem,
)


def main() -> None:
    base_dir = Path(__file__).resolve().parent

    for name in ("sample_max_flow", "sample_circulation"):
        problem_path = base_dir / f"{name}.json"
        output_path = base_dir / f"{name}_solution.json"

        problem = load_problem(problem_path)
        result = solve_problem(problem)
        save_result(output_path, result, problem=problem)

        print(f"Solved {problem_path.name}: max_flow_value={result.max_flow_value:g}")
        if isinstance(result, CirculationResult):
            print(
                f"  feasible={result.feasible} status={result.status} "
                f"demand={result.sum_of_demands:g} supply={result.sum_of_supplies:g}"
            )
        else:
            cut = sorted(problem.labels[v] for v in result.min_cut)
            print(f"  min cut source side: {', '.join(cut)}")

        for edge in problem.network.edges():
            flow = result.flows.get(edge.index, 0.0)
            print(
                f"  {problem.labels[edge.tail]} -> {problem.labels[edge.head]}: "
                f"{flow:g}/{edge.upper:g}"
            )


if __name__ == "__main__":
    main()
