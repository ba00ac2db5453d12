"""
Demonstrates bipartite matching and circulation with lower bounds.

This example shows how to:
- Assign workers to jobs with a unit-capacity max-flow
- Check a shipping plan with minimum and maximum lane volumes
- Validate the returned flow and inspect an infeasible instance
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    FlowNetwork,
    solve_bipartite_matching,
    solve_circulation,
    validate_flow,
)


def main() -> None:
    print("=" * 80)
    print("BIPARTITE MATCHING AND CIRCULATION DEMONSTRATION")
    print("=" * 80)

    # ========================================================================
    # Matching: workers on the left, jobs on the right
    # ========================================================================
    workers = ["ann", "bo", "cy", "dee"]
    jobs = ["welding", "wiring", "painting"]
    skills = {
        "ann": ["welding"],
        "bo": ["welding"],
        "cy": ["wiring", "painting"],
        "dee": ["painting"],
    }
    pairs = [
        (workers.index(worker), jobs.index(job))
        for worker, skilled in skills.items()
        for job in skilled
    ]

    matching = solve_bipartite_matching(len(workers), len(jobs), pairs)
    print(f"\nMatched {matching.size} of {len(workers)} workers:")
    for left, right in matching.pairs:
        print(f"  {workers[left]:>4} -> {jobs[right]}")
    idle = [workers[i] for i in range(len(workers)) if i not in matching.matched_left]
    print(f"  Unassigned: {', '.join(idle)}")

    # ========================================================================
    # Circulation: two depots, one hub, two stores, with lane minimums
    # ========================================================================
    names = ["depot_a", "depot_b", "hub", "store_1", "store_2"]
    demands = [-30.0, -20.0, 0.0, 25.0, 25.0]
    lanes = [
        # (tail, head, capacity, minimum)
        (0, 2, 25.0, 10.0),
        (1, 2, 20.0, 5.0),
        (0, 3, 10.0, 0.0),
        (2, 3, 20.0, 0.0),
        (2, 4, 25.0, 15.0),
    ]
    network = FlowNetwork(len(names))
    for tail, head, capacity, minimum in lanes:
        network.add_edge(tail, head, capacity, lower=minimum)

    result = solve_circulation(network, demands)
    print(f"\nShipping plan feasible: {result.feasible} ({result.status})")
    if result.feasible:
        for edge in network.edges():
            print(
                f"  {names[edge.tail]:>8} -> {names[edge.head]:<8} "
                f"{result.flows[edge.index]:5g} (allowed [{edge.lower:g}, {edge.capacity:g}])"
            )
        check = validate_flow(network, result.flows, demands=demands)
        print(f"  Validation: {'passed' if check.is_valid else check.errors}")

    # Tighten the hub -> store_1 lane so store_1 can no longer be served
    network.edge(3).capacity = 5.0
    result = solve_circulation(network, demands)
    print(f"\nWith hub -> store_1 capped at 5: feasible={result.feasible} ({result.status})")
    print(f"  Deliverable: {result.max_flow_value:g} of {result.sum_of_demands:g} required")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
