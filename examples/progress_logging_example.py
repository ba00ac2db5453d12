"""Example demonstrating progress reporting and logging during a max-flow solve."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    AugmentationInfo,
    FlowNetwork,
    SolverOptions,
    solve_max_flow,
)


def main() -> None:
    """Solve a layered network while printing every few augmentations."""

    print("=" * 70)
    print("PROGRESS LOGGING DEMONSTRATION")
    print("=" * 70)

    # 10 layers of 10 vertices, each vertex feeding three vertices in the next layer
    layers, width = 10, 10
    source = layers * width
    sink = source + 1
    network = FlowNetwork(sink + 1)
    for column in range(width):
        network.add_edge(source, column, 25.0)
        network.add_edge((layers - 1) * width + column, sink, 25.0)
    for layer in range(layers - 1):
        for column in range(width):
            for step in (-1, 0, 1):
                target = (column + step) % width
                capacity = 2.0 + (layer * 7 + column * 3 + step) % 9
                network.add_edge(layer * width + column, (layer + 1) * width + target, capacity)

    print(f"\n  Vertices: {network.vertex_count}")
    print(f"  Edges: {network.edge_count}")

    def progress_callback(info: AugmentationInfo) -> None:
        print(
            f"  Augmentation {info.augmentation:4d} | "
            f"bottleneck {info.bottleneck:6.2f} | "
            f"path length {info.path_length:3d} | "
            f"flow so far {info.total_flow:8.2f} | "
            f"time {info.elapsed_time:6.3f}s"
        )

    print("\nSolving with progress reporting...")
    print("-" * 70)
    result = solve_max_flow(
        network,
        source,
        sink,
        progress_callback=progress_callback,
        progress_interval=10,  # Report every 10 augmentations
    )
    print("-" * 70)

    print("\nSolution found:")
    print(f"  Max flow: {result.max_flow_value:g}")
    print(f"  Augmentations: {result.augmentations}")
    print(f"  Source side of min cut: {len(result.min_cut)} vertices")

    # Library logs go through the standard logging module; DEBUG adds one line per path.
    print("\nRe-solving with DEBUG logging and path recording enabled...")
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    result = solve_max_flow(network, source, sink, options=SolverOptions(record_paths=True))
    print(f"\n  Recorded {len(result.paths)} augmenting paths")
    print(f"  Shortest: {min(result.paths, key=len)}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
