"""Tests for visualization utilities."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import FlowNetwork, solve_circulation, solve_max_flow  # noqa: E402

# Check if visualization dependencies are available
try:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from flow_solver import visualize_flows, visualize_network

    HAS_VISUALIZATION = True
except ImportError:
    HAS_VISUALIZATION = False
    plt = None

pytestmark = pytest.mark.skipif(
    not HAS_VISUALIZATION,
    reason="Visualization dependencies (matplotlib, networkx) not installed",
)


@pytest.fixture(autouse=True)
def close_figures():
    """Close all matplotlib figures after each test."""
    yield
    if plt is not None:
        plt.close("all")


@pytest.fixture
def clrs_network():
    """The textbook six-vertex max-flow instance."""
    network = FlowNetwork(6)
    for tail, head, capacity in [
        (0, 1, 16),
        (0, 2, 13),
        (1, 3, 12),
        (2, 1, 4),
        (2, 4, 14),
        (3, 2, 9),
        (3, 5, 20),
        (4, 3, 7),
        (4, 5, 4),
    ]:
        network.add_edge(tail, head, capacity)
    return network


LABELS = ["s", "v1", "v2", "v3", "v4", "t"]


def test_visualize_network_basic(clrs_network):
    fig = visualize_network(clrs_network, labels=LABELS)

    assert fig is not None
    assert fig.axes[0].get_title() == "Network Structure"


def test_visualize_network_with_demands_and_title():
    network = FlowNetwork(3)
    network.add_edge(0, 1, 5, lower=1)
    network.add_edge(1, 2, 5)

    fig = visualize_network(network, demands={0: -2, 2: 2}, title="Demands", layout="circular")

    assert fig.axes[0].get_title() == "Demands"


def test_visualize_network_unknown_layout_falls_back(clrs_network, caplog):
    fig = visualize_network(clrs_network, layout="hexagonal", show_edge_labels=False)

    assert fig is not None
    assert any("Unknown layout" in record.getMessage() for record in caplog.records)


def test_visualize_network_parallel_edges():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 2)
    network.add_edge(0, 1, 3)

    assert visualize_network(network) is not None


def test_visualize_flows_max_flow(clrs_network):
    result = solve_max_flow(clrs_network, 0, 5)

    fig = visualize_flows(clrs_network, result, labels=LABELS)

    assert "23" in fig.axes[0].get_title()


def test_visualize_flows_without_cut_highlight(clrs_network):
    result = solve_max_flow(clrs_network, 0, 5)

    fig = visualize_flows(
        clrs_network, result, highlight_min_cut=False, show_zero_flows=True, title="Flows"
    )

    assert fig.axes[0].get_title() == "Flows"


def test_visualize_flows_circulation():
    network = FlowNetwork(3)
    network.add_edge(0, 1, 4)
    network.add_edge(1, 2, 4)
    result = solve_circulation(network, [-3, 0, 3])

    assert visualize_flows(network, result) is not None


def test_visualize_flows_all_zero():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 0)
    result = solve_max_flow(network, 0, 1)

    assert visualize_flows(network, result) is not None
