"""Visualization utilities for flow networks and solutions.

This module draws networks, flows and minimum cuts using matplotlib and
networkx.

Example:
    >>> from flow_solver import visualize_network, visualize_flows
    >>>
    >>> # Visualize problem structure
    >>> fig = visualize_network(network, demands=demands)
    >>> fig.savefig("network.png")
    >>>
    >>> # Visualize a max-flow solution with its minimum cut
    >>> fig = visualize_flows(network, result, highlight_min_cut=True)
    >>> fig.savefig("flows.png")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .data import as_demand_vector

if TYPE_CHECKING:
    from .data import CirculationResult, Demands, FlowNetwork, MaxFlowResult

logger = logging.getLogger(__name__)

# Check for optional dependencies
try:
    import matplotlib.pyplot as plt
    import networkx as nx  # type: ignore[import-untyped,unused-ignore]
    from matplotlib.figure import Figure

    _HAS_VISUALIZATION_DEPS = True
except ImportError:
    _HAS_VISUALIZATION_DEPS = False
    Figure = Any  # type: ignore[misc, assignment]


def _check_dependencies() -> None:
    """Check if visualization dependencies are installed."""
    if not _HAS_VISUALIZATION_DEPS:
        msg = (
            "Visualization requires optional dependencies. "
            "Install with: pip install 'flow_solver[visualization]'"
        )
        raise ImportError(msg)


def _vertex_name(vertex: int, labels: Sequence[str] | None) -> str:
    if labels is not None and vertex < len(labels):
        return labels[vertex]
    return str(vertex)


def _build_graph(
    network: FlowNetwork,
    labels: Sequence[str] | None,
    flows: dict[int, float] | None = None,
) -> Any:
    # Parallel edges are merged into one drawn edge carrying the summed values.
    graph = nx.DiGraph()
    for vertex in range(network.vertex_count):
        graph.add_node(_vertex_name(vertex, labels), index=vertex)
    for edge in network.edges():
        tail = _vertex_name(edge.tail, labels)
        head = _vertex_name(edge.head, labels)
        flow = flows.get(edge.index, 0.0) if flows is not None else edge.total_flow
        if graph.has_edge(tail, head):
            data = graph[tail][head]
            data["upper"] += edge.upper
            data["lower"] += edge.lower + edge.offset
            data["flow"] += flow
            data["ids"].append(edge.index)
        else:
            graph.add_edge(
                tail,
                head,
                upper=edge.upper,
                lower=edge.lower + edge.offset,
                flow=flow,
                ids=[edge.index],
            )
    return graph


def _compute_layout(graph: Any, layout: str) -> dict[Any, Any]:
    layout_funcs = {
        "spring": nx.spring_layout,
        "circular": nx.circular_layout,
        "kamada_kawai": nx.kamada_kawai_layout,
        "planar": nx.planar_layout,
    }
    if layout not in layout_funcs:
        logger.warning(f"Unknown layout '{layout}', using 'spring'")
        layout = "spring"

    try:
        return layout_funcs[layout](graph)
    except Exception as e:
        logger.warning(f"Layout '{layout}' failed: {e}, using 'spring'")
        return nx.spring_layout(graph)


def _draw_vertex_groups(
    graph: Any,
    pos: dict[Any, Any],
    ax: Any,
    groups: list[tuple[list[str], str, str]],
    node_size: int,
) -> None:
    for nodelist, color, label in groups:
        if nodelist:
            nx.draw_networkx_nodes(
                graph,
                pos,
                nodelist=nodelist,
                node_color=color,
                node_size=node_size,
                ax=ax,
                label=label,
            )


def visualize_network(
    network: FlowNetwork,
    labels: Sequence[str] | None = None,
    demands: Demands | None = None,
    layout: str = "spring",
    figsize: tuple[float, float] = (12, 8),
    node_size: int = 1000,
    font_size: int = 10,
    show_edge_labels: bool = True,
    title: str | None = None,
) -> Figure:
    """Visualize network structure showing vertices, edges, demands and bounds.

    Creates a network graph visualization with:
    - Supply vertices (demand < 0) in green
    - Demand vertices (demand > 0) in red
    - Transshipment vertices in lightblue
    - Edges labelled with their capacity interval ``[lower, upper]``

    Args:
        network: Flow network to visualize
        labels: Optional vertex labels (index -> name)
        demands: Optional per-vertex demand vector or mapping
        layout: Graph layout algorithm ("spring", "circular", "kamada_kawai", "planar")
        figsize: Figure size (width, height) in inches
        node_size: Size of vertex markers
        font_size: Font size for labels
        show_edge_labels: Whether to show capacity labels on edges
        title: Custom title for the plot (default: "Network Structure")

    Returns:
        matplotlib Figure object

    Raises:
        ImportError: If matplotlib or networkx are not installed
    """
    _check_dependencies()

    graph = _build_graph(network, labels)
    vector = (
        as_demand_vector(demands, network.vertex_count)
        if demands is not None
        else [0.0] * network.vertex_count
    )

    fig, ax = plt.subplots(figsize=figsize)
    pos = _compute_layout(graph, layout)

    names = [_vertex_name(vertex, labels) for vertex in range(network.vertex_count)]
    _draw_vertex_groups(
        graph,
        pos,
        ax,
        [
            ([n for n, d in zip(names, vector) if d < 0], "lightgreen", "Supply"),
            ([n for n, d in zip(names, vector) if d > 0], "lightcoral", "Demand"),
            ([n for n, d in zip(names, vector) if d == 0], "lightblue", "Transshipment"),
        ],
        node_size,
    )

    nx.draw_networkx_edges(
        graph,
        pos,
        edge_color="gray",
        arrows=True,
        arrowsize=20,
        ax=ax,
        connectionstyle="arc3,rad=0.1",
    )

    node_labels = {
        name: f"{name}\n({demand:+g})" if demand else name for name, demand in zip(names, vector)
    }
    nx.draw_networkx_labels(graph, pos, labels=node_labels, font_size=font_size, ax=ax)

    if show_edge_labels:
        edge_labels = {
            (tail, head): f"[{data['lower']:g}, {data['upper']:g}]"
            for tail, head, data in graph.edges(data=True)
        }
        nx.draw_networkx_edge_labels(
            graph, pos, edge_labels=edge_labels, font_size=font_size - 2, ax=ax
        )

    ax.set_title(title or "Network Structure", fontsize=14, fontweight="bold")
    ax.legend(loc="upper left", fontsize=font_size)
    ax.axis("off")

    plt.tight_layout()
    return fig


def visualize_flows(
    network: FlowNetwork,
    result: MaxFlowResult | CirculationResult,
    labels: Sequence[str] | None = None,
    layout: str = "spring",
    figsize: tuple[float, float] = (14, 10),
    node_size: int = 1200,
    font_size: int = 10,
    highlight_min_cut: bool = True,
    show_zero_flows: bool = False,
    title: str | None = None,
) -> Figure:
    """Visualize a flow solution with optional minimum-cut highlighting.

    Creates a network visualization showing:
    - Flow values on each edge as ``flow/upper``
    - Edge thickness proportional to flow magnitude
    - Source-side vertices of the minimum cut in green, the rest in lightblue
    - Edges crossing the cut highlighted in red

    Args:
        network: The caller's network the result refers to
        result: Result from solve_max_flow() or solve_circulation()
        labels: Optional vertex labels (index -> name)
        layout: Graph layout algorithm ("spring", "circular", "kamada_kawai", "planar")
        figsize: Figure size (width, height) in inches
        node_size: Size of vertex markers
        font_size: Font size for labels
        highlight_min_cut: Whether to color the cut sides and crossing edges
        show_zero_flows: Whether to show edges with zero flow
        title: Custom title for the plot (default: "Flow Solution")

    Returns:
        matplotlib Figure object

    Raises:
        ImportError: If matplotlib or networkx are not installed
    """
    _check_dependencies()

    graph = _build_graph(network, labels, flows=result.flows)
    if not show_zero_flows:
        graph.remove_edges_from(
            [(tail, head) for tail, head, data in graph.edges(data=True) if data["flow"] == 0]
        )

    fig, ax = plt.subplots(figsize=figsize)
    pos = _compute_layout(graph, layout)

    names = [_vertex_name(vertex, labels) for vertex in range(network.vertex_count)]
    cut_side = {_vertex_name(v, labels) for v in result.min_cut if v < network.vertex_count}
    if highlight_min_cut:
        groups = [
            ([n for n in names if n in cut_side], "lightgreen", "Source side"),
            ([n for n in names if n not in cut_side], "lightblue", "Sink side"),
        ]
    else:
        groups = [(names, "lightblue", "Vertices")]
    _draw_vertex_groups(graph, pos, ax, groups, node_size)

    max_flow = max((abs(data["flow"]) for _, _, data in graph.edges(data=True)), default=1.0)
    cut_edges = []
    regular_edges = []
    cut_widths = []
    regular_widths = []
    for tail, head, data in graph.edges(data=True):
        width = 1.0 + 5.0 * (abs(data["flow"]) / max_flow) if max_flow > 0 else 1.0
        if highlight_min_cut and tail in cut_side and head not in cut_side:
            cut_edges.append((tail, head))
            cut_widths.append(width)
        else:
            regular_edges.append((tail, head))
            regular_widths.append(width)

    if regular_edges:
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=regular_edges,
            edge_color="gray",
            width=regular_widths,
            arrows=True,
            arrowsize=20,
            ax=ax,
            connectionstyle="arc3,rad=0.1",
            alpha=0.6,
        )
    if cut_edges:
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=cut_edges,
            edge_color="red",
            width=cut_widths,
            arrows=True,
            arrowsize=20,
            ax=ax,
            connectionstyle="arc3,rad=0.1",
            alpha=0.8,
            label="Min-cut edges",
        )

    nx.draw_networkx_labels(graph, pos, font_size=font_size, ax=ax)
    edge_labels = {
        (tail, head): f"{data['flow']:g}/{data['upper']:g}"
        for tail, head, data in graph.edges(data=True)
    }
    nx.draw_networkx_edge_labels(
        graph, pos, edge_labels=edge_labels, font_size=font_size - 2, ax=ax
    )

    default_title = f"Flow Solution (value {result.max_flow_value:g})"
    ax.set_title(title or default_title, fontsize=14, fontweight="bold")
    ax.legend(loc="upper left", fontsize=font_size)
    ax.axis("off")

    plt.tight_layout()
    return fig
