"""File I/O helpers for flow problems."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any

from .data import CirculationResult, FlowProblem, MaxFlowResult, build_problem
from .exceptions import InvalidProblemError

SYNTHETIC_SOURCE_LABEL = "__source__"
SYNTHETIC_SINK_LABEL = "__sink__"


def _normalize_edges(raw: Iterable[Mapping[str, Any]]) -> Sequence[dict[str, Any]]:
    # Normalize incoming edge dictionaries so the builder receives a uniform schema.
    edges = []
    for edge in raw:
        if "tail" not in edge or "head" not in edge:
            raise InvalidProblemError(
                f"Invalid edge specification: {edge}. Each edge must have 'tail' and 'head' fields."
            )
        edges.append(
            {
                "tail": edge["tail"],
                "head": edge["head"],
                "capacity": edge.get("capacity"),
                "lower": edge.get("lower", 0.0),
            }
        )
    return edges


def load_problem(path: str | Path) -> FlowProblem:
    """Load a max-flow or circulation instance from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as fh:
        payload: MutableMapping[str, Any] = json.load(fh)
    vertices = payload["vertices"] if "vertices" in payload else payload.get("nodes")
    edges = payload["edges"] if "edges" in payload else payload.get("arcs")
    if not isinstance(vertices, list) or not isinstance(edges, list):
        raise InvalidProblemError(
            "Invalid problem format: JSON must include 'vertices' (or 'nodes') and 'edges' "
            f"(or 'arcs') arrays. Got vertices type: {type(vertices).__name__}, "
            f"edges type: {type(edges).__name__}"
        )
    # Defer to the core builder so validation rules remain centralized in one place.
    return build_problem(
        vertices=vertices,
        edges=_normalize_edges(edges),
        source=payload.get("source"),
        sink=payload.get("sink"),
    )


def _label(vertex: int, result: MaxFlowResult | CirculationResult, labels: Sequence[str]) -> str:
    if vertex < len(labels):
        return labels[vertex]
    if isinstance(result, CirculationResult):
        if vertex == result.source:
            return SYNTHETIC_SOURCE_LABEL
        if vertex == result.sink:
            return SYNTHETIC_SINK_LABEL
    return str(vertex)


def result_to_dict(
    result: MaxFlowResult | CirculationResult,
    problem: FlowProblem | None = None,
) -> dict[str, Any]:
    """Convert a result into a JSON-ready dictionary keyed by vertex labels."""
    labels: Sequence[str] = problem.labels if problem is not None else []
    endpoints: dict[int, tuple[int, int]] = {}
    if problem is not None:
        endpoints = {edge.index: (edge.tail, edge.head) for edge in problem.network.edges()}

    flows = []
    for edge_id, flow in sorted(result.flows.items()):
        entry: dict[str, Any] = {"id": edge_id, "flow": flow}
        if edge_id in endpoints:
            tail, head = endpoints[edge_id]
            entry["tail"] = _label(tail, result, labels)
            entry["head"] = _label(head, result, labels)
        flows.append(entry)

    data: dict[str, Any] = {"max_flow_value": result.max_flow_value}
    if isinstance(result, CirculationResult):
        data.update(
            {
                "kind": "circulation",
                "feasible": result.feasible,
                "status": result.status,
                "stage": result.stage,
                "sum_of_demands": result.sum_of_demands,
                "sum_of_supplies": result.sum_of_supplies,
            }
        )
    else:
        data.update(
            {
                "kind": "max_flow",
                "source": _label(result.source, result, labels),
                "sink": _label(result.sink, result, labels),
            }
        )
    data["augmentations"] = result.augmentations
    # Sort membership so output is deterministic and easy to diff in fixtures.
    data["min_cut"] = [_label(vertex, result, labels) for vertex in sorted(result.min_cut)]
    data["flows"] = flows
    return data


def save_result(
    path: str | Path,
    result: MaxFlowResult | CirculationResult,
    problem: FlowProblem | None = None,
) -> None:
    """Persist a solver result to JSON."""
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(result_to_dict(result, problem), fh, indent=2, sort_keys=False)
