"""Lower-bound elimination for circulation problems.

An edge ``u -> v`` with bounds ``[l, c]`` is equivalent to an edge with bounds
``[0, c - l]`` once ``l`` units are forced through it: ``u`` must send ``l``
more units than before and ``v`` has already received ``l`` of what it asked
for. The reduction therefore rewrites the edge and shifts the demand of both
endpoints, after which the problem is an ordinary circulation with demands.

All demand shifts are accumulated into a separate delta vector and applied in
one pass at the end, so no adjustment ever reads a demand that an earlier edge
has already changed. Each shift adds ``l`` at one end and removes it at the
other, so the net demand is unchanged; the balance check after the reduction
only catches floating-point rounding.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .data import FlowNetwork

logger = logging.getLogger(__name__)


@dataclass
class LowerBoundReduction:
    """Outcome of :func:`reduce_lower_bounds`.

    Attributes:
        adjusted_demands: Per-vertex demand after the lower bounds were folded out.
                          Equal to the input demands when the check failed before
                          reduction.
        deltas: Per-vertex demand shift contributed by lower bounds.
        reduced_edges: Ids of edges whose lower bound was folded out.
        sum_of_demands: Total positive demand of ``adjusted_demands``.
        sum_of_supplies: Total supply (magnitude of negative entries).
        balanced: Whether supplies and demands balance.
        stage: 'before' or 'after' when unbalanced at that point, else None.
    """

    adjusted_demands: list[float]
    deltas: list[float]
    reduced_edges: list[int] = field(default_factory=list)
    sum_of_demands: float = 0.0
    sum_of_supplies: float = 0.0
    balanced: bool = True
    stage: str | None = None


def demand_totals(demands: Sequence[float]) -> tuple[float, float]:
    """Return (sum of positive demands, sum of |negative demands|)."""
    total_demand = sum(demand for demand in demands if demand > 0)
    total_supply = -sum(demand for demand in demands if demand < 0)
    return total_demand, total_supply


def reduce_lower_bounds(
    network: FlowNetwork,
    demands: Sequence[float],
    tolerance: float = 0.0,
) -> LowerBoundReduction:
    """Fold every edge lower bound into capacity and vertex demand.

    The network's edges are rewritten in place (``capacity -= lower``,
    ``offset = lower``, ``lower = 0``, ``flow = 0``). ``demands`` is not modified.
    When the input is already unbalanced the network is left untouched.

    Args:
        network: Network to reduce. Must have one demand entry per vertex.
        demands: Per-vertex demand (positive = needs inflow).
        tolerance: Allowed difference between total supply and total demand.

    Returns:
        LowerBoundReduction with the adjusted demands and the balance verdict.
    """
    original = list(demands)
    total_demand, total_supply = demand_totals(original)
    if abs(total_demand - total_supply) > tolerance:
        logger.info(
            "Supply and demand are unbalanced before lower-bound reduction",
            extra={"sum_of_demands": total_demand, "sum_of_supplies": total_supply},
        )
        return LowerBoundReduction(
            adjusted_demands=original,
            deltas=[0.0] * len(original),
            sum_of_demands=total_demand,
            sum_of_supplies=total_supply,
            balanced=False,
            stage="before",
        )

    deltas = [0.0] * len(original)
    reduced_edges: list[int] = []
    for edge in network.edges():
        if edge.lower <= 0:
            continue
        lower = edge.lower
        deltas[edge.tail] += lower
        deltas[edge.head] -= lower
        edge.capacity -= lower
        edge.offset += lower
        edge.lower = 0.0
        edge.flow = 0.0
        reduced_edges.append(edge.index)

    adjusted = [demand + delta for demand, delta in zip(original, deltas)]
    total_demand, total_supply = demand_totals(adjusted)
    balanced = abs(total_demand - total_supply) <= tolerance

    if reduced_edges:
        logger.info(
            f"Folded lower bounds of {len(reduced_edges)} edges into vertex demands",
            extra={
                "reduced_edges": len(reduced_edges),
                "sum_of_demands": total_demand,
                "sum_of_supplies": total_supply,
            },
        )
    if not balanced:
        logger.info(
            "Supply and demand are unbalanced after lower-bound reduction",
            extra={"sum_of_demands": total_demand, "sum_of_supplies": total_supply},
        )

    return LowerBoundReduction(
        adjusted_demands=adjusted,
        deltas=deltas,
        reduced_edges=reduced_edges,
        sum_of_demands=total_demand,
        sum_of_supplies=total_supply,
        balanced=balanced,
        stage=None if balanced else "after",
    )
