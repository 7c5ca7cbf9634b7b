from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.models import Cycle, Edge
from netting_hub.utils.exceptions import NettingInvariantViolation


def cycle_pairs(cycle: Cycle) -> Iterator[Tuple[str, str]]:
    """Consecutive (from, to) pairs of a cycle, wraparound included."""
    n = len(cycle)
    for i in range(n):
        yield cycle[i], cycle[(i + 1) % n]


def tokens_on_cycle(graph: ObligationGraph, cycle: Cycle) -> List[str]:
    """Distinct tokens on positive edges between consecutive cycle pairs, first-seen order."""
    tokens: Dict[str, None] = {}
    for from_party, to_party in cycle_pairs(cycle):
        for edge in graph.edges_from(from_party):
            if edge.to == to_party and edge.amount > 0:
                tokens.setdefault(edge.token, None)
    return list(tokens)


def calculate_netting_amount(graph: ObligationGraph, cycle: Cycle, token: str) -> Optional[int]:
    """Largest amount of `token` that can be cancelled around `cycle`.

    Returns None when any pair lacks a positive `token` edge: the cycle is
    not nettable for that token.
    """
    if not cycle:
        return None

    amount: Optional[int] = None
    for from_party, to_party in cycle_pairs(cycle):
        edge = graph.find_edge(from_party, to_party, token)
        if edge is None or edge.amount <= 0:
            return None
        if amount is None or edge.amount < amount:
            amount = edge.amount
    return amount


def apply_netting(graph: ObligationGraph, cycle: Cycle, token: str, amount: int) -> None:
    """Subtract `amount` of `token` from every edge of `cycle`.

    All edges are checked before any is touched, so a violation leaves the
    graph unchanged.
    """
    if amount < 0:
        raise NettingInvariantViolation(
            "Negative netting amount",
            details={"invariant": "NON_NEGATIVE_NETTING", "cycle": list(cycle), "token": token, "amount": amount},
        )

    edges: List[Edge] = []
    for from_party, to_party in cycle_pairs(cycle):
        edge = graph.find_edge(from_party, to_party, token)
        if edge is None:
            raise NettingInvariantViolation(
                "Cycle edge missing for token",
                details={
                    "invariant": "CYCLE_EDGE_PRESENT",
                    "cycle": list(cycle),
                    "token": token,
                    "from": from_party,
                    "to": to_party,
                },
            )
        if edge.amount < amount:
            raise NettingInvariantViolation(
                "Netting amount exceeds edge amount",
                details={
                    "invariant": "NO_UNDERFLOW",
                    "cycle": list(cycle),
                    "token": token,
                    "from": from_party,
                    "to": to_party,
                    "edge_amount": str(edge.amount),
                    "amount": str(amount),
                },
            )
        edges.append(edge)

    for edge in edges:
        edge.amount -= amount
