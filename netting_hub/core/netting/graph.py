from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from netting_hub.core.netting.models import U64_MAX, Edge, Intent
from netting_hub.utils.exceptions import AmountOverflowException


class ObligationGraph:
    """Directed, token-labelled debt graph: { from_party: [Edge, ...] }.

    At most one edge exists per (from, to, token); inserting a duplicate merges
    amounts. Edges cancelled down to zero stay as records until `to_intents()`,
    but every traversal helper treats them as absent.

    Single-writer: one instance belongs to one netting run and is not safe for
    concurrent mutation.
    """

    def __init__(self) -> None:
        self.edges: Dict[str, List[Edge]] = {}
        # Every party seen as a source or destination, in first-seen order.
        self._parties: Dict[str, None] = {}

    @classmethod
    def from_intents(cls, intents: Iterable[Intent]) -> "ObligationGraph":
        graph = cls()
        for intent in intents:
            graph.add_edge(intent.sender, intent.receiver, intent.token, intent.amount)
        return graph

    def add_edge(self, from_party: str, to_party: str, token: str, amount: int) -> Edge:
        """Insert an edge or merge `amount` into the existing (from, to, token) edge."""
        self._parties.setdefault(from_party, None)
        self._parties.setdefault(to_party, None)

        existing = self.find_edge(from_party, to_party, token)
        if existing is not None:
            merged = existing.amount + amount
            if merged > U64_MAX:
                raise AmountOverflowException(
                    "Merged obligation exceeds unsigned 64-bit range",
                    details={
                        "from": from_party,
                        "to": to_party,
                        "token": token,
                        "amount": str(existing.amount),
                        "added": str(amount),
                    },
                )
            existing.amount = merged
            return existing

        edge = Edge(to=to_party, token=token, amount=amount)
        self.edges.setdefault(from_party, []).append(edge)
        return edge

    def edges_from(self, party: str) -> List[Edge]:
        return self.edges.get(party, [])

    def find_edge(self, from_party: str, to_party: str, token: str) -> Optional[Edge]:
        for edge in self.edges.get(from_party, ()):
            if edge.to == to_party and edge.token == token:
                return edge
        return None

    def successors(self, party: str) -> List[str]:
        """Distinct destinations reachable over positive-amount edges, in edge order."""
        seen: Dict[str, None] = {}
        for edge in self.edges.get(party, ()):
            if edge.amount > 0:
                seen.setdefault(edge.to, None)
        return list(seen)

    def parties(self) -> List[str]:
        return list(self._parties)

    def sources(self) -> List[str]:
        return list(self.edges)

    def __iter__(self) -> Iterator[tuple[str, Edge]]:
        for from_party, edges in self.edges.items():
            for edge in edges:
                yield from_party, edge

    def __len__(self) -> int:
        return sum(len(edges) for edges in self.edges.values())

    def to_intents(self) -> List[Intent]:
        """Residual obligations: every edge with amount > 0.

        Order is parties in insertion order, then each party's edge list.
        """
        return [
            Intent(sender=from_party, receiver=edge.to, token=edge.token, amount=edge.amount)
            for from_party, edge in self
            if edge.amount > 0
        ]
