"""Compact graph literals shared by the test modules."""
from typing import Iterable

from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.models import Intent


def mk_intents(edges: Iterable[tuple]) -> list[Intent]:
    """Build intents from (sender, receiver, amount[, token]) tuples.

    Token defaults to "ETH".
    """
    out = []
    for edge in edges:
        if len(edge) == 3:
            sender, receiver, amount = edge
            token = "ETH"
        else:
            sender, receiver, amount, token = edge
        out.append(Intent(sender=sender, receiver=receiver, token=token, amount=amount))
    return out


def mk_graph(edges: Iterable[tuple]) -> ObligationGraph:
    return ObligationGraph.from_intents(mk_intents(edges))


def as_tuples(intents: Iterable[Intent]) -> list[tuple]:
    return [(i.sender, i.receiver, i.amount, i.token) for i in intents]


def complete_digraph(parties: list[str], amount: int = 10, token: str = "ETH") -> list[tuple]:
    return [(a, b, amount, token) for a in parties for b in parties if a != b]
