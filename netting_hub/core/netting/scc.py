"""Strongly connected components of the obligation graph (Tarjan).

The traversal keeps its own work stack of (vertex, successor iterator) frames
instead of recursing, so path length is bounded by memory rather than by the
interpreter recursion limit.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Set, Tuple

from netting_hub.core.netting.graph import ObligationGraph


def find_sccs(graph: ObligationGraph) -> List[List[str]]:
    """Return every strongly connected component with at least two members.

    Members are listed in discovery order. Only positive-amount edges connect
    vertices. Every source party is tried as a DFS root in insertion order;
    destination-only parties are reached as children but can never close a
    cycle on their own.
    """
    index_of: Dict[str, int] = {}
    lowlink: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    sccs: List[List[str]] = []
    counter = 0

    def _discover(v: str) -> Tuple[str, Iterator[str]]:
        nonlocal counter
        index_of[v] = counter
        lowlink[v] = counter
        counter += 1
        stack.append(v)
        on_stack.add(v)
        return v, iter(graph.successors(v))

    for root in graph.sources():
        if root in index_of:
            continue

        work: List[Tuple[str, Iterator[str]]] = [_discover(root)]
        while work:
            v, successors = work[-1]

            descended = False
            for w in successors:
                if w not in index_of:
                    work.append(_discover(w))
                    descended = True
                    break
                if w in on_stack:
                    lowlink[v] = min(lowlink[v], index_of[w])
            if descended:
                continue

            # All successors of v handled.
            work.pop()

            if lowlink[v] == index_of[v]:
                component: List[str] = []
                while True:
                    w = stack.pop()
                    on_stack.discard(w)
                    component.append(w)
                    if w == v:
                        break
                if len(component) > 1:
                    component.reverse()
                    sccs.append(component)

            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[v])

    return sccs
