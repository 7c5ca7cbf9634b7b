from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.scc import find_sccs

from tests.helpers import mk_graph


def test_acyclic_graph_has_no_sccs() -> None:
    g = mk_graph([("A", "B", 1), ("B", "C", 1), ("A", "C", 1)])
    assert find_sccs(g) == []


def test_triangle_and_pair_are_separate_components() -> None:
    g = mk_graph(
        [
            ("A", "B", 100),
            ("B", "C", 50),
            ("C", "A", 30),
            ("D", "E", 200, "USDC"),
            ("E", "D", 200, "USDC"),
        ]
    )

    assert find_sccs(g) == [["A", "B", "C"], ["D", "E"]]


def test_single_vertex_components_are_discarded() -> None:
    # Self-loop: a cycle through one vertex is still a size-1 component.
    g = mk_graph([("A", "A", 5), ("A", "B", 1)])
    assert find_sccs(g) == []


def test_destination_only_vertex_is_not_a_member() -> None:
    g = mk_graph([("A", "B", 1), ("B", "A", 1), ("B", "Z", 9)])

    sccs = find_sccs(g)
    assert len(sccs) == 1
    assert sorted(sccs[0]) == ["A", "B"]


def test_cancelled_edge_does_not_connect() -> None:
    g = mk_graph([("A", "B", 5), ("B", "A", 0)])
    assert find_sccs(g) == []


def test_components_joined_through_bridge_stay_separate() -> None:
    # {A,B} -> {C,D}: one-way bridge B->C must not merge the components.
    g = mk_graph([("A", "B", 1), ("B", "A", 1), ("B", "C", 1), ("C", "D", 1), ("D", "C", 1)])

    sccs = sorted(sorted(c) for c in find_sccs(g))
    assert sccs == [["A", "B"], ["C", "D"]]


def test_deep_ring_does_not_hit_recursion_limit() -> None:
    n = 20_000
    g = ObligationGraph()
    for i in range(n):
        g.add_edge(f"p{i}", f"p{(i + 1) % n}", "ETH", 1)

    sccs = find_sccs(g)
    assert len(sccs) == 1
    assert len(sccs[0]) == n


def test_deep_chain_without_cycle() -> None:
    n = 20_000
    g = ObligationGraph()
    for i in range(n):
        g.add_edge(f"p{i}", f"p{i + 1}", "ETH", 1)

    assert find_sccs(g) == []
