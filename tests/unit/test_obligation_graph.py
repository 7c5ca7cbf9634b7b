import pytest

from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.models import U64_MAX, Edge, Intent
from netting_hub.utils.exceptions import AmountOverflowException, BadRequestException

from tests.helpers import as_tuples, mk_graph


def test_add_edge_merges_duplicate_triple() -> None:
    g = ObligationGraph()
    g.add_edge("A", "B", "T", 3)
    g.add_edge("A", "B", "T", 4)

    assert len(g) == 1
    assert g.edges_from("A") == [Edge(to="B", token="T", amount=7)]


def test_add_edge_keeps_tokens_and_directions_separate() -> None:
    g = ObligationGraph()
    g.add_edge("A", "B", "ETH", 1)
    g.add_edge("A", "B", "USDC", 2)
    g.add_edge("B", "A", "ETH", 3)

    assert len(g) == 3
    assert g.find_edge("A", "B", "USDC").amount == 2
    assert g.find_edge("B", "A", "ETH").amount == 3
    assert g.find_edge("B", "A", "USDC") is None


def test_zero_amount_insertion_is_noop_for_extraction() -> None:
    g = ObligationGraph()
    g.add_edge("A", "B", "ETH", 0)

    assert g.to_intents() == []
    assert g.successors("A") == []


def test_parties_include_destination_only_vertices() -> None:
    g = mk_graph([("A", "B", 5), ("B", "C", 1)])

    assert g.parties() == ["A", "B", "C"]
    assert g.sources() == ["A", "B"]
    assert g.edges_from("C") == []


def test_successors_are_distinct_and_skip_cancelled_edges() -> None:
    g = mk_graph([("A", "B", 1, "ETH"), ("A", "B", 2, "USDC"), ("A", "C", 3)])
    assert g.successors("A") == ["B", "C"]

    g.find_edge("A", "C", "ETH").amount = 0
    assert g.successors("A") == ["B"]


def test_merge_overflow_is_rejected() -> None:
    g = ObligationGraph()
    g.add_edge("A", "B", "ETH", U64_MAX)

    with pytest.raises(AmountOverflowException) as exc:
        g.add_edge("A", "B", "ETH", 1)

    assert exc.value.code == "E009"
    assert g.find_edge("A", "B", "ETH").amount == U64_MAX


def test_to_intents_order_follows_insertion() -> None:
    g = mk_graph([("B", "C", 2), ("A", "B", 1), ("B", "A", 3)])

    assert as_tuples(g.to_intents()) == [
        ("B", "C", 2, "ETH"),
        ("B", "A", 3, "ETH"),
        ("A", "B", 1, "ETH"),
    ]


@pytest.mark.parametrize("amount", [-1, U64_MAX + 1, True, 1.5])
def test_intent_rejects_amounts_outside_u64(amount) -> None:
    with pytest.raises(BadRequestException):
        Intent(sender="A", receiver="B", token="ETH", amount=amount)


def test_intent_str_matches_report_format() -> None:
    assert str(Intent(sender="A", receiver="B", token="ETH", amount=70)) == "A -> B: 70 ETH"
