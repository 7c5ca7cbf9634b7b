"""Bounded enumeration of simple cycles inside one SCC."""

from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, Iterator, List, Optional, Set

from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.models import Cycle
from netting_hub.utils.exceptions import ExplorationLimitExceeded, TimeoutException
from netting_hub.utils.validation import validate_max_cycle_length

logger = logging.getLogger(__name__)

DEFAULT_MAX_CYCLE_LENGTH = 4


def canonical_cycle(cycle: Iterable[str]) -> Cycle:
    """Rotate a cycle so the lexicographically smallest party comes first.

    Direction is preserved: A->B->C and A->C->B stay distinct.
    """
    seq = tuple(cycle)
    if not seq:
        return seq
    i = seq.index(min(seq))
    return seq[i:] + seq[:i]


def find_cycles(
    graph: ObligationGraph,
    scc: Iterable[str],
    *,
    max_cycle_length: int = DEFAULT_MAX_CYCLE_LENGTH,
    max_cycles: Optional[int] = None,
    deadline: Optional[float] = None,
    deduplicate: bool = True,
) -> List[Cycle]:
    """Enumerate simple cycles of at most `max_cycle_length` edges within `scc`.

    A depth-bounded DFS runs from every member. Each geometric cycle is found
    once per rotation; with `deduplicate` the canonical rotation is kept once,
    otherwise every rotation is returned in discovery order.

    `max_cycles` caps discovered cycles (rotations included) and raises
    ExplorationLimitExceeded when passed. `deadline` is a time.monotonic()
    value; passing it raises TimeoutException.
    """
    validate_max_cycle_length(max_cycle_length)

    members = list(dict.fromkeys(scc))
    member_set = set(members)
    adjacency: Dict[str, List[str]] = {
        v: [w for w in graph.successors(v) if w in member_set] for v in members
    }

    found: List[Cycle] = []
    seen: Set[Cycle] = set()
    discovered = 0

    for start in members:
        path: List[str] = [start]
        on_path: Set[str] = {start}
        work: List[Iterator[str]] = [iter(adjacency[start])]

        while work:
            if deadline is not None and time.monotonic() > deadline:
                raise TimeoutException(
                    "Cycle enumeration deadline exceeded",
                    details={"scc_size": len(members), "cycles_discovered": discovered},
                )

            nxt = next(work[-1], None)
            if nxt is None:
                work.pop()
                on_path.discard(path.pop())
                continue

            if nxt == start:
                discovered += 1
                if max_cycles is not None and discovered > max_cycles:
                    logger.warning(
                        "event=netting.exploration_limit scc_size=%s max_cycles=%s",
                        len(members),
                        max_cycles,
                    )
                    raise ExplorationLimitExceeded(
                        details={
                            "scc_size": len(members),
                            "max_cycles": max_cycles,
                            "max_cycle_length": max_cycle_length,
                        }
                    )
                cycle = tuple(path)
                if deduplicate:
                    cycle = canonical_cycle(cycle)
                    if cycle in seen:
                        continue
                    seen.add(cycle)
                found.append(cycle)
                continue

            if nxt in on_path:
                continue
            # Extending to `nxt` only pays off if the closing edge still fits.
            if len(path) >= max_cycle_length:
                continue

            path.append(nxt)
            on_path.add(nxt)
            work.append(iter(adjacency[nxt]))

    logger.debug(
        "event=netting.find_cycles_done scc_size=%s discovered=%s returned=%s",
        len(members),
        discovered,
        len(found),
    )
    return found
