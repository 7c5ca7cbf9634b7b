import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from netting_hub.config import Settings, get_settings
from netting_hub.core.netting.calculator import (
    apply_netting,
    calculate_netting_amount,
    tokens_on_cycle,
)
from netting_hub.core.netting.cycles import DEFAULT_MAX_CYCLE_LENGTH, find_cycles
from netting_hub.core.netting.graph import ObligationGraph
from netting_hub.core.netting.models import Cycle, Intent, NettedCycle
from netting_hub.core.netting.scc import find_sccs
from netting_hub.utils.exceptions import BadRequestException, NettingException
from netting_hub.utils.metrics import NETTING_CANCELLED_AMOUNT_TOTAL, NETTING_EVENTS_TOTAL
from netting_hub.utils.observability import log_duration
from netting_hub.utils.validation import validate_max_cycle_length

logger = logging.getLogger(__name__)


@dataclass
class NettingResult:
    intents: List[Intent]
    sccs: int = 0
    cycles_found: int = 0
    netted: List[NettedCycle] = field(default_factory=list)

    @property
    def cycles_netted(self) -> int:
        return len({n.cycle for n in self.netted})

    @property
    def cancelled_by_token(self) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for n in self.netted:
            totals[n.token] = totals.get(n.token, 0) + n.cancelled
        return totals


def _deadline_from_timeout(timeout_ms: Optional[int]) -> Optional[float]:
    if not timeout_ms or timeout_ms <= 0:
        return None
    return time.monotonic() + timeout_ms / 1000.0


def net_graph(
    graph: ObligationGraph,
    *,
    max_cycle_length: int = DEFAULT_MAX_CYCLE_LENGTH,
    max_cycles: Optional[int] = None,
    deadline: Optional[float] = None,
    deduplicate: bool = True,
) -> NettingResult:
    """Net every discovered cycle of `graph` in place and extract the residual intents.

    Stages run once, in order: SCCs, cycles per SCC, tokens per cycle,
    compute-and-apply per token, extract. Nothing is rolled back: an amount
    subtracted for one cycle is gone for every later cycle.
    """
    validate_max_cycle_length(max_cycle_length)

    sccs = find_sccs(graph)
    result = NettingResult(intents=[], sccs=len(sccs))

    for scc in sccs:
        cycles = find_cycles(
            graph,
            scc,
            max_cycle_length=max_cycle_length,
            max_cycles=max_cycles,
            deadline=deadline,
            deduplicate=deduplicate,
        )
        result.cycles_found += len(cycles)

        for cycle in cycles:
            for token in tokens_on_cycle(graph, cycle):
                amount = calculate_netting_amount(graph, cycle, token)
                if not amount:
                    continue
                apply_netting(graph, cycle, token, amount)
                result.netted.append(NettedCycle(cycle=cycle, token=token, amount=amount))

    result.intents = graph.to_intents()
    return result


def process_netting(
    intents: Iterable[Intent],
    *,
    max_cycle_length: int = DEFAULT_MAX_CYCLE_LENGTH,
    max_cycles: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    deduplicate: bool = True,
) -> List[Intent]:
    """Build a graph from `intents`, net its cycles and return the residual intents."""
    graph = ObligationGraph.from_intents(intents)
    return net_graph(
        graph,
        max_cycle_length=max_cycle_length,
        max_cycles=max_cycles,
        deadline=_deadline_from_timeout(timeout_ms),
        deduplicate=deduplicate,
    ).intents


def _emit(event: str, result: str) -> None:
    try:
        NETTING_EVENTS_TOTAL.labels(event=event, result=result).inc()
    except Exception:
        logger.debug(
            "event=netting.metrics_inc_failed metric=NETTING_EVENTS_TOTAL label=%s.%s",
            event,
            result,
            exc_info=True,
        )


class NettingService:
    """Configured entry point used by the HTTP API and the CLI."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def _check_enabled(self, intents: List[Intent]) -> None:
        if not bool(self.settings.NETTING_ENABLED):
            raise BadRequestException("Netting is disabled")
        limit = int(self.settings.NETTING_MAX_INTENTS)
        if len(intents) > limit:
            raise BadRequestException(
                "Too many intents",
                details={"intents": len(intents), "limit": limit},
            )

    def _max_cycle_length(self, override: Optional[int]) -> int:
        if override is None:
            return int(self.settings.NETTING_MAX_CYCLE_LENGTH)
        return validate_max_cycle_length(override)

    def run(self, intents: Iterable[Intent], *, max_cycle_length: Optional[int] = None) -> NettingResult:
        intents = list(intents)
        _emit("run", "start")

        try:
            self._check_enabled(intents)
            max_len = self._max_cycle_length(max_cycle_length)
            logger.info(
                "event=netting.run intents=%s max_cycle_length=%s dedupe=%s",
                len(intents),
                max_len,
                self.settings.NETTING_DEDUPLICATE_ROTATIONS,
            )
            with log_duration(logger, "netting.run", intents=len(intents)):
                graph = ObligationGraph.from_intents(intents)
                result = net_graph(
                    graph,
                    max_cycle_length=max_len,
                    max_cycles=int(self.settings.NETTING_MAX_CYCLES),
                    deadline=_deadline_from_timeout(int(self.settings.NETTING_TIMEOUT_MS)),
                    deduplicate=bool(self.settings.NETTING_DEDUPLICATE_ROTATIONS),
                )
        except NettingException as e:
            logger.error("event=netting.failed code=%s error=%s", e.code, e.message)
            _emit("run", e.code)
            raise

        for token, cancelled in result.cancelled_by_token.items():
            try:
                NETTING_CANCELLED_AMOUNT_TOTAL.labels(token=token).inc(cancelled)
            except Exception:
                logger.debug(
                    "event=netting.metrics_inc_failed metric=NETTING_CANCELLED_AMOUNT_TOTAL token=%s",
                    token,
                    exc_info=True,
                )

        logger.info(
            "event=netting.done sccs=%s cycles_found=%s cycles_netted=%s residual=%s",
            result.sccs,
            result.cycles_found,
            result.cycles_netted,
            len(result.intents),
        )
        _emit("run", "success")
        return result

    def find_cycles(
        self, intents: Iterable[Intent], *, max_cycle_length: Optional[int] = None
    ) -> List[List[Cycle]]:
        """Cycles per SCC, without applying any netting."""
        intents = list(intents)
        self._check_enabled(intents)
        max_len = self._max_cycle_length(max_cycle_length)

        graph = ObligationGraph.from_intents(intents)
        deadline = _deadline_from_timeout(int(self.settings.NETTING_TIMEOUT_MS))
        with log_duration(logger, "netting.find_cycles", intents=len(intents)):
            out = [
                find_cycles(
                    graph,
                    scc,
                    max_cycle_length=max_len,
                    max_cycles=int(self.settings.NETTING_MAX_CYCLES),
                    deadline=deadline,
                    deduplicate=bool(self.settings.NETTING_DEDUPLICATE_ROTATIONS),
                )
                for scc in find_sccs(graph)
            ]
        _emit("find_cycles", "success")
        return out
