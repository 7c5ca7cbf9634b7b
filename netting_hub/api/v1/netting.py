from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from netting_hub.config import Settings, get_settings
from netting_hub.core.netting.service import NettingService
from netting_hub.schemas.common import ErrorEnvelope
from netting_hub.schemas.netting import (
    IntentSchema,
    NettedCycleSchema,
    NettingCyclesResponse,
    NettingRequest,
    NettingResponse,
    NettingStats,
)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    422: {"model": ErrorEnvelope},
    429: {"model": ErrorEnvelope},
    504: {"model": ErrorEnvelope},
}


@router.post("", response_model=NettingResponse, responses=_ERROR_RESPONSES)
async def run_netting(
    body: NettingRequest,
    app_settings: Settings = Depends(get_settings),
):
    service = NettingService(app_settings)
    intents = [i.to_intent() for i in body.intents]
    # CPU-bound; keep the event loop free.
    result = await run_in_threadpool(service.run, intents, max_cycle_length=body.max_cycle_length)
    return NettingResponse(
        intents=[IntentSchema.from_intent(i) for i in result.intents],
        stats=NettingStats(
            sccs=result.sccs,
            cycles_found=result.cycles_found,
            cycles_netted=result.cycles_netted,
        ),
        netted=[NettedCycleSchema(**n.to_dict()) for n in result.netted],
        cancelled=result.cancelled_by_token,
    )


@router.post("/cycles", response_model=NettingCyclesResponse, responses=_ERROR_RESPONSES)
async def list_cycles(
    body: NettingRequest,
    app_settings: Settings = Depends(get_settings),
):
    service = NettingService(app_settings)
    intents = [i.to_intent() for i in body.intents]
    per_scc = await run_in_threadpool(service.find_cycles, intents, max_cycle_length=body.max_cycle_length)
    return {"sccs": [[list(c) for c in cycles] for cycles in per_scc]}
