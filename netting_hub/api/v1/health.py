from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter

from netting_hub.config import settings


router = APIRouter()

_START_TIME = time.time()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def best_effort_version() -> str:
    v = (os.getenv("NETTING_APP_VERSION") or os.getenv("APP_VERSION") or "").strip()
    if v:
        return v
    try:
        return version("netting-hub")
    except PackageNotFoundError:
        return "dev"


@router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "version": best_effort_version(),
        "environment": (settings.ENV or "dev").strip() or "dev",
        "netting": {
            "enabled": bool(settings.NETTING_ENABLED),
            "max_cycle_length": int(settings.NETTING_MAX_CYCLE_LENGTH),
            "max_cycles": int(settings.NETTING_MAX_CYCLES),
        },
        "uptime_seconds": int(max(0.0, time.time() - _START_TIME)),
        "timestamp": _utc_now_iso(),
    }


@router.get("/healthz")
async def healthz_check():
    return {"status": "ok"}
