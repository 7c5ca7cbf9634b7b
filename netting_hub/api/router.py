from fastapi import APIRouter, Depends

from netting_hub.api import deps
from netting_hub.api.v1 import health, netting

api_router = APIRouter()

_http_deps = [Depends(deps.rate_limit)]

api_router.include_router(netting.router, prefix="/netting", tags=["Netting"], dependencies=_http_deps)
api_router.include_router(health.router, tags=["Health"])
