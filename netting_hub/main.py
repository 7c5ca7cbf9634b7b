from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from netting_hub.api.router import api_router
from netting_hub.api.v1 import health
from netting_hub.config import settings
from netting_hub.utils.error_codes import ERROR_MESSAGES, ErrorCode
from netting_hub.utils.exceptions import NettingException
from netting_hub.utils.metrics import HTTP_REQUESTS_TOTAL, HTTP_REQUEST_DURATION_SECONDS, render_metrics
from netting_hub.utils.request_id import request_id_var, resolve_request_id


logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(
        "event=app.startup env=%s max_cycle_length=%s max_cycles=%s",
        settings.ENV,
        settings.NETTING_MAX_CYCLE_LENGTH,
        settings.NETTING_MAX_CYCLES,
    )
    yield
    logger.info("event=app.shutdown")


app = FastAPI(title="Netting Hub", debug=settings.DEBUG, lifespan=lifespan)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = resolve_request_id(request.headers.get("X-Request-ID"))
    token = request_id_var.set(rid)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)

    response.headers["X-Request-ID"] = rid
    return response


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    if not getattr(settings, "METRICS_ENABLED", True):
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed_s = time.perf_counter() - start

    try:
        route = request.scope.get("route")
        # Keep Prometheus label cardinality low: route template or a fixed label.
        route_path = getattr(route, "path", None)
        if isinstance(route_path, str) and route_path:
            path_label = route_path
        else:
            path_label = "__unmatched__"
        method = request.method
        status = str(getattr(response, "status_code", 0))

        HTTP_REQUESTS_TOTAL.labels(method=method, path=path_label, status=status).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=method, path=path_label).observe(elapsed_s)
    except Exception:
        logger.debug("event=http.metrics_failed", exc_info=True)

    return response


@app.exception_handler(NettingException)
async def netting_exception_handler(request: Request, exc: NettingException):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    # Unify FastAPI/Pydantic validation errors into the error envelope (E009).
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": ErrorCode.E009.value,
                "message": ERROR_MESSAGES[ErrorCode.E009],
                "details": {"errors": exc.errors()},
            }
        },
    )


app.include_router(api_router, prefix="/api/v1")
app.include_router(health.router)


if getattr(settings, "METRICS_ENABLED", True):

    @app.get("/metrics")
    async def metrics():
        payload, content_type = render_metrics()
        return Response(content=payload, media_type=content_type)
