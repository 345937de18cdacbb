from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from wallet_proxy.api.router import api_router
from wallet_proxy.api.routes import health
from wallet_proxy.config import settings
from wallet_proxy.core.envelope import error_response
from wallet_proxy.core.gateway import UpstreamGateway
from wallet_proxy.utils.exceptions import ProxyException, ValidationError
from wallet_proxy.utils.metrics import VALIDATION_FAILURES_TOTAL
from wallet_proxy.utils.observability import new_request_id, request_id_var, setup_logging, validate_request_id


logger = logging.getLogger(__name__)


def _route_label(request: Request) -> str:
    # Matched routes use the route template; anything else collapses to one label.
    route_path = getattr(request.scope.get("route"), "path", None)
    if isinstance(route_path, str) and route_path:
        return route_path
    return "__unmatched__"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)

    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT_SECONDS))
    app.state.gateway = UpstreamGateway(
        client,
        base_url=settings.YAYA_BASE_URL,
        api_key=settings.YAYA_API_KEY,
        api_secret=settings.YAYA_API_SECRET.get_secret_value(),
        timeout_seconds=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
    logger.info(
        "lifespan.started env=%s upstream=%s default_limit=%d rate_limit=%d/%ds cors=%s",
        settings.ENV,
        settings.YAYA_BASE_URL or "<unset>",
        settings.DEFAULT_LIMIT,
        settings.RATE_LIMIT_REQUESTS_PER_WINDOW,
        settings.RATE_LIMIT_WINDOW_SECONDS,
        ",".join(settings.cors_origins),
    )

    try:
        yield
    finally:
        await client.aclose()
        app.state.gateway = None


def _internal_error_response(request: Request):
    logger.exception("request.unhandled path=%s", request.url.path)
    return error_response(ProxyException(), default_limit=settings.DEFAULT_LIMIT)


app = FastAPI(title="YaYa Wallet Transactions Proxy", debug=settings.DEBUG, lifespan=lifespan)


# Registered before CORS so it sits inside it: the 500 envelope still gets the
# CORS and request-id headers.
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        return _internal_error_response(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset", "Retry-After"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming_rid = request.headers.get("X-Request-ID")
    rid = validate_request_id(incoming_rid) or new_request_id()
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
        from wallet_proxy.utils.metrics import HTTP_REQUESTS_TOTAL, HTTP_REQUEST_DURATION_SECONDS

        path_label = _route_label(request)
        method = request.method
        status = str(getattr(response, "status_code", 0))

        HTTP_REQUESTS_TOTAL.labels(method=method, path=path_label, status=status).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=method, path=path_label).observe(elapsed_s)
    except Exception:
        logger.debug("metrics.http_emit_failed", exc_info=True)

    return response


@app.exception_handler(ProxyException)
async def proxy_exception_handler(request: Request, exc: ProxyException):
    if isinstance(exc, ValidationError):
        VALIDATION_FAILURES_TOTAL.labels(route=_route_label(request)).inc()
    logger.info(
        "request.failed path=%s code=%s status=%s message=%s",
        request.url.path,
        exc.code,
        exc.status_code,
        exc.message,
    )
    return error_response(exc, default_limit=settings.DEFAULT_LIMIT)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    first = next(iter(exc.errors()), None) or {}
    loc = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "body"))
    message = f"{loc}: {first.get('msg')}" if loc else (first.get("msg") or None)
    return await proxy_exception_handler(request, ValidationError(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Only reached for failures raised by the outer middlewares.
    return _internal_error_response(request)


app.include_router(api_router, prefix="/api")
app.include_router(health.router, tags=["Health"])


if getattr(settings, "METRICS_ENABLED", True):

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        from wallet_proxy.utils.metrics import render_metrics

        payload, content_type = render_metrics()
        return Response(content=payload, media_type=content_type)
