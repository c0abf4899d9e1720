import logging
import logging.config
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitedash.config import get_settings
from sitedash.errors import SiteDataError
from sitedash.routers.health import router as health_router
from sitedash.routers.rules import router as rules_router
from sitedash.routers.sites import limiter, router as sites_router

settings = get_settings()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level.upper(), "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Dashboard Data Service",
    description="CRUD over YAML site records plus a generated sites.json index.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": error, **extra}
    )


@app.exception_handler(SiteDataError)
async def site_data_error_handler(request: Request, exc: SiteDataError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, "%s %s failed: %s", request.method, request.url.path, exc)
    return _error(exc.status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _error(400, f"Invalid request: {problems}")


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _error(429, f"Rate limit exceeded: {exc.detail}")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, "Not Found", message=f"Path {request.url.path} does not exist")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    extra = {}
    if settings.app_env == "development":
        extra["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return _error(500, str(exc) or "Internal Server Error", **extra)


def _too_large() -> JSONResponse:
    return _error(413, f"Request body too large. Maximum size is {settings.body_limit}.")


class BodySizeLimitMiddleware:
    """Reject request bodies above BODY_LIMIT by counting the bytes received.

    The body is buffered and replayed to the app, so chunked uploads without a
    ``Content-Length`` header are held to the same limit.
    """

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.body_limit_bytes
        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            await _too_large()(scope, receive, send)
            return

        messages = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await _too_large()(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay():
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)


app.add_middleware(BodySizeLimitMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        extra={"client_ip": request.client.host if request.client else None},
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(sites_router)
app.include_router(rules_router)
