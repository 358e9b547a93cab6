from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from challenge_generator.config import settings
from challenge_generator.logging_config import setup_logging
from challenge_generator.middleware.logging import CORRELATION_HEADER, LoggingMiddleware
from challenge_generator.middleware.rate_limit import limiter
from challenge_generator.routers import challenges, models
from challenge_generator.schemas.challenge import HealthResponse
from challenge_generator.services.challenge_service import build_challenge_generator

setup_logging()
logger = structlog.get_logger()

REQUIRED_FIELDS = ("prompt", "language", "level")
MISSING_FIELDS_MESSAGE = "Missing required fields: prompt, language, and level are required"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared generator before serving; close its HTTP client after."""
    # SchemaLoadError propagates and aborts startup
    generator = build_challenge_generator(settings)
    app.state.challenge_generator = generator
    logger.info("service_started", service=settings.service_name)
    yield
    await generator.client.aclose()
    logger.info("service_stopped", service=settings.service_name)


app = FastAPI(
    title="AI Code Challenge Generator",
    description="Generates programming challenges with a locally hosted LLM",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request logging / correlation IDs
app.add_middleware(LoggingMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(challenges.router, prefix="/api", tags=["challenges"])
app.include_router(models.router, prefix="/api", tags=["models"])


def _is_missing_required(error: dict) -> bool:
    loc = error.get("loc", ())
    if loc == ("body",):
        return error.get("type") == "missing"
    return (
        len(loc) == 2
        and loc[1] in REQUIRED_FIELDS
        and (error.get("type") in ("missing", "string_too_short") or error.get("input") is None)
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    """Reject malformed bodies with the API's ``{success, error}`` envelope."""
    errors = exc.errors()
    if any(_is_missing_required(error) for error in errors):
        message = MISSING_FIELDS_MESSAGE
    else:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
            for error in errors
        )
        message = f"Invalid request: {details}"

    logger.info("request_rejected", path=request.url.path, error_count=len(errors))
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def add_correlation_id_to_errors(request: Request, exc: Exception):
    """
    Return a generic 500 that still carries the correlation ID.

    Unhandled exceptions bypass LoggingMiddleware's header injection, so the
    ID is read back from the structlog context.
    """
    correlation_id = structlog.contextvars.get_contextvars().get("correlation_id")
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    headers = {CORRELATION_HEADER: correlation_id} if correlation_id else None
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
        headers=headers,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        service=settings.service_name,
    )
