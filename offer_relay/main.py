"""Main FastAPI application for the offer letter relay."""
from __future__ import annotations

import datetime as dt

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from offer_relay import config
from offer_relay.endpoints import offer_letters
from offer_relay.schemas import HealthResponse, ValidationErrorResponse
from offer_relay.utils.logging import configure_logging, get_logger

# === Initialization ===
configure_logging()
logger = get_logger("api")

app = FastAPI(title="Offer Letter Relay", version="1.0.0")

if config.CORS_ALLOW_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=False,
    )

# === Router registration ===
app.include_router(offer_letters.router)


def _utc_timestamp() -> str:
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# === Health check ===
@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Simple health-check endpoint used for monitoring."""
    logger.debug("Health check endpoint called")
    return HealthResponse(status="ok", timestamp=_utc_timestamp())


# === Error handlers ===
@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema violations as a 400 with a machine-readable details list."""
    details = offer_letters.validation_issues(exc.errors())
    logger.warning(
        "Rejected invalid request",
        extra={"path": request.url.path, "issues": len(details)},
    )
    body = ValidationErrorResponse(details=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Return a uniform JSON error response for any unhandled exception."""
    _ = request  # FastAPI requires this argument
    logger.exception("Unhandled exception during request processing: %s", exc)
    return offer_letters.internal_error(exc)


def run() -> None:
    """Serve the application with uvicorn using the configured bind address."""

    import uvicorn

    logger.info("Starting server", extra={"host": config.HOST, "port": config.PORT})
    uvicorn.run(app, host=config.HOST, port=config.PORT)


__all__ = ["app", "run"]
