"""
Consent Intake — FastAPI Server
================================

Receives consent-form submissions and stores each accepted one as a JSON
record in blob storage.

Endpoints:
    POST /api/consent       Validate and persist a consent submission
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Configuration (environment or .env):
    BLOB_READ_WRITE_TOKEN   Vercel Blob token; without it records go to CONSENT_STORAGE_DIR
    CONSENT_LOG_LEVEL       Root log level (default INFO)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from consent_intake import __version__
from consent_intake.config import load_settings
from consent_intake.exceptions import ConsentError, SubmissionValidationError
from consent_intake.models import ConsentPayload
from consent_intake.request_meta import client_info
from consent_intake.service import ConsentService
from consent_intake.storage import build_store

logger = logging.getLogger(__name__)

MSG_BAD_REQUEST = "Solicitud inválida."
MSG_SERVER_ERROR = "Error de servidor."


# ─── Application Lifespan (build the store once) ────────────────────

_service: ConsentService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings, configure logging, and open the blob store."""
    global _service  # noqa: PLW0603
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = build_store(settings)
    logger.info("Consent intake starting (storage=%s)", store.name)
    _service = ConsentService(store)
    yield
    store.close()
    _service = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Consent Intake API",
    description=(
        "Validates consent-form submissions (name, company RUT, email, "
        "terms acceptance) and stores each accepted one as a private JSON "
        "record in blob storage."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Response Schemas ────────────────────────────────────────────────


class SubmitResponse(BaseModel):
    ok: bool = True
    id: str

    model_config = {"json_schema_extra": {"example": {
        "ok": True,
        "id": "submissions/1705314600000-3f2a9c1e7b8d4e6fa0b1c2d3e4f5a6b7.json",
    }}}


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str

    model_config = {"json_schema_extra": {"example": {
        "ok": False,
        "error": "RUT inválido.",
    }}}


class HealthResponse(BaseModel):
    status: str
    version: str
    storage: str


# ─── Error Handlers ──────────────────────────────────────────────────


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.exception_handler(SubmissionValidationError)
async def submission_rejected_handler(request: Request, exc: SubmissionValidationError):
    logger.info("Submission rejected on %s: %s", request.url.path, exc.code)
    return _error(exc.http_status, exc.message)


@app.exception_handler(ConsentError)
async def consent_error_handler(request: Request, exc: ConsentError):
    """Storage and other internal failures — never leak the detail."""
    logger.error(
        "Consent error on %s [%s]: %s",
        request.url.path,
        exc.code,
        exc.message,
        exc_info=exc,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_SERVER_ERROR)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body is not JSON or has fields of the wrong type."""
    problems = [(".".join(str(part) for part in e["loc"]), e["type"]) for e in exc.errors()]
    logger.info("Malformed request on %s: %s", request.url.path, problems)
    return _error(status.HTTP_400_BAD_REQUEST, MSG_BAD_REQUEST)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_SERVER_ERROR)


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_service() -> ConsentService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return _service


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/api/consent",
    summary="Submit a consent form",
    tags=["Consent"],
    status_code=status.HTTP_201_CREATED,
    response_model=SubmitResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Submission rejected"},
        500: {"model": ErrorResponse, "description": "Storage or server failure"},
        503: {"model": ErrorResponse, "description": "Service not yet initialised"},
    },
)
def submit_consent(payload: ConsentPayload, request: Request) -> SubmitResponse:
    """Validate a consent submission and store it.

    Checks run in this order and stop at the first failure:
    - **aceptaTerminos** must be true
    - **nombre**, **rutEmpresa**, **email** must be non-empty after trimming
    - **email** must look like an address
    - **rutEmpresa** must carry a correct check digit

    The stored record keeps the RUT normalized (no dots or hyphen, uppercase)
    along with the client IP and user agent.
    """
    if _service is None:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, MSG_SERVER_ERROR)
    record_id = _service.submit(payload, client_info(request.headers))
    return SubmitResponse(id=record_id)


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Service not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and the active storage backend."""
    service = _get_service()
    return HealthResponse(
        status="healthy",
        version=__version__,
        storage=service.store.name,
    )
