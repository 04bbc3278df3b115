"""
FastAPI application for i18nmate.

This is the HTTP API that the translation management frontend talks to.
Every error response uses the same envelope:

    {"data": null, "error": {"code": 404, "message": "...", "details": {...}}}
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from i18nmate.auth import AuthContext, get_storage, require_project_owner
from i18nmate.config import get_settings
from i18nmate.core.app_config import load_app_config
from i18nmate.core.errors import ApiError, LocaleMessages
from i18nmate.core.models import UpdateSource, UpdateTranslationRequest
from i18nmate.core.validation import is_valid_locale, normalize_locale
from i18nmate.export import TranslationExporter
from i18nmate.integrations.sentry import capture_exception, init_sentry
from i18nmate.keys.views import (
    KeysViewParams,
    KeyTranslationsViewParams,
    fetch_default_view,
    fetch_per_language_view,
    parse_view_params,
)
from i18nmate.storage import TranslationStorage, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    if init_sentry():
        logger.info("Sentry error tracking enabled")

    app.state.storage = create_local_storage()

    logger.info(f"i18nmate API starting in {settings.environment} mode")

    yield

    logger.info("i18nmate API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="i18nmate API",
    description="API for managing translation keys and exporting locale files",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"] if part not in ("query", "body", "path"))
    error = ApiError(400, first["msg"], {"constraint": "validation", "field": field})
    return JSONResponse(status_code=400, content=error.to_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    capture_exception(exc, path=request.url.path)
    error = ApiError(500, "Internal server error")
    return JSONResponse(status_code=500, content=error.to_body())


# =============================================================================
# Request Models
# =============================================================================


class UpdateValueRequest(BaseModel):
    value: str | None = None
    # Timestamp of the row the client edited, for conflict detection
    updated_at: datetime | None = None


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "i18nmate-api"}


@app.get("/app-config")
async def get_app_config(storage: TranslationStorage = Depends(get_storage)):
    """Public feature gates. Closed if the settings can't be read."""
    config = await load_app_config(storage.get_public_app_config)
    return config.model_dump()


# =============================================================================
# Export
# =============================================================================


@app.api_route("/export-translations", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def export_translations(
    request: Request,
    storage: TranslationStorage = Depends(get_storage),
):
    """Download every locale of a project as a ZIP of JSON files."""
    exporter = TranslationExporter(storage)
    result = await exporter.export(
        method=request.method,
        project_id=request.query_params.get("project_id"),
        authorization=request.headers.get("authorization"),
    )
    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={"Content-Disposition": result.content_disposition},
    )


# =============================================================================
# Keys
# =============================================================================


@app.get("/projects/{project_id}/keys")
async def list_keys(
    project_id: str,
    limit: int | None = Query(default=None),
    offset: int = Query(default=0),
    search: str | None = Query(default=None),
    missing_only: bool = Query(default=False),
    ctx: AuthContext = Depends(require_project_owner),
    storage: TranslationStorage = Depends(get_storage),
):
    """Keys with their default-locale value and missing count."""
    params = parse_view_params(
        KeysViewParams,
        project_id=project_id,
        offset=offset,
        search=search,
        missing_only=missing_only,
        **({"limit": limit} if limit is not None else {}),
    )
    page = await fetch_default_view(storage, ctx.user_id, params)
    return page.model_dump(mode="json")


@app.get("/projects/{project_id}/locales/{locale}/keys")
async def list_keys_for_locale(
    project_id: str,
    locale: str,
    limit: int | None = Query(default=None),
    offset: int = Query(default=0),
    search: str | None = Query(default=None),
    missing_only: bool = Query(default=False),
    ctx: AuthContext = Depends(require_project_owner),
    storage: TranslationStorage = Depends(get_storage),
):
    """Keys with their value in one locale."""
    params = parse_view_params(
        KeyTranslationsViewParams,
        project_id=project_id,
        locale=locale,
        offset=offset,
        search=search,
        missing_only=missing_only,
        **({"limit": limit} if limit is not None else {}),
    )
    page = await fetch_per_language_view(storage, ctx.user_id, params)
    return page.model_dump(mode="json")


@app.patch("/projects/{project_id}/keys/{key_id}/translations/{locale}")
async def update_translation(
    project_id: str,
    key_id: str,
    locale: str,
    body: UpdateValueRequest,
    ctx: AuthContext = Depends(require_project_owner),
    storage: TranslationStorage = Depends(get_storage),
):
    """Set (or clear, with an empty value) one translation."""
    code = normalize_locale(locale)
    if not is_valid_locale(code):
        raise ApiError(400, LocaleMessages.INVALID_LOCALE, {"constraint": "validation", "field": "locale"})

    translation = await storage.update_translation(
        UpdateTranslationRequest(
            project_id=project_id,
            key_id=key_id,
            locale=code,
            value=body.value,
            is_machine_translated=False,
            updated_source=UpdateSource.USER,
            updated_by_user_id=ctx.user_id,
            updated_at=body.updated_at,
        ),
        ctx.user_id,
    )
    return {"data": translation.model_dump(mode="json"), "error": None}


# =============================================================================
# Translation Jobs
# =============================================================================


@app.get("/projects/{project_id}/translation-jobs/active")
async def get_active_job(
    project_id: str,
    ctx: AuthContext = Depends(require_project_owner),
    storage: TranslationStorage = Depends(get_storage),
):
    """The project's pending or running job, or null."""
    job = await storage.get_active_job(project_id, ctx.user_id)
    return {"data": job.model_dump(mode="json") if job else None, "error": None}


@app.post("/projects/{project_id}/translation-jobs/{job_id}/cancel")
async def cancel_job(
    project_id: str,
    job_id: str,
    ctx: AuthContext = Depends(require_project_owner),
    storage: TranslationStorage = Depends(get_storage),
):
    """Cancel a pending or running job."""
    job = await storage.cancel_job(project_id, ctx.user_id, job_id)
    logger.info(f"User {ctx.user_id} cancelled job {job_id}")
    return {"data": job.model_dump(mode="json"), "error": None}
