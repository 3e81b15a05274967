# recipe_ingest/app/routers/ingest.py
from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from recipe_ingest.app.deps import get_ingest_service
from recipe_ingest.app.domain.models import Recipe, RecipeSource
from recipe_ingest.app.schemas.ingest import (
    ErrorDetail,
    ImageIngestRequest,
    IngestRequest,
    IngestResponse,
    PreviewRequest,
    RecipeResponse,
)
from recipe_ingest.services.errors import (
    FetchError,
    MalformedOutputError,
    ModelCallError,
    RateLimitedError,
    ServiceError,
)
from recipe_ingest.services.ids import detect_platform
from recipe_ingest.services.ingest import IngestService
from recipe_ingest.services.types import SourceReference

log = logging.getLogger("ingest")
router = APIRouter(prefix="/api", tags=["ingest"])


def status_for_error(error: ServiceError) -> int:
    if isinstance(error, FetchError):
        return 400
    if isinstance(error, MalformedOutputError):
        return 422
    if isinstance(error, RateLimitedError):
        return 429
    if isinstance(error, ModelCallError):
        return 502
    return 500


def http_error(error: ServiceError) -> HTTPException:
    detail = ErrorDetail(kind=error.kind, message=error.public_message)
    return HTTPException(status_code=status_for_error(error), detail=detail.model_dump())


def _saved_message(source: RecipeSource) -> str:
    if source is RecipeSource.IMAGE_SCAN:
        return "Recipe extracted from image and saved!"
    return f"Recipe extracted from {source.value} and saved!"


async def _run_ingest(
    service: IngestService,
    reference: SourceReference,
    owner_id: str,
) -> IngestResponse:
    t0 = time.time()
    target = reference.url or "<image>"
    log.info("ingest.start source=%s url=%s owner=%s", reference.source.value, target, owner_id)
    try:
        recipe: Recipe = await run_in_threadpool(service.ingest, reference, owner_id)
    except MalformedOutputError as exc:
        dt = time.time() - t0
        log.warning(
            "ingest.malformed source=%s url=%s dt=%.2fs error=%s snippet=%r",
            reference.source.value, target, dt, exc, exc.snippet,
        )
        raise http_error(exc) from exc
    except ServiceError as exc:
        dt = time.time() - t0
        log.warning(
            "ingest.fail source=%s url=%s dt=%.2fs kind=%s error=%s",
            reference.source.value, target, dt, exc.kind, exc,
        )
        raise http_error(exc) from exc
    except Exception as exc:
        dt = time.time() - t0
        log.exception("ingest.error source=%s url=%s dt=%.2fs", reference.source.value, target, dt)
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(kind="internal_error", message="Recipe extraction failed").model_dump(),
        ) from exc

    dt = time.time() - t0
    log.info("ingest.ok source=%s url=%s recipe=%s dt=%.2fs", reference.source.value, target, recipe.id, dt)
    return IngestResponse(
        recipe=RecipeResponse.from_recipe(recipe),
        message=_saved_message(reference.source),
    )


@router.post("/tiktok/auto-extract", response_model=IngestResponse)
async def extract_tiktok(
    body: IngestRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reference = SourceReference.from_url(RecipeSource.TIKTOK, body.url)
    return await _run_ingest(service, reference, body.userId)


@router.post("/instagram/auto-extract", response_model=IngestResponse)
async def extract_instagram(
    body: IngestRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reference = SourceReference.from_url(RecipeSource.INSTAGRAM, body.url)
    return await _run_ingest(service, reference, body.userId)


@router.post("/website/auto-extract", response_model=IngestResponse)
async def extract_website(
    body: IngestRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reference = SourceReference.from_url(RecipeSource.WEBSITE, body.url)
    return await _run_ingest(service, reference, body.userId)


@router.post("/auto-extract", response_model=IngestResponse)
async def extract_any_url(
    body: IngestRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reference = SourceReference.from_url(detect_platform(body.url.strip()), body.url)
    return await _run_ingest(service, reference, body.userId)


@router.post("/image/auto-extract", response_model=IngestResponse)
async def extract_image(
    body: ImageIngestRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reference = SourceReference.from_image(body.image, body.mediaType)
    return await _run_ingest(service, reference, body.userId)


@router.post("/test-extract", response_model=IngestResponse)
async def preview_extraction(
    body: PreviewRequest,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    source = RecipeSource(body.source)
    try:
        recipe = await run_in_threadpool(service.preview, body.caption, source)
    except ServiceError as exc:
        log.warning("preview.fail kind=%s error=%s", exc.kind, exc)
        raise http_error(exc) from exc
    return IngestResponse(recipe=RecipeResponse.from_recipe(recipe), message="Preview only, not saved")
