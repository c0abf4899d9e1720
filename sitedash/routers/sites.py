import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.concurrency import run_in_threadpool

from sitedash.config import get_settings
from sitedash.dependencies import get_site_store
from sitedash.errors import SiteValidationError
from sitedash.models.response import (
    SiteCreatedResponse,
    SiteDeletedResponse,
    SiteIndexResponse,
    SiteListResponse,
    SiteResponse,
)
from sitedash.services.site_store import SiteStore

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api/sites", tags=["Sites"])


def _write_limit() -> str:
    return get_settings().rate_limit


@router.get("", response_model=SiteListResponse, summary="List site files")
async def list_sites(store: SiteStore = Depends(get_site_store)) -> SiteListResponse:
    sites = await run_in_threadpool(store.list_sites)
    return SiteListResponse(data=sites, count=len(sites))


@router.post("/index", response_model=SiteIndexResponse, summary="Regenerate sites.json")
@limiter.limit(_write_limit)
async def generate_index(
    request: Request, store: SiteStore = Depends(get_site_store)
) -> SiteIndexResponse:
    index = await run_in_threadpool(store.generate_index)
    return SiteIndexResponse(data=index)


@router.get("/{filename}", response_model=SiteResponse, summary="Read one site")
async def get_site(filename: str, store: SiteStore = Depends(get_site_store)) -> SiteResponse:
    site = await run_in_threadpool(store.get_site, filename)
    return SiteResponse(data=site)


@router.post(
    "",
    response_model=SiteCreatedResponse,
    status_code=201,
    summary="Create a site",
    description=(
        "Creates `site-<slug>.yml` from the JSON body.  When the body carries a "
        "`filename` it is used as the target and stripped from the stored record; "
        "otherwise the filename is derived from `name`."
    ),
)
@limiter.limit(_write_limit)
async def create_site(
    request: Request,
    body: Dict[str, Any] = Body(...),
    store: SiteStore = Depends(get_site_store),
) -> SiteCreatedResponse:
    filename = body.pop("filename", None)
    if filename is not None and not isinstance(filename, str):
        raise SiteValidationError(["filename must be a string"])
    if not filename:
        name = body.get("name")
        # Non-string names fall through to validation, which rejects them.
        filename = store.generate_filename(name if isinstance(name, str) else "")
    logger.info("Create site request received", extra={"site_file": filename})

    site = await run_in_threadpool(store.create_site, filename, body)
    return SiteCreatedResponse(data=site, filename=filename)


async def _replace_site(filename: str, body: Dict[str, Any], store: SiteStore) -> SiteResponse:
    body.pop("filename", None)
    site = await run_in_threadpool(store.update_site, filename, body)
    return SiteResponse(data=site)


@router.put("/{filename}", response_model=SiteResponse, summary="Replace a site")
@limiter.limit(_write_limit)
async def update_site(
    request: Request,
    filename: str,
    body: Dict[str, Any] = Body(...),
    store: SiteStore = Depends(get_site_store),
) -> SiteResponse:
    return await _replace_site(filename, body, store)


@router.patch(
    "/{filename}",
    response_model=SiteResponse,
    summary="Replace a site",
    description="Same as `PUT`: the body must hold the complete record.",
)
@limiter.limit(_write_limit)
async def patch_site(
    request: Request,
    filename: str,
    body: Dict[str, Any] = Body(...),
    store: SiteStore = Depends(get_site_store),
) -> SiteResponse:
    return await _replace_site(filename, body, store)


@router.delete("/{filename}", response_model=SiteDeletedResponse, summary="Delete a site")
@limiter.limit(_write_limit)
async def delete_site(
    request: Request, filename: str, store: SiteStore = Depends(get_site_store)
) -> SiteDeletedResponse:
    result = await run_in_threadpool(store.delete_site, filename)
    return SiteDeletedResponse(data=result)
