from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from sitedash.dependencies import get_site_store
from sitedash.models.response import RulesResponse
from sitedash.services.site_store import SiteStore

router = APIRouter(prefix="/api/rules", tags=["Rules"])


@router.get(
    "/dashboard-new-site",
    response_model=RulesResponse,
    summary="Read the dashboard site-creation rules",
)
async def get_dashboard_new_site_rules(
    store: SiteStore = Depends(get_site_store),
) -> RulesResponse:
    content = await run_in_threadpool(store.read_rules)
    return RulesResponse(data=content)
