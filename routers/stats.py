from fastapi import APIRouter, Depends, Response
from config import Settings, get_settings
from dashboard_schemas import DashboardStats
from overview import DashboardOverview, get_overview
from routers.caching import set_freshness_headers

router = APIRouter(
    prefix="/api",
    tags=["stats"]
)

@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    response: Response,
    overview: DashboardOverview = Depends(get_overview),
    settings: Settings = Depends(get_settings)
):
    """Combined counts and productivity score. Degrades to zeros instead of failing."""
    set_freshness_headers(response, settings.cache_ttl_seconds)
    return overview.stats()
