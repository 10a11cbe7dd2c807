import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from config import Settings, get_settings
from dashboard_schemas import ActivityOverview
from errors import DashboardError
from overview import DashboardOverview, get_overview
from routers.caching import set_freshness_headers

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/github",
    tags=["github"]
)

@router.get("/activity", response_model=ActivityOverview)
def get_github_activity(
    response: Response,
    overview: DashboardOverview = Depends(get_overview),
    settings: Settings = Depends(get_settings)
):
    """
    Recent GitHub activity:
    - Language distribution across repositories
    - Latest commits from the most recently updated repositories
    - Commits per day
    """
    try:
        result = overview.activity()
    except DashboardError as e:
        logger.error(f"GitHub activity failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch GitHub data"
        )
    set_freshness_headers(response, settings.cache_ttl_seconds)
    return result
