import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from config import Settings, get_settings
from dashboard_schemas import TaskOverview
from errors import DashboardError
from overview import DashboardOverview, get_overview
from routers.caching import set_freshness_headers

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/todoist",
    tags=["todoist"]
)

@router.get("/overview", response_model=TaskOverview)
def get_todoist_overview(
    response: Response,
    overview: DashboardOverview = Depends(get_overview),
    settings: Settings = Depends(get_settings)
):
    """
    Active Todoist tasks summarised by due date, project and priority.
    """
    try:
        result = overview.tasks()
    except DashboardError as e:
        logger.error(f"Todoist overview failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch Todoist data"
        )
    set_freshness_headers(response, settings.cache_ttl_seconds)
    return result
