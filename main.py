import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import get_settings
from overview import close_overviews
from routers import todoist, github, stats

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def log_configuration(settings):
    if not settings.todoist_api_token:
        logger.warning("TODOIST_API_TOKEN is not set, /api/todoist/overview will fail")
    if not settings.github_token:
        logger.warning("GITHUB_TOKEN is not set, /api/github/activity will fail")
    logger.info(f"Serving dashboard for GitHub user {settings.github_username} at {settings.base_url}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings_provider = app.dependency_overrides.get(get_settings, get_settings)
    log_configuration(settings_provider())
    yield
    # Release the upstream connection pools
    close_overviews()

app = FastAPI(title="Productivity Dashboard API", lifespan=lifespan)

# CORS middleware configuration
origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(todoist.router)
app.include_router(github.router)
app.include_router(stats.router)

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
