import os
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseModel):
    # Server Configuration
    server_host: str = "localhost"
    server_port: int = 8000
    base_url: str = "http://localhost:8000"

    # Upstream credentials
    todoist_api_token: Optional[str] = None
    github_token: Optional[str] = None
    github_username: str = "kylnor"

    # Upstream endpoints
    todoist_api_url: str = "https://api.todoist.com/rest/v2"
    github_api_url: str = "https://api.github.com"

    # Freshness window and polling
    cache_ttl_seconds: int = 300
    refresh_interval_seconds: int = 300
    http_timeout_seconds: float = 10.0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls) -> "Settings":
        server_host = os.getenv("SERVER_HOST", "localhost")
        server_port = int(os.getenv("SERVER_PORT", "8000"))
        return cls(
            server_host=server_host,
            server_port=server_port,
            base_url=os.getenv("BASE_URL", f"http://{server_host}:{server_port}"),
            todoist_api_token=os.getenv("TODOIST_API_TOKEN") or None,
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_username=os.getenv("GITHUB_USERNAME") or "kylnor",
            todoist_api_url=os.getenv("TODOIST_API_URL", "https://api.todoist.com/rest/v2"),
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", "300")),
            refresh_interval_seconds=int(os.getenv("REFRESH_INTERVAL_SECONDS", "300")),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, overridable in tests through FastAPI dependency overrides."""
    return Settings.from_env()
