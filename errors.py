from typing import Optional


class DashboardError(Exception):
    """Base class for failures while building a dashboard view."""


class ConfigurationError(DashboardError):
    """A required credential is not configured."""


class UpstreamError(DashboardError):
    """A listing request against an external API did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class PartialFetchError(DashboardError):
    """A single repository's commit fetch failed."""

    def __init__(self, repository: str, message: str):
        super().__init__(f"{repository}: {message}")
        self.repository = repository
