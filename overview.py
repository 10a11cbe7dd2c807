"""
Query surface consumed by the dashboard: task overview, code activity and
the combined productivity stats.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from fastapi import Depends

from clients.github import GitHubClient
from clients.todoist import TodoistClient
from config import Settings, get_settings
from constants.productivity_level import ProductivityLevel
from dashboard_schemas import (
    ActivityOverview, DashboardStats, GitHubSummary,
    ProductivitySummary, TaskOverview, TodoistSummary
)
from date_buckets import is_on_day, today_key
from errors import DashboardError
from http_client import FreshnessCache

logger = logging.getLogger(__name__)

TASK_POINTS = 5
COMMIT_POINTS = 10
MAX_TERM_SCORE = 50


def productivity_score(tasks_today: int, commits_today: int) -> int:
    tasks_score = min(tasks_today * TASK_POINTS, MAX_TERM_SCORE)
    commits_score = min(commits_today * COMMIT_POINTS, MAX_TERM_SCORE)
    return max(tasks_score, 0) + max(commits_score, 0)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DashboardOverview:
    def __init__(
        self,
        todoist: TodoistClient,
        github: GitHubClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.todoist = todoist
        self.github = github
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[FreshnessCache] = None) -> "DashboardOverview":
        if cache is None:
            cache = FreshnessCache(settings.cache_ttl_seconds)
        return cls(TodoistClient(settings, cache), GitHubClient(settings, cache))

    def close(self):
        self.todoist.close()
        self.github.close()

    def tasks(self, now: Optional[datetime] = None) -> TaskOverview:
        return self.todoist.fetch_overview(now or self.clock())

    def activity(self) -> ActivityOverview:
        return self.github.fetch_activity()

    def _tasks_or_none(self, now: datetime) -> Optional[TaskOverview]:
        try:
            return self.tasks(now)
        except DashboardError as e:
            logger.warning(f"Todoist data unavailable for stats: {str(e)}")
            return None

    def _activity_or_none(self) -> Optional[ActivityOverview]:
        try:
            return self.activity()
        except DashboardError as e:
            logger.warning(f"GitHub data unavailable for stats: {str(e)}")
            return None

    def stats(self) -> DashboardStats:
        """Never raises: a missing source contributes zeros."""
        # One reading of the clock, so tasks and commits agree on "today"
        now = self.clock()
        with ThreadPoolExecutor(max_workers=2) as executor:
            tasks_future = executor.submit(self._tasks_or_none, now)
            activity_future = executor.submit(self._activity_or_none)
            tasks = tasks_future.result()
            activity = activity_future.result()

        today = today_key(now)

        todoist = TodoistSummary()
        if tasks is not None:
            todoist = TodoistSummary(
                overdue=tasks.overdue_count,
                today=tasks.today_count,
                total_active=tasks.total_active,
            )

        github = GitHubSummary()
        if activity is not None:
            github = GitHubSummary(
                commits_today=sum(1 for c in activity.recent_commits if is_on_day(c.author.date, today)),
                active_repos=len(activity.active_repos),
                total_contributions=activity.total_commits,
            )

        score = productivity_score(todoist.today, github.commits_today)
        level = ProductivityLevel.for_score(score)
        return DashboardStats(
            todoist=todoist,
            github=github,
            productivity=ProductivitySummary(
                tasks_today=todoist.today,
                commits_today=github.commits_today,
                score=score,
                level=level.value,
                message=level.message,
            ),
        )


_overviews: Dict[Settings, DashboardOverview] = {}
_overviews_lock = threading.Lock()


def get_overview(settings: Settings = Depends(get_settings)) -> DashboardOverview:
    # One overview (and one freshness cache) per distinct settings object
    with _overviews_lock:
        overview = _overviews.get(settings)
        if overview is None:
            overview = DashboardOverview.from_settings(settings)
            _overviews[settings] = overview
        return overview


def close_overviews():
    with _overviews_lock:
        for overview in _overviews.values():
            overview.close()
        _overviews.clear()
