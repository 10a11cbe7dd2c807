import logging
from datetime import datetime
from typing import Dict, List, Optional

import requests
from pydantic import ValidationError

from config import Settings
from constants.task_priority import TaskPriority
from dashboard_schemas import TaskOverview, ProjectSummary, PriorityCount
from date_buckets import OVERDUE, TODAY, UPCOMING, due_bucket, today_key
from errors import ConfigurationError, UpstreamError
from http_client import FreshnessCache, UpstreamSession
from schemas import Task, Project

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "Inbox"
OVERDUE_TASK_LIMIT = 10


def group_by_project(tasks: List[Task], project_names: Dict[str, str], today: str) -> List[ProjectSummary]:
    groups: Dict[str, ProjectSummary] = {}
    for task in tasks:
        group = groups.get(task.project_id)
        if group is None:
            group = ProjectSummary(
                project_id=task.project_id,
                project_name=project_names.get(task.project_id, DEFAULT_PROJECT_NAME),
                task_count=0,
                overdue_count=0,
            )
            groups[task.project_id] = group
        group.task_count += 1
        if task.due and due_bucket(task.due.date, today) == OVERDUE:
            group.overdue_count += 1

    # sorted() is stable, so the first project seen wins ties
    return sorted(groups.values(), key=lambda g: g.task_count, reverse=True)


def group_by_priority(tasks: List[Task]) -> List[PriorityCount]:
    return [
        PriorityCount(
            priority=priority.value,
            label=priority.label,
            count=sum(1 for task in tasks if task.priority == priority.value),
        )
        for priority in sorted(TaskPriority, key=lambda p: p.value)
    ]


def build_task_overview(tasks: List[Task], project_names: Dict[str, str], today: str) -> TaskOverview:
    buckets: Dict[str, List[Task]] = {OVERDUE: [], TODAY: [], UPCOMING: []}
    for task in tasks:
        bucket = due_bucket(task.due.date if task.due else None, today)
        if bucket:
            buckets[bucket].append(task)

    return TaskOverview(
        overdue_count=len(buckets[OVERDUE]),
        today_count=len(buckets[TODAY]),
        upcoming_count=len(buckets[UPCOMING]),
        total_active=len(tasks),
        by_project=group_by_project(tasks, project_names, today),
        by_priority=group_by_priority(tasks),
        overdue_tasks=buckets[OVERDUE][:OVERDUE_TASK_LIMIT],
    )


class TodoistClient:
    def __init__(self, settings: Settings, cache: Optional[FreshnessCache] = None, session=None):
        self.settings = settings
        self.cache = cache
        # Reused for every fetch, closed only if this client created it
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self):
        if self._owns_session:
            self.session.close()

    def _upstream(self) -> UpstreamSession:
        if not self.settings.todoist_api_token:
            raise ConfigurationError("TODOIST_API_TOKEN not configured")
        return UpstreamSession(
            self.session,
            self.settings.todoist_api_url,
            self.settings.todoist_api_token,
            cache=self.cache,
            timeout=self.settings.http_timeout_seconds,
        )

    def fetch_tasks(self, upstream: UpstreamSession) -> List[Task]:
        payload = upstream.get_json("/tasks")
        try:
            return [Task.model_validate(item) for item in payload]
        except (ValidationError, TypeError) as e:
            raise UpstreamError(f"Unexpected task payload: {str(e)}") from e

    def fetch_project_names(self, upstream: UpstreamSession) -> Dict[str, str]:
        """Best effort: an empty mapping makes every project fall back to Inbox."""
        try:
            payload = upstream.get_json("/projects")
            projects = [Project.model_validate(item) for item in payload]
        except (UpstreamError, ValidationError, TypeError) as e:
            logger.warning(f"Could not load Todoist projects, using '{DEFAULT_PROJECT_NAME}': {str(e)}")
            return {}
        return {project.id: project.name for project in projects}

    def fetch_overview(self, now: Optional[datetime] = None) -> TaskOverview:
        upstream = self._upstream()
        try:
            tasks = self.fetch_tasks(upstream)
        except UpstreamError as e:
            logger.error(f"Todoist API error: {str(e)}")
            raise
        project_names = self.fetch_project_names(upstream)

        # Completed tasks are never returned by /tasks, filter anyway
        active = [task for task in tasks if not task.is_completed]
        return build_task_overview(active, project_names, today_key(now))
