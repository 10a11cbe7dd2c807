import threading
from datetime import datetime, timezone

import requests

from config import Settings

TODOIST_URL = "https://todoist.test/rest/v2"
GITHUB_URL = "https://github.test"

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_settings(**overrides) -> Settings:
    values = dict(
        todoist_api_token="todoist-test-token",
        github_token="github-test-token",
        github_username="octo",
        todoist_api_url=TODOIST_URL,
        github_api_url=GITHUB_URL,
        base_url="http://dashboard.test",
    )
    values.update(overrides)
    return Settings(**values)


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Answers GET requests by URL path; a route may be a payload, a FakeResponse or an exception."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.headers = {}
        self.calls = []
        self.sent_headers = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, headers=None, timeout=None):
        with self._lock:
            self.calls.append(url)
            self.sent_headers.append((url, dict(headers or {})))
        path = url.split("?")[0]
        if path not in self.routes:
            return FakeResponse(404, {"message": "Not Found"})
        route = self.routes[path]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(200, route)

    def close(self):
        self.closed = True

    def headers_for(self, url_prefix):
        return [headers for url, headers in self.sent_headers if url.startswith(url_prefix)]

    def calls_to(self, path):
        return [url for url in self.calls if url.split("?")[0].endswith(path)]


def todoist_task(task_id, project_id="p1", due=None, priority=1, content=None):
    task = {
        "id": task_id,
        "content": content or f"Task {task_id}",
        "description": "",
        "project_id": project_id,
        "priority": priority,
        "is_completed": False,
        "labels": [],
        "created_at": "2024-06-01T09:00:00.000000Z",
        "due": None,
    }
    if due:
        task["due"] = {"date": due, "is_recurring": False, "string": due}
    return task


def github_repo(repo_id, name, updated_at, language=None, owner="octo"):
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": None,
        "language": language,
        "stargazers_count": 1,
        "forks_count": 0,
        "open_issues_count": 0,
        "updated_at": updated_at,
        "created_at": "2023-01-01T00:00:00Z",
        "html_url": f"https://github.com/{owner}/{name}",
        "private": False,
    }


def github_commit(sha, date, message="Update", owner="octo", repo="repo"):
    return {
        "sha": sha,
        "commit": {
            "message": message,
            "author": {"name": "Octo Cat", "email": "octo@example.com", "date": date},
        },
        "html_url": f"https://github.com/{owner}/{repo}/commit/{sha}",
    }


def raise_connection_error():
    return requests.ConnectionError("connection refused")
