"""
Polls the dashboard API on a fixed interval.

Ticks are coalesced: when a tick arrives while the previous fetch of the same
query is still running, the tick is skipped rather than queued, so a slow
upstream never produces overlapping fetches.
"""
import argparse
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import requests

from config import Settings, get_settings

logger = logging.getLogger(__name__)

QUERIES = {
    "tasks": "/api/todoist/overview",
    "activity": "/api/github/activity",
    "stats": "/api/stats",
}

ResultHandler = Callable[[str, Optional[Dict[str, Any]]], None]


class QueryPoller:
    def __init__(
        self,
        name: str,
        url: str,
        on_result: ResultHandler,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.name = name
        self.url = url
        self.on_result = on_result
        self.session = session or requests.Session()
        self.timeout = timeout
        self._in_flight = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def fetch(self) -> Optional[Dict[str, Any]]:
        """None means "data unavailable", the dashboard shows its fallback state."""
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            if not response.ok:
                logger.error(f"{self.name}: {self.url} returned {response.status_code}")
                return None
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"{self.name}: {self.url} failed: {str(e)}")
            return None

    def _run(self):
        try:
            self.on_result(self.name, self.fetch())
        finally:
            self._in_flight.release()

    def tick(self) -> bool:
        """Start a fetch in the background. Returns False when one is already running."""
        if not self._in_flight.acquire(blocking=False):
            logger.debug(f"{self.name}: previous fetch still running, skipping tick")
            return False
        self._worker = threading.Thread(target=self._run, name=f"poll-{self.name}", daemon=True)
        self._worker.start()
        return True

    def wait(self, timeout: Optional[float] = None):
        if self._worker is not None:
            self._worker.join(timeout)


class DashboardRefresher:
    def __init__(
        self,
        settings: Settings,
        on_result: ResultHandler,
        queries: Optional[List[str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.interval = settings.refresh_interval_seconds
        base_url = settings.base_url.rstrip("/")
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.pollers = [
            QueryPoller(name, f"{base_url}{QUERIES[name]}", on_result, self.session, settings.http_timeout_seconds)
            for name in (queries or list(QUERIES))
        ]

    def close(self):
        if self._owns_session:
            self.session.close()

    def tick(self) -> int:
        return sum(1 for poller in self.pollers if poller.tick())

    def run(self, stop: threading.Event):
        logger.info(f"Refreshing {len(self.pollers)} queries every {self.interval}s")
        while not stop.is_set():
            self.tick()
            stop.wait(self.interval)
        for poller in self.pollers:
            poller.wait()

    def run_once(self):
        self.tick()
        for poller in self.pollers:
            poller.wait()


def log_result(name: str, payload: Optional[Dict[str, Any]]):
    if payload is None:
        logger.warning(f"{name}: data unavailable")
    elif name == "stats":
        productivity = payload.get("productivity", {})
        logger.info(
            f"stats: score {productivity.get('score', 0)} ({productivity.get('level', '?')}), "
            f"{productivity.get('tasks_today', 0)} tasks and {productivity.get('commits_today', 0)} commits today"
        )
    elif name == "tasks":
        logger.info(f"tasks: {payload.get('overdue_count', 0)} overdue, {payload.get('today_count', 0)} due today")
    else:
        logger.info(f"activity: {payload.get('total_commits', 0)} recent commits across {payload.get('total_repos', 0)} repos")


def main():
    parser = argparse.ArgumentParser(description="Poll the productivity dashboard API")
    parser.add_argument("--once", action="store_true", help="fetch every query once and exit")
    parser.add_argument("--query", action="append", choices=sorted(QUERIES), help="query to poll (repeatable)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    refresher = DashboardRefresher(get_settings(), log_result, queries=args.query)
    stop = threading.Event()
    try:
        if args.once:
            refresher.run_once()
        else:
            refresher.run(stop)
    except KeyboardInterrupt:
        stop.set()
    finally:
        refresher.close()

if __name__ == "__main__":
    main()
