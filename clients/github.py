import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

import requests
from pydantic import ValidationError

from config import Settings
from dashboard_schemas import ActivityOverview, LanguageShare, CommitFrequency
from date_buckets import count_by_day
from errors import ConfigurationError, PartialFetchError, UpstreamError
from http_client import FreshnessCache, UpstreamSession
from schemas import Commit, CommitListItem, Repository

logger = logging.getLogger(__name__)

ACTIVE_REPO_LIMIT = 10
COMMIT_REPO_LIMIT = 5
COMMITS_PER_REPO = 5
RECENT_COMMIT_LIMIT = 20
REPOS_PER_PAGE = 100


def round_percentage(count: int, total: int) -> int:
    # Half-up, not Python's banker's rounding
    value = Decimal(count * 100) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def language_breakdown(repos: List[Repository]) -> List[LanguageShare]:
    counts: Dict[str, int] = {}
    for repo in repos:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1

    total = sum(counts.values())
    languages = [
        LanguageShare(name=name, count=count, percentage=round_percentage(count, total))
        for name, count in counts.items()
    ]
    return sorted(languages, key=lambda lang: lang.count, reverse=True)


def most_recently_updated(repos: List[Repository]) -> List[Repository]:
    return sorted(repos, key=lambda repo: repo.updated_at, reverse=True)


def merge_commits(branches: List[List[Commit]]) -> List[Commit]:
    commits = [commit for branch in branches for commit in branch]
    return sorted(commits, key=lambda commit: commit.author.date, reverse=True)


def build_activity(repos: List[Repository], commits: List[Commit]) -> ActivityOverview:
    """commits must already be sorted newest first."""
    return ActivityOverview(
        total_commits=len(commits),
        total_repos=len(repos),
        languages=language_breakdown(repos),
        recent_commits=commits[:RECENT_COMMIT_LIMIT],
        active_repos=most_recently_updated(repos)[:ACTIVE_REPO_LIMIT],
        commit_frequency=[
            CommitFrequency(**bucket)
            for bucket in count_by_day(commit.author.date for commit in commits)
        ],
    )


class GitHubClient:
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
        if not self.settings.github_token:
            raise ConfigurationError("GITHUB_TOKEN not configured")
        return UpstreamSession(
            self.session,
            self.settings.github_api_url,
            self.settings.github_token,
            cache=self.cache,
            timeout=self.settings.http_timeout_seconds,
            headers={"Accept": "application/vnd.github.v3+json"},
        )

    def fetch_repositories(self, upstream: UpstreamSession) -> List[Repository]:
        payload = upstream.get_json(
            f"/users/{self.settings.github_username}/repos",
            params={"per_page": REPOS_PER_PAGE, "sort": "updated"},
        )
        try:
            return [Repository.model_validate(item) for item in payload]
        except (ValidationError, TypeError) as e:
            raise UpstreamError(f"Unexpected repository payload: {str(e)}") from e

    def fetch_commits(self, upstream: UpstreamSession, repo: Repository) -> List[Commit]:
        try:
            payload = upstream.get_json(
                f"/repos/{repo.full_name}/commits",
                params={"per_page": COMMITS_PER_REPO},
            )
            items = [CommitListItem.model_validate(item) for item in payload]
        except (UpstreamError, ValidationError, TypeError) as e:
            raise PartialFetchError(repo.name, str(e)) from e
        return [Commit.from_api(item, repo.name) for item in items]

    def _commits_or_empty(self, upstream: UpstreamSession, repo: Repository) -> List[Commit]:
        try:
            return self.fetch_commits(upstream, repo)
        except PartialFetchError as e:
            logger.warning(f"Error fetching commits for {e.repository}: {str(e)}")
            return []

    def fetch_recent_commits(self, upstream: UpstreamSession, repos: List[Repository]) -> List[Commit]:
        targets = most_recently_updated(repos)[:COMMIT_REPO_LIMIT]
        if not targets:
            return []
        # Each branch swallows its own failure, so one bad repo never cancels the rest
        with ThreadPoolExecutor(max_workers=len(targets)) as executor:
            branches = list(executor.map(lambda repo: self._commits_or_empty(upstream, repo), targets))
        return merge_commits(branches)

    def fetch_activity(self) -> ActivityOverview:
        upstream = self._upstream()
        try:
            repos = self.fetch_repositories(upstream)
        except UpstreamError as e:
            logger.error(f"GitHub API error: {str(e)}")
            raise
        commits = self.fetch_recent_commits(upstream, repos)
        return build_activity(repos, commits)
