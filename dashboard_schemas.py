from pydantic import BaseModel
from typing import List
from schemas import Task, Commit, Repository

class ProjectSummary(BaseModel):
    project_id: str
    project_name: str
    task_count: int
    overdue_count: int

class PriorityCount(BaseModel):
    priority: int
    label: str
    count: int

class TaskOverview(BaseModel):
    overdue_count: int
    today_count: int
    upcoming_count: int
    total_active: int
    by_project: List[ProjectSummary]
    by_priority: List[PriorityCount]
    overdue_tasks: List[Task]

class LanguageShare(BaseModel):
    name: str
    count: int
    percentage: int

class CommitFrequency(BaseModel):
    date: str
    count: int

class ActivityOverview(BaseModel):
    total_commits: int
    total_repos: int
    languages: List[LanguageShare]
    recent_commits: List[Commit]
    active_repos: List[Repository]
    commit_frequency: List[CommitFrequency]

class TodoistSummary(BaseModel):
    overdue: int = 0
    today: int = 0
    total_active: int = 0

class GitHubSummary(BaseModel):
    commits_today: int = 0
    active_repos: int = 0
    total_contributions: int = 0

class ProductivitySummary(BaseModel):
    tasks_today: int = 0
    commits_today: int = 0
    score: int = 0
    level: str
    message: str

class DashboardStats(BaseModel):
    todoist: TodoistSummary
    github: GitHubSummary
    productivity: ProductivitySummary
