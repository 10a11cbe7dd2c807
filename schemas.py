from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List

# Shapes returned by the Todoist REST v2 API

class TaskDue(BaseModel):
    date: str
    is_recurring: bool = False
    datetime: Optional[str] = None
    string: Optional[str] = None
    timezone: Optional[str] = None

class Task(BaseModel):
    id: str
    content: str
    description: str = ""
    project_id: str
    section_id: Optional[str] = None
    due: Optional[TaskDue] = None
    priority: int = 1
    is_completed: bool = False
    labels: List[str] = []
    created_at: Optional[str] = None

class Project(BaseModel):
    id: str
    name: str

# Shapes returned by the GitHub REST v3 API

class Repository(BaseModel):
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    updated_at: datetime
    created_at: Optional[datetime] = None
    html_url: str
    private: bool = False

class CommitAuthor(BaseModel):
    name: str
    email: str
    date: datetime

class CommitDetail(BaseModel):
    message: str
    author: CommitAuthor

class CommitListItem(BaseModel):
    sha: str
    commit: CommitDetail
    html_url: str

class Commit(BaseModel):
    sha: str
    message: str
    author: CommitAuthor
    html_url: str
    repository: str

    @classmethod
    def from_api(cls, item: CommitListItem, repository: str) -> "Commit":
        return cls(
            sha=item.sha,
            # First line only
            message=item.commit.message.split("\n")[0],
            author=item.commit.author,
            html_url=item.html_url,
            repository=repository,
        )
