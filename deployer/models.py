from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from typing import Dict, List, Union

# filename -> file content, written in insertion order
ArtifactBundle = Dict[str, Union[str, bytes]]


def pages_url_for(owner: str, repo: str) -> str:
    return f"https://{owner}.github.io/{repo}/"


class Attachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str  # data: URIs supported


class TaskRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    secret: str
    task: str = Field(..., min_length=1)
    round: int = Field(..., ge=1)
    nonce: str
    brief: str
    checks: List[str] = Field(default_factory=list)
    evaluation_url: HttpUrl
    attachments: List[Attachment] = Field(default_factory=list)


class PublishedLocation(BaseModel):
    """A repository created by the publisher.

    ``pages_url`` is derived from owner and repo name; GitHub never reports it
    back, and it only serves content once the Pages build has settled.
    """
    model_config = ConfigDict(frozen=True)

    repo: str
    owner: str
    default_branch: str
    repo_url: str
    commit_sha: str

    @property
    def pages_url(self) -> str:
        return pages_url_for(self.owner, self.repo)


class CompletionNotice(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    task: str
    round: int
    nonce: str
    repo_url: str
    commit_sha: str
    pages_url: str


class TaskResponse(BaseModel):
    status: str
    message: str
