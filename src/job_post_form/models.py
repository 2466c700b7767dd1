from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JobStatus(StrEnum):
    OPEN = "open"
    CLOSED = "closed"


class Option(BaseModel):
    """A selectable `{id, label}` pair offered by an option source."""

    model_config = ConfigDict(frozen=True)

    id: str | int
    label: str


class CuratorIdentity(BaseModel):
    """The authenticated user who owns the job postings they create."""

    model_config = ConfigDict(frozen=True)

    id: str | int
    name: str
    roles: list[str] = Field(default_factory=lambda: ["curator"])

    @property
    def is_curator(self) -> bool:
        return "curator" in self.roles


class JobPostDraft(BaseModel):
    """
    In-progress job post input, mutated field by field while the form is open.
    Every field starts empty; validation decides whether it can be submitted.
    """

    title: str = ""
    company: str | int | None = None
    description: str = ""
    location: str = ""
    requisites: set[str] | None = Field(default_factory=set)
    stack: set[str] | None = Field(default_factory=set)
    url: str = ""
    source: str = ""


class JobPostRecord(BaseModel):
    """
    Finalized job post, ready for the create endpoint.
    Built once per successful validation pass and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    company: str | int
    description: str
    location: str
    requisites: tuple[str, ...]
    stack: tuple[str | int, ...]
    url: str
    source: str
    status: JobStatus = JobStatus.OPEN
    created_at: datetime
    modified_at: datetime
    curator: str | int
    indicated_by: str | int | None = None
    blob: str

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready body for the create endpoint, with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
