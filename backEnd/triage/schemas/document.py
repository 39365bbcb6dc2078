"""Corpus document schemas."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# One vector per document per run, produced by the embedding provider.
EmbeddingVector = list[float]


class DocumentKind(str, Enum):
    """Kind of GitHub item a document was built from."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class Document(BaseModel):
    """An open issue or pull request. Immutable for the duration of a run."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int = Field(..., description="Issue or pull request number")
    title: str = Field(..., description="Item title")
    body: str = Field(default="", description="Item body, empty when absent")
    created_at: datetime = Field(..., description="Creation timestamp")
    kind: DocumentKind = Field(default=DocumentKind.ISSUE)
    url: Optional[str] = Field(default=None, description="HTML URL on GitHub")
    author: Optional[str] = Field(default=None, description="Login of the author")

    @field_validator("body", mode="before")
    @classmethod
    def none_body_is_empty(cls, v):
        return v or ""

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Timestamps without a timezone are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def content(self) -> str:
        """Title and body as a single text, the unit that gets embedded."""
        return f"{self.title}\n\n{self.body}"

    def truncated_content(self, limit: int) -> str:
        """Content cut to ``limit`` characters, with an ellipsis when cut."""
        content = self.content
        if len(content) <= limit:
            return content
        return f"{content[:limit]}..."
