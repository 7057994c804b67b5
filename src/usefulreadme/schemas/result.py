"""README generation output model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ReadmeResult(BaseModel):
    """Final README output."""

    filename: str
    content: str
    sections: list[str] = Field(default_factory=list)
