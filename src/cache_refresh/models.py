"""Pydantic models for source records and cache payloads.

Source record models accept raw Appwrite documents (aliases match the
collection attribute names), ignore attributes they do not use and turn empty
strings into ``None`` so presence checks are explicit.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SourceRecord(BaseModel):
    """Common base for documents read from a source collection."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)
    id: str = Field(..., alias="$id")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and v == "":
            return None
        return v


class NoteRecord(SourceRecord):
    """A note document.

    Attributes:
        user_name: Name of the uploader (`userName`).
        abbreviation: Subject code the note belongs to.
    """
    user_name: str | None = Field(default=None, alias="userName")
    abbreviation: str | None = None


class LinkRecord(SourceRecord):
    """A form or YouTube submission document (`createdBy`)."""
    created_by: str | None = Field(default=None, alias="createdBy")


class LinksCache(BaseModel):
    """Payload of the links uploader cache."""
    model_config = ConfigDict(extra="forbid")
    uploaders: list[str]


class TeacherContribution(BaseModel):
    """One row of the teacher stats document."""
    model_config = ConfigDict(extra="forbid")
    name: str
    notes: int = Field(..., ge=0)
    forms: int = Field(..., ge=0)
    youtube: int = Field(..., ge=0)
    total: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> "TeacherContribution":
        if self.total != self.notes + self.forms + self.youtube:
            raise ValueError("total must equal notes + forms + youtube")
        return self
