"""Pydantic models for the emitted catalog."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_RECORD_TYPE = "hashcodes"


class FileLink(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class Scoring(BaseModel):
    enabled: bool = False


class CatalogRecord(BaseModel):
    """One published contest round: its statement, inputs and display fields."""

    id: str = Field(..., min_length=1)
    type: str = DEFAULT_RECORD_TYPE
    year: str = Field(..., min_length=1)
    round: str = Field(..., min_length=1)
    title: str
    description: str = ""
    document: FileLink
    inputs: List[FileLink] = Field(default_factory=list)
    scoring: Scoring = Field(default_factory=Scoring)
    group_key: str = Field("", exclude=True)

    @field_validator("title")
    @classmethod
    def clean_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title cannot be empty")
        return cleaned

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("scoring", mode="before")
    @classmethod
    def default_scoring(cls, value):
        return Scoring() if value is None else value


class FileEntry(BaseModel):
    """A single published file, independent of any record grouping."""

    id: str
    year: str
    round: str = ""
    file: str
    url: str
