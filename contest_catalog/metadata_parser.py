"""
Metadata parser for contest sidecar files.

A sidecar is a JSON file next to a problem statement, sharing its basename:

    hashcodes/2017/practice/hashcode_2017_practice_round.pdf
    hashcodes/2017/practice/hashcode_2017_practice_round.json

Format:
{
    "year": "2017",
    "round": "practice",
    "title": "Pizza",
    "description": "Cut the pizza into slices.",
    "scoring": {"enabled": true}
}
"""

from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from .discovery import Artifact
from .errors import CatalogBuildError
from .schema import Scoring


class MetadataError(CatalogBuildError, ValueError):
    """Exception raised when sidecar metadata is invalid."""
    pass


class SidecarMetadata(BaseModel):
    year: Optional[str] = None
    round: Optional[str] = None
    title: str
    description: str = ""
    scoring: Scoring = Scoring()

    @field_validator("year", "round", mode="before")
    @classmethod
    def coerce_to_string(cls, value):
        # Authors often write "year": 2017
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return "" if value is None else value

    @field_validator("scoring", mode="before")
    @classmethod
    def default_scoring(cls, value):
        return Scoring() if value is None else value


def parse_metadata(text: str, source: str = "unknown") -> SidecarMetadata:
    """Parse sidecar JSON text.

    Args:
        text: Raw JSON content
        source: Relative path of the sidecar (for error reporting)

    Returns:
        Validated SidecarMetadata

    Raises:
        MetadataError: If the text is not JSON or does not match the schema

    Example:
        >>> meta = parse_metadata('{"title": "Final Round", "year": 2023}')
        >>> meta.title, meta.year, meta.scoring.enabled
        ('Final Round', '2023', False)
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Invalid JSON in metadata {source}: {exc}", path=source) from exc

    if not isinstance(data, dict):
        raise MetadataError(
            f"Metadata {source} must be a JSON object, got: {type(data).__name__}", path=source
        )

    try:
        return SidecarMetadata.model_validate(data)
    except ValidationError as exc:
        raise MetadataError(f"Invalid metadata {source}: {exc}", path=source) from exc


def load_metadata(artifact: Artifact) -> SidecarMetadata:
    """Read and parse a sidecar artifact."""
    try:
        text = artifact.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(f"Cannot read metadata {artifact.path}: {exc}", path=artifact.path) from exc
    return parse_metadata(text, artifact.path)
