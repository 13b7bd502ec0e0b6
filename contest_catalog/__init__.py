"""
Catalog module for the contest archive site.

This module provides functionality for:
- Discovering problem statements, input files and JSON sidecars
- Pairing them by folder + basename
- Resolving titles from sidecars or the statement's first page
- Validating and saving catalog records

File structure:
    content/
        hashcodes/
            2017/
                practice/
                    hashcode_2017_practice_round.pdf    - Problem statement
                    hashcode_2017_practice_round.json   - Optional metadata
                    hashcode_2017_practice_round.in/    - Optional input files
                        example.in
                        small.in

Usage:
    from contest_catalog import CatalogBuilder, CatalogSettings

    builder = CatalogBuilder(CatalogSettings(content_root=Path("content")))
    records = builder.build()
    stats = builder.save(records)
"""

from .builder import CatalogBuilder, group_key, load_catalog, search_records, split_record_path
from .config import CatalogSettings, TitleSource
from .discovery import Artifact, ArtifactKind, discover_artifacts, normalize_path
from .errors import (
    CatalogBuildError,
    MissingDocumentError,
    PathStructureError,
    RecordValidationError,
    TitleResolutionError,
)
from .metadata_parser import MetadataError, SidecarMetadata, parse_metadata
from .schema import CatalogRecord, FileEntry, FileLink, Scoring
from .slug import hashcode_slug, normalize_slug
from .title_extractor import extract_title, pick_title

__all__ = [
    "CatalogBuilder",
    "group_key",
    "load_catalog",
    "search_records",
    "split_record_path",
    "CatalogSettings",
    "TitleSource",
    "Artifact",
    "ArtifactKind",
    "discover_artifacts",
    "normalize_path",
    "CatalogBuildError",
    "MissingDocumentError",
    "PathStructureError",
    "RecordValidationError",
    "TitleResolutionError",
    "MetadataError",
    "SidecarMetadata",
    "parse_metadata",
    "CatalogRecord",
    "FileEntry",
    "FileLink",
    "Scoring",
    "hashcode_slug",
    "normalize_slug",
    "extract_title",
    "pick_title",
]

__version__ = "1.0.0"
