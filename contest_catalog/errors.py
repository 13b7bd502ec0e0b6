"""
Exceptions raised while building the contest catalog.

Every error carries the relative path of the artifact that broke the build so
the content author can find the offending file.
"""

from __future__ import annotations

from typing import Optional


class CatalogBuildError(Exception):
    """Base exception for a catalog build that must be aborted."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MissingDocumentError(CatalogBuildError):
    """A metadata sidecar has no document with the same group key."""
    pass


class PathStructureError(CatalogBuildError):
    """An artifact path is too shallow to carry type/year/round."""
    pass


class TitleResolutionError(CatalogBuildError):
    """No usable title could be read from a document."""
    pass


class RecordValidationError(CatalogBuildError):
    """An assembled record does not satisfy the catalog schema."""
    pass
