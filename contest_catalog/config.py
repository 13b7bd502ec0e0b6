"""
Configuration for the catalog builder.

Settings come from environment variables, optionally seeded from a ``.env``
file:

    CATALOG_CONTENT_ROOT   directory holding <type>/<year>/<round>/ folders
    CATALOG_RECORD_TYPE    type tag and top-level folder (default: hashcodes)
    CATALOG_TITLE_SOURCE   metadata | pdf-first-page
    CATALOG_URL_BASE       prefix for artifact URLs (default: /)
    CATALOG_WORKERS        thread pool size for file reads and PDF parses
    CATALOG_OUTPUT         where the CLI writes catalog.json
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONTENT_DIR_NAME = "content"
OUTPUT_FILE = Path("output") / "catalog.json"
DEFAULT_RECORD_TYPE = "hashcodes"
DEFAULT_WORKERS = 4


def default_content_root() -> Path:
    return Path.cwd() / CONTENT_DIR_NAME


def default_output() -> Path:
    return Path.cwd() / OUTPUT_FILE


class TitleSource(str, Enum):
    """Where record titles come from, chosen once per deployment."""

    METADATA = "metadata"
    PDF_FIRST_PAGE = "pdf-first-page"

    @classmethod
    def parse(cls, value: str) -> "TitleSource":
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        valid = [member.value for member in cls]
        raise ValueError(f"Invalid title source '{value}'. Must be one of: {valid}")


@dataclass(frozen=True)
class CatalogSettings:
    content_root: Path = field(default_factory=default_content_root)
    record_type: str = DEFAULT_RECORD_TYPE
    title_source: TitleSource = TitleSource.METADATA
    url_base: str = "/"
    workers: int = DEFAULT_WORKERS
    output: Path = field(default_factory=default_output)
    document_extension: str = ".pdf"
    input_marker: str = ".in"
    document_patterns: Optional[Tuple[str, ...]] = field(default=None)
    input_patterns: Optional[Tuple[str, ...]] = field(default=None)
    metadata_patterns: Optional[Tuple[str, ...]] = field(default=None)

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got: {self.workers}")
        # Patterns default to the type folder so other trees under the root are ignored
        if self.document_patterns is None:
            object.__setattr__(
                self, "document_patterns", (f"{self.record_type}/**/*{self.document_extension}",)
            )
        if self.input_patterns is None:
            object.__setattr__(
                self,
                "input_patterns",
                (
                    f"{self.record_type}/**/*{self.input_marker}",
                    f"{self.record_type}/**/*{self.input_marker}/*.txt",
                ),
            )
        if self.metadata_patterns is None:
            object.__setattr__(self, "metadata_patterns", (f"{self.record_type}/**/*.json",))

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "CatalogSettings":
        """Build settings from the environment.

        Args:
            env_file: Optional .env file; defaults to ``.env`` in the working directory
            environ: Mapping to read instead of ``os.environ`` (used by tests)

        Returns:
            CatalogSettings instance

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if environ is None:
            env_path = Path(env_file) if env_file else Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path, override=False)
                logger.debug(f"Loaded environment from {env_path}")
            environ = os.environ

        workers_raw = environ.get("CATALOG_WORKERS", str(DEFAULT_WORKERS))
        try:
            workers = int(workers_raw)
        except ValueError:
            raise ValueError(f"CATALOG_WORKERS must be an integer, got: {workers_raw!r}") from None

        return cls(
            content_root=Path(environ.get("CATALOG_CONTENT_ROOT", str(default_content_root()))),
            record_type=environ.get("CATALOG_RECORD_TYPE", DEFAULT_RECORD_TYPE),
            title_source=TitleSource.parse(environ.get("CATALOG_TITLE_SOURCE", TitleSource.METADATA.value)),
            url_base=environ.get("CATALOG_URL_BASE", "/"),
            workers=workers,
            output=Path(environ.get("CATALOG_OUTPUT", str(default_output()))),
        )
