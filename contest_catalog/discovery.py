"""
Artifact discovery for the contest catalog.

Scans a content root with glob patterns and returns lightweight Artifact
handles. Nothing is read here: documents and inputs are opened later, and
only when their bytes are actually needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List

logger = logging.getLogger(__name__)


class ArtifactKind(str, Enum):
    DOCUMENT = "document"
    INPUT = "input"
    METADATA = "metadata"


@dataclass(frozen=True)
class Artifact:
    """A discovered file below the content root."""
    path: str  # relative to the content root, "/"-separated
    name: str
    url: str
    location: Path
    kind: ArtifactKind

    def open(self) -> BinaryIO:
        """Open the underlying file for binary reading."""
        return self.location.open("rb")

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.location.read_text(encoding=encoding)


def normalize_path(value: str) -> str:
    """Canonicalize a relative path: "/" separators, no leading "./".

    Example:
        >>> normalize_path(".\\\\hashcodes\\\\2017\\\\practice\\\\a.pdf")
        'hashcodes/2017/practice/a.pdf'
        >>> normalize_path("././hashcodes/a.pdf")
        'hashcodes/a.pdf'
    """
    normalized = value.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def artifact_url(url_base: str, path: str) -> str:
    """Join the public URL base and a normalized artifact path."""
    base = url_base if url_base.endswith("/") else f"{url_base}/"
    return f"{base}{path}"


def discover_artifacts(
    root: Path,
    patterns: Iterable[str],
    kind: ArtifactKind,
    url_base: str = "/",
) -> List[Artifact]:
    """Find every file under root matching any of the patterns.

    Args:
        root: Content root directory
        patterns: Glob patterns relative to root (e.g. "hashcodes/**/*.pdf")
        kind: Kind tag given to every match
        url_base: Prefix used to build each artifact's public URL

    Returns:
        Artifacts sorted by path, without duplicates. An empty list when
        nothing matches.

    Raises:
        FileNotFoundError: If root does not exist
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Content root not found: {root}")

    found: Dict[str, Artifact] = {}
    for pattern in patterns:
        for candidate in root.glob(pattern):
            # "**/*.in" also matches "<name>.in/" input directories
            if not candidate.is_file():
                continue
            path = normalize_path(candidate.relative_to(root).as_posix())
            if path in found:
                continue
            found[path] = Artifact(
                path=path,
                name=path.split("/")[-1],
                url=artifact_url(url_base, path),
                location=candidate.resolve(),
                kind=kind,
            )

    artifacts = [found[path] for path in sorted(found)]
    logger.debug(f"Discovered {len(artifacts)} {kind.value} artifact(s) under {root}")
    return artifacts
