"""
Title extraction from contest PDFs.

Used when a statement has no sidecar metadata. The first page is turned into
text, split into trimmed lines, and the first line that looks like a title is
kept: longer than 3 characters (drops language codes such as "EN") and without
a four-digit run (drops year stamps printed near the title).

Short titles and titles containing a year are misdetected. That is a known
limit of the heuristic.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .discovery import Artifact
from .errors import TitleResolutionError

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 4
YEAR_RUN_RE = re.compile(r"\d{4}")


def split_lines(text: str) -> List[str]:
    """Flatten extracted page text into trimmed, non-empty lines."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def pick_title(lines: Iterable[str]) -> Optional[str]:
    """Return the first line that passes the title heuristic.

    Example:
        >>> pick_title(["EN", "Qualification Round", "2023"])
        'Qualification Round'
    """
    for line in lines:
        candidate = line.strip()
        if len(candidate) < MIN_TITLE_LENGTH:
            continue
        if YEAR_RUN_RE.search(candidate):
            continue
        return candidate
    return None


def first_page_lines(artifact: Artifact) -> List[str]:
    """Extract the text lines of a document's first page.

    Raises:
        TitleResolutionError: If the PDF cannot be read or has no pages
    """
    try:
        with artifact.open() as stream:
            reader = PdfReader(stream)
            if len(reader.pages) == 0:
                raise TitleResolutionError(
                    f"Document has no pages: {artifact.path}", path=artifact.path
                )
            text = reader.pages[0].extract_text() or ""
    except (OSError, ValueError, PyPdfError) as exc:
        raise TitleResolutionError(
            f"Cannot read document {artifact.path}: {exc}", path=artifact.path
        ) from exc
    return split_lines(text)


def extract_title(artifact: Artifact) -> str:
    """Resolve a display title from the first page of a document.

    Raises:
        TitleResolutionError: If no line qualifies as a title
    """
    lines = first_page_lines(artifact)
    title = pick_title(lines)
    if title is None:
        raise TitleResolutionError(
            f"No title found on the first page of {artifact.path}", path=artifact.path
        )
    logger.debug(f"Extracted title '{title}' from {artifact.path}")
    return title


if __name__ == "__main__":
    import sys
    from pathlib import Path

    from .discovery import ArtifactKind

    for arg in sys.argv[1:]:
        pdf_path = Path(arg)
        doc = Artifact(
            path=pdf_path.name,
            name=pdf_path.name,
            url=pdf_path.as_uri() if pdf_path.is_absolute() else pdf_path.name,
            location=pdf_path,
            kind=ArtifactKind.DOCUMENT,
        )
        try:
            print(f"✓ {pdf_path.name}: {extract_title(doc)}")
        except TitleResolutionError as e:
            print(f"✗ Error: {e}")
