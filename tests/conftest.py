from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import pytest

from contest_catalog.config import CatalogSettings, TitleSource


def _pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def make_pdf(pages: List[List[str]]) -> bytes:
    """Write a minimal PDF with one Helvetica text line per entry."""
    page_count = len(pages)
    font_num = 3 + 2 * page_count
    objects = {
        1: "<< /Type /Catalog /Pages 2 0 R >>",
        2: "<< /Type /Pages /Kids [{}] /Count {} >>".format(
            " ".join(f"{3 + 2 * i} 0 R" for i in range(page_count)), page_count
        ),
        font_num: "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    for i, lines in enumerate(pages):
        ops = ["BT", "/F1 18 Tf", "72 720 Td"]
        for n, line in enumerate(lines):
            if n:
                ops.append("0 -30 Td")
            ops.append(f"({_pdf_string(line)}) Tj")
        ops.append("ET")
        stream = "\n".join(ops)
        objects[3 + 2 * i] = (
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Contents {4 + 2 * i} 0 R /Resources << /Font << /F1 {font_num} 0 R >> >> >>"
        )
        objects[4 + 2 * i] = f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream"

    out = b"%PDF-1.4\n"
    offsets = {}
    for num in sorted(objects):
        offsets[num] = len(out)
        out += f"{num} 0 obj\n{objects[num]}\nendobj\n".encode("latin-1")
    xref_at = len(out)
    size = max(objects) + 1
    out += f"xref\n0 {size}\n0000000000 65535 f \n".encode("latin-1")
    for num in range(1, size):
        out += f"{offsets[num]:010d} 00000 n \n".encode("latin-1")
    out += f"trailer\n<< /Size {size} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode("latin-1")
    return out


class ContentTree:
    """Helper for laying out a content root in tmp_path."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add_pdf(self, rel: str, lines: Optional[List[str]] = None, pages: Optional[List[List[str]]] = None) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(make_pdf(pages or [lines or ["Untitled Problem"]]))
        return path

    def add_json(self, rel: str, data) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def add_text(self, rel: str, text: str = "1 2 3\n") -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def settings(self, **overrides) -> CatalogSettings:
        values = {
            "content_root": self.root,
            "title_source": TitleSource.METADATA,
            "workers": 1,
            "output": self.root.parent / "output" / "catalog.json",
        }
        values.update(overrides)
        return CatalogSettings(**values)


@pytest.fixture
def content(tmp_path: Path) -> ContentTree:
    return ContentTree(tmp_path / "content")
