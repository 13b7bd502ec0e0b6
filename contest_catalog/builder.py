"""
Catalog builder for the contest archive.

Builds the record list the site renders from a content tree:
- Discovers documents (PDF statements), inputs and JSON sidecars
- Groups them by folder + basename
- Resolves titles from sidecars or from the statement's first page
- Validates every record and optionally writes catalog.json

Every build rescans the tree. A single broken pairing aborts the whole build.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from concurrent import futures
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from pydantic import ValidationError

from .config import CatalogSettings, TitleSource
from .discovery import Artifact, ArtifactKind, artifact_url, discover_artifacts
from .errors import MissingDocumentError, PathStructureError, RecordValidationError
from .metadata_parser import SidecarMetadata, load_metadata
from .schema import CatalogRecord, FileEntry, FileLink
from .title_extractor import extract_title

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

METADATA_SUFFIX = ".json"
MIN_RECORD_SEGMENTS = 4  # type/year/round/basename


def group_key(artifact: Artifact, document_extension: str = ".pdf") -> str:
    """Strip the kind-specific suffix from an artifact path.

    Example:
        >>> doc = Artifact("hashcodes/2023/r1/p.pdf", "p.pdf", "/x", Path("p.pdf"), ArtifactKind.DOCUMENT)
        >>> group_key(doc)
        'hashcodes/2023/r1/p'
    """
    if artifact.kind == ArtifactKind.METADATA:
        suffix = METADATA_SUFFIX
    elif artifact.kind == ArtifactKind.DOCUMENT:
        suffix = document_extension
    else:
        return artifact.path
    if artifact.path.lower().endswith(suffix.lower()):
        return artifact.path[: -len(suffix)]
    return artifact.path


def split_record_path(path: str) -> Tuple[str, str, str]:
    """Return (type, year, round) from a type/year/round/.../basename path.

    Raises:
        PathStructureError: If the path has fewer than four segments
    """
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < MIN_RECORD_SEGMENTS:
        raise PathStructureError(
            f"Expected <type>/<year>/<round>/<name> but got: {path}", path=path
        )
    return segments[0], segments[1], segments[2]


def is_input_of(input_path: str, key: str, marker: str = ".in") -> bool:
    """True for "<key>.in" itself or any file inside a "<key>.in/" directory."""
    prefix = f"{key}{marker}"
    return input_path == prefix or input_path.startswith(f"{prefix}/")


class CatalogBuilder:
    """Builds contest catalog records from a content tree."""

    def __init__(
        self,
        settings: Optional[CatalogSettings] = None,
        title_extractor: Callable[[Artifact], str] = extract_title,
    ):
        """Initialize catalog builder.

        Args:
            settings: Builder configuration (default: read from the environment)
            title_extractor: Callable resolving a title from a document artifact
        """
        self.settings = settings or CatalogSettings.from_env()
        self.content_root = Path(self.settings.content_root)
        self.title_extractor = title_extractor

    def build(self) -> List[CatalogRecord]:
        """Scan the content tree and return validated records.

        Returns:
            Records sorted by group key; empty when there are no documents

        Raises:
            FileNotFoundError: If the content root does not exist
            CatalogBuildError: On any missing document, bad path, unreadable
                metadata or invalid record. No partial result is returned.
        """
        executor = self._create_executor()
        try:
            documents, inputs, sidecars = self._discover(executor)
            metadata = dict(zip(
                [group_key(sidecar) for sidecar in sidecars],
                self._map(executor, load_metadata, sidecars),
            ))
            documents_by_key = {
                group_key(doc, self.settings.document_extension): doc for doc in documents
            }

            sources = self._resolve_sources(documents_by_key, sidecars)

            # Parse each document at most once, and only when no sidecar names it
            to_extract = [doc for key, doc in sources if key not in metadata]
            titles = dict(zip(
                [doc.path for doc in to_extract],
                self._map(executor, self.title_extractor, to_extract),
            ))
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        records: Dict[str, CatalogRecord] = {}
        for key, document in sources:
            record = self._assemble(key, document, metadata.get(key), titles.get(document.path), inputs)
            if record.id in records:
                logger.warning(
                    f"Duplicate record id '{record.id}': {records[record.id].group_key} "
                    f"replaced by {record.group_key}"
                )
            records[record.id] = record

        result = sorted(records.values(), key=lambda r: r.group_key)
        logger.info(
            f"Built {len(result)} record(s) from {len(documents)} document(s), "
            f"{len(sidecars)} sidecar(s), {len(inputs)} input file(s)"
        )
        return result

    def build_file_index(self) -> List[FileEntry]:
        """List every published file below <content root>/<type>.

        Returns:
            FileEntry per file, sorted by id; empty if the type folder is missing

        Raises:
            FileNotFoundError: If the content root does not exist
        """
        if not self.content_root.is_dir():
            raise FileNotFoundError(f"Content root not found: {self.content_root}")

        type_root = self.content_root / self.settings.record_type
        if not type_root.is_dir():
            return []

        entries = []
        for file_path in sorted(p for p in type_root.rglob("*") if p.is_file()):
            rel = file_path.relative_to(type_root).as_posix()
            parts = rel.split("/")[:-1]
            entries.append(FileEntry(
                id=rel,
                year=parts[0] if parts else "",
                round=parts[1] if len(parts) > 1 else "",
                file=file_path.name,
                url=artifact_url(self.settings.url_base, f"{self.settings.record_type}/{rel}"),
            ))
        return entries

    def save(self, records: Sequence[CatalogRecord], output: Optional[Path] = None) -> Dict:
        """Write records to a catalog JSON file.

        Args:
            records: Records returned by build()
            output: Target file (default: settings.output)

        Returns:
            Dictionary with build statistics
        """
        output = Path(output or self.settings.output)

        catalog = {
            "version": "1.0",
            "created_at": datetime.now().isoformat(),
            "content_root": str(self.content_root),
            "total_records": len(records),
            "records": [record.model_dump(mode="json") for record in records],
        }
        write_json(output, catalog)

        return {
            "records_count": len(records),
            "output_file": str(output),
            "timestamp": catalog["created_at"],
            "by_year": self._count_by_field(records, "year"),
        }

    def _discover(self, executor) -> Tuple[List[Artifact], List[Artifact], List[Artifact]]:
        """Run the three discovery globs; returns only once all have finished."""
        s = self.settings
        jobs = [
            (s.document_patterns, ArtifactKind.DOCUMENT),
            (s.input_patterns, ArtifactKind.INPUT),
            (s.metadata_patterns, ArtifactKind.METADATA),
        ]
        documents, inputs, sidecars = self._map(
            executor,
            lambda job: discover_artifacts(self.content_root, job[0], job[1], s.url_base),
            jobs,
        )
        return documents, inputs, sidecars

    def _resolve_sources(
        self,
        documents_by_key: Dict[str, Artifact],
        sidecars: List[Artifact],
    ) -> List[Tuple[str, Artifact]]:
        """Pair every record source with its document, failing on the first gap."""
        sidecar_keys = []
        for sidecar in sidecars:
            key = group_key(sidecar)
            if key not in documents_by_key:
                raise MissingDocumentError(
                    f"Missing document for metadata {sidecar.path} "
                    f"(expected {key}{self.settings.document_extension})",
                    path=sidecar.path,
                )
            sidecar_keys.append(key)

        if self.settings.title_source == TitleSource.METADATA:
            skipped = set(documents_by_key) - set(sidecar_keys)
            for key in sorted(skipped):
                logger.warning(f"Skipping {documents_by_key[key].path}: no sidecar metadata")
            sources = [(key, documents_by_key[key]) for key in sidecar_keys]
        else:
            sources = sorted(documents_by_key.items())

        for _, document in sources:
            split_record_path(document.path)
        return sources

    def _assemble(
        self,
        key: str,
        document: Artifact,
        meta: Optional[SidecarMetadata],
        extracted_title: Optional[str],
        inputs: Iterable[Artifact],
    ) -> CatalogRecord:
        source_path = f"{key}{METADATA_SUFFIX}" if meta is not None else document.path
        _, path_year, path_round = split_record_path(source_path)
        record_type = self.settings.record_type

        year = (meta.year if meta else None) or path_year
        round_ = (meta.round if meta else None) or path_round
        linked_inputs = [
            FileLink(name=item.name, url=item.url)
            for item in inputs
            if is_input_of(item.path, key, self.settings.input_marker)
        ]

        try:
            return CatalogRecord(
                id=f"{record_type}-{year}-{round_}",
                type=record_type,
                year=year,
                round=round_,
                title=meta.title if meta else (extracted_title or ""),
                description=meta.description if meta else "",
                document=FileLink(name=document.name, url=document.url),
                inputs=linked_inputs,
                scoring=meta.scoring if meta else None,
                group_key=key,
            )
        except ValidationError as exc:
            raise RecordValidationError(
                f"Invalid catalog record for {source_path}: {exc}", path=source_path
            ) from exc

    def _create_executor(self) -> Optional[futures.Executor]:
        if self.settings.workers <= 1:
            return None
        return futures.ThreadPoolExecutor(
            max_workers=self.settings.workers, thread_name_prefix="catalog-build"
        )

    @staticmethod
    def _map(executor: Optional[futures.Executor], fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Apply fn to items in order; the first exception propagates."""
        if executor is None:
            return [fn(item) for item in items]
        return list(executor.map(fn, items))

    @staticmethod
    def _count_by_field(records: Sequence[CatalogRecord], field: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in records:
            value = getattr(record, field)
            counts[value] = counts.get(value, 0) + 1
        return counts


def write_json(output: Path, data) -> None:
    """Write JSON next to output and move it into place in one step.

    Readers see either the previous file or the complete new one.
    """
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output.name}.", suffix=".tmp", dir=output.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
        os.replace(tmp_name, output)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_catalog(catalog_file: Path) -> List[CatalogRecord]:
    """Read records back from a catalog JSON file.

    Raises:
        FileNotFoundError: If the catalog has not been built
    """
    catalog_file = Path(catalog_file)
    if not catalog_file.exists():
        raise FileNotFoundError("Catalog not found. Build catalog first.")

    catalog = json.loads(catalog_file.read_text(encoding="utf-8"))
    return [CatalogRecord.model_validate(item) for item in catalog["records"]]


def search_records(catalog_file: Path, **filters) -> List[CatalogRecord]:
    """Search a saved catalog by top-level record fields.

    Example:
        >>> search_records(Path("output/catalog.json"), year="2017")
        [CatalogRecord(id='hashcodes-2017-practice', ...)]
    """
    if not Path(catalog_file).exists():
        return []

    results = []
    for record in load_catalog(catalog_file):
        if all(getattr(record, k, None) == v for k, v in filters.items()):
            results.append(record)
    return results
