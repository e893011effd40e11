from __future__ import annotations

import concurrent.futures
import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import structlog
from tqdm import tqdm

from blog_docs_index.config import Config, config_signature
from blog_docs_index.errors import MalformedMarkupError
from blog_docs_index.paths import make_paths

from .extractors import Extractor, new_extractor
from .field_sets import FieldOverrides
from .types import CanonicalDocument

log = structlog.get_logger()


def document_id_from_relpath(rel_path: str) -> str:
    cleaned = rel_path.replace("\\", "/")
    stem, dot, suffix = cleaned.rpartition(".")
    if dot and "/" not in suffix:
        cleaned = stem
    return cleaned.replace(" ", "-")


def load_source_paths(source_dir: Path, patterns: List[str]) -> List[Path]:
    found: Dict[str, Path] = {}
    for pattern in patterns:
        for path in source_dir.glob(pattern):
            if path.is_file():
                found.setdefault(path.as_posix(), path)
    return [found[key] for key in sorted(found)]


def _extract_one(
    extractor: Extractor, path: Path, document_id: str, encoding: str
) -> Tuple[Optional[CanonicalDocument], Optional[Dict[str, str]]]:
    try:
        content = path.read_text(encoding=encoding, errors="replace")
    except OSError as exc:
        log.warning("document_unreadable", document=document_id, error=str(exc))
        return None, {"document_id": document_id, "path": path.as_posix(), "error": str(exc)}
    try:
        return extractor.parse(content, document_id), None
    except MalformedMarkupError as exc:
        log.warning("document_skipped_malformed", document=document_id, error=str(exc))
        return None, {"document_id": document_id, "path": path.as_posix(), "error": str(exc)}


def extract_corpus(
    config: Config,
    source_dir: Path,
    overrides: Optional[FieldOverrides] = None,
    show_progress: bool = True,
) -> Dict[str, object]:
    """
    Extract every matching post under ``source_dir`` and write the records as JSON lines.

    A post with malformed markup is skipped and listed under ``failed`` in the
    manifest; the rest of the run is unaffected.
    """
    paths = make_paths(config)
    paths.ensure_dirs()
    extractor = new_extractor(config.extract.format, config.site.base_url, overrides)

    source_paths = load_source_paths(source_dir, config.file_patterns())
    tasks = [
        (path, document_id_from_relpath(path.relative_to(source_dir).as_posix()))
        for path in source_paths
    ]

    documents: List[CanonicalDocument] = []
    failed: List[Dict[str, str]] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=config.extract.max_workers) as executor:
        results = executor.map(
            lambda task: _extract_one(extractor, task[0], task[1], config.extract.encoding), tasks
        )
        for document, failure in tqdm(
            results, total=len(tasks), desc="Extract documents", disable=not show_progress
        ):
            if failure is not None:
                failed.append(failure)
            if document is not None:
                documents.append(document)

    with paths.documents_path.open("w", encoding="utf-8") as f_docs:
        for document in documents:
            f_docs.write(json.dumps(document.to_dict(), ensure_ascii=False) + "\n")

    manifest = {
        "format": config.extract.format,
        "base_url": config.site.base_url,
        "source_dir": source_dir.as_posix(),
        "documents": len(documents),
        "failed": failed,
        "config_signature": config_signature(config),
    }
    with paths.manifest_path.open("w", encoding="utf-8") as f_manifest:
        json.dump(manifest, f_manifest, indent=2)

    log.info("extract_corpus_done", documents=len(documents), failed=len(failed))
    return {
        "documents": len(documents),
        "failed": len(failed),
        "documents_path": paths.documents_path.as_posix(),
        "manifest_path": paths.manifest_path.as_posix(),
    }
