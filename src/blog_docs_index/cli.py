from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import structlog

from blog_docs_index.config import load_config, merge_config
from blog_docs_index.errors import MalformedMarkupError
from blog_docs_index.extract.batch import extract_corpus
from blog_docs_index.extract.extractors import FRONTMATTER, MULTIMARKDOWN, SUPPORTED_FORMATS, new_extractor
from blog_docs_index.extract.metadata import extract_front_matter_metadata, extract_multimarkdown_metadata

_METADATA_READERS = {
    FRONTMATTER: extract_front_matter_metadata,
    MULTIMARKDOWN: extract_multimarkdown_metadata,
}


def _read(path: str, encoding: str) -> str:
    return Path(path).read_text(encoding=encoding, errors="replace")


def _cmd_parse(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    fmt = args.format or config.extract.format
    base_url = args.base_url if args.base_url is not None else config.site.base_url
    document_id = args.id or Path(args.file).stem
    extractor = new_extractor(fmt, base_url)
    try:
        document = extractor.parse(_read(args.file, config.extract.encoding), document_id)
    except MalformedMarkupError as exc:
        print(f"[parse] {args.file}: {exc}")
        return 1
    print(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
    return 0


def _cmd_metadata(args: argparse.Namespace) -> int:
    metadata = _METADATA_READERS[args.format](_read(args.file, "utf-8"))
    print(json.dumps(metadata, indent=2, ensure_ascii=False))
    return 0


def _cmd_extract(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    overrides: dict = {}
    if args.format:
        overrides.setdefault("extract", {})["format"] = args.format
    if args.base_url is not None:
        overrides.setdefault("site", {})["base_url"] = args.base_url
    if args.output:
        overrides.setdefault("output", {})["documents_path"] = args.output
    if overrides:
        config = merge_config(config, overrides)

    source_dir = Path(args.source_dir)
    if not source_dir.is_dir():
        print(f"[extract] Source directory not found: {source_dir}")
        return 2
    stats = extract_corpus(config, source_dir, show_progress=not args.quiet)
    print(f"[extract] Extracted {stats['documents']} documents ({stats['failed']} failed).")
    print(f"[extract] Documents: {stats['documents_path']}")
    print(f"[extract] Manifest: {stats['manifest_path']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blogdocs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Extract one post and print its record as JSON.")
    parse_parser.add_argument("file", help="Post file to extract.")
    parse_parser.add_argument("--format", choices=SUPPORTED_FORMATS, default=None, help="Post format.")
    parse_parser.add_argument("--base-url", default=None, help="Base URL prefixed to the document id.")
    parse_parser.add_argument("--id", default=None, help="Document id (default: file name without suffix).")
    parse_parser.add_argument("--config", default=None, help="Optional config file path override.")
    parse_parser.set_defaults(func=_cmd_parse)

    metadata_parser = subparsers.add_parser("metadata", help="Print the metadata block of a Markdown post.")
    metadata_parser.add_argument("file", help="Markdown post.")
    metadata_parser.add_argument("--format", choices=sorted(_METADATA_READERS), default=FRONTMATTER)
    metadata_parser.set_defaults(func=_cmd_metadata)

    extract_parser = subparsers.add_parser("extract", help="Extract every post under a directory to JSON lines.")
    extract_parser.add_argument("source_dir", help="Directory holding the posts.")
    extract_parser.add_argument("--format", choices=SUPPORTED_FORMATS, default=None, help="Post format.")
    extract_parser.add_argument("--base-url", default=None, help="Base URL prefixed to each document id.")
    extract_parser.add_argument("--output", default=None, help="Output JSON lines path.")
    extract_parser.add_argument("--config", default=None, help="Optional config file path override.")
    extract_parser.add_argument("--quiet", action="store_true", help="Hide the progress bar.")
    extract_parser.set_defaults(func=_cmd_extract)
    return parser


def _configure_logging() -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging()
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
