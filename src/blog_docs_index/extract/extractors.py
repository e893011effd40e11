from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple, Type, Union

import structlog
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .field_sets import FieldOverrides, HtmlFieldSet, TextFieldSet, merge_field_set
from .html_fields import DEFAULT_HTML_FIELDS, drop_comments, drop_unwanted_nodes
from .markdown_fields import DEFAULT_MARKDOWN_FIELDS
from .metadata import split_front_matter, split_multimarkdown
from .types import CanonicalDocument, Metadata

log = structlog.get_logger()

FRONTMATTER = "frontmatter"
MULTIMARKDOWN = "multimarkdown"
HTML = "html"
SUPPORTED_FORMATS = (FRONTMATTER, MULTIMARKDOWN, HTML)


def normalize_base_url(base_url: str) -> str:
    return base_url[:-1] if base_url.endswith("/") else base_url


class _TextExtractor:
    """
    Shared driver for the Markdown formats; subclasses pick the metadata convention.
    """

    fmt: str = ""
    split_metadata: Callable[[str], Tuple[Metadata, str]]

    def __init__(self, base_url: str, overrides: Optional[FieldOverrides] = None):
        self.base_url = normalize_base_url(base_url)
        self.fields: TextFieldSet = merge_field_set(DEFAULT_MARKDOWN_FIELDS, overrides)

    def extract_metadata(self, content: str) -> Metadata:
        metadata, _ = self.split_metadata(content)
        return metadata

    def parse(self, content: str, document_id: str) -> CanonicalDocument:
        metadata, body = self.split_metadata(content)
        if not metadata:
            log.debug("metadata_missing", format=self.fmt, document=document_id)
        fields = self.fields
        return CanonicalDocument(
            url=f"{self.base_url}/{document_id}",
            title=fields.title(metadata, body),
            published_date=fields.date(metadata, body),
            tags=fields.tags(metadata, body),
            sections=fields.sections(metadata, body),
            summary=fields.summary(metadata, body),
            paragraphs=fields.paragraphs(metadata, body),
            snippets=fields.snippets(metadata, body),
        )


class FrontMatterExtractor(_TextExtractor):
    fmt = FRONTMATTER
    split_metadata = staticmethod(split_front_matter)


class MultiMarkdownExtractor(_TextExtractor):
    fmt = MULTIMARKDOWN
    split_metadata = staticmethod(split_multimarkdown)


class HtmlExtractor:
    fmt = HTML

    def __init__(self, base_url: str, overrides: Optional[FieldOverrides] = None):
        self.base_url = normalize_base_url(base_url)
        self.fields: HtmlFieldSet = merge_field_set(DEFAULT_HTML_FIELDS, overrides)

    def parse(self, content: str, document_id: str) -> CanonicalDocument:
        url = f"{self.base_url}/{document_id}"
        try:
            soup = BeautifulSoup(content, "lxml")
        except ParserRejectedMarkup as exc:
            log.warning("html_parse_failed", document=document_id, error=str(exc))
            return CanonicalDocument.empty(url)
        if soup.find() is None:
            log.warning("html_parse_failed", document=document_id, error="no elements found")
            return CanonicalDocument.empty(url)

        drop_comments(soup)
        drop_unwanted_nodes(soup)
        fields = self.fields
        return CanonicalDocument(
            url=url,
            title=fields.title(soup),
            published_date=fields.date(soup),
            tags=fields.tags(soup),
            sections=fields.sections(soup),
            summary=fields.summary(soup),
            paragraphs=fields.paragraphs(soup),
            snippets=fields.snippets(soup),
        )


Extractor = Union[FrontMatterExtractor, MultiMarkdownExtractor, HtmlExtractor]

_EXTRACTORS: Dict[str, Type[Extractor]] = {
    FRONTMATTER: FrontMatterExtractor,
    MULTIMARKDOWN: MultiMarkdownExtractor,
    HTML: HtmlExtractor,
}


def new_extractor(fmt: str, base_url: str, overrides: Optional[FieldOverrides] = None) -> Extractor:
    key = (fmt or "").strip().lower()
    if key not in _EXTRACTORS:
        raise ValueError(f"Unsupported document format: {fmt!r}. Expected one of: {', '.join(SUPPORTED_FORMATS)}.")
    return _EXTRACTORS[key](base_url, overrides)
