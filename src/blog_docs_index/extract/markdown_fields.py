from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from .dates import parse_date
from .field_sets import TextFieldSet
from .metadata import is_blank, split_lines
from .tag_strip import strip_tags
from .types import Metadata

SECTION = re.compile(r"^\s*#{2,}\s*(.+)$")
HEADING = re.compile(r"^\s*#+\s*\S")
CODE_FENCE = re.compile(r"^\s*```")


def is_fence(line: str) -> bool:
    return CODE_FENCE.match(line) is not None


def end_of_code_block(lines: List[str], start: int) -> int:
    """
    Index of the fence closing the block opened before ``start``, or ``len(lines)``.
    """
    index = start
    while index < len(lines) and not is_fence(lines[index]):
        index += 1
    return index


def parse_title(metadata: Metadata, body: str) -> str:
    return strip_tags(metadata.get("title", "")).strip()


def parse_date_field(metadata: Metadata, body: str) -> Optional[datetime]:
    return parse_date(strip_tags(metadata.get("date", "")))


def parse_tags(metadata: Metadata, body: str) -> List[str]:
    raw = metadata.get("tags", "")
    if not raw:
        return []
    return [strip_tags(tag.strip()) for tag in raw.split("|")]


def parse_sections(metadata: Metadata, body: str) -> List[str]:
    """
    Headings of level two and deeper, in document order. Fenced code is not scanned.
    """
    lines = split_lines(body)
    sections: List[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if is_fence(line):
            index = end_of_code_block(lines, index + 1) + 1
            continue
        match = SECTION.match(line)
        if match:
            sections.append(strip_tags(match.group(1).strip()).strip())
        index += 1
    return sections


def parse_summary(metadata: Metadata, body: str) -> str:
    return strip_tags(metadata.get("summary", "")).strip()


def parse_paragraphs(metadata: Metadata, body: str) -> List[str]:
    """
    Blank line separated blocks of prose.

    Lines in fenced code blocks are skipped, and so is the block a heading line
    belongs to. The lines of a paragraph are kept joined by newlines.
    """
    lines = split_lines(body)
    paragraphs: List[str] = []
    block: List[str] = []
    after_heading = False

    def flush() -> None:
        if block:
            paragraphs.append(strip_tags("\n".join(block)).strip())
            block.clear()

    index = 0
    while index < len(lines):
        line = lines[index]
        if is_fence(line):
            flush()
            after_heading = False
            index = end_of_code_block(lines, index + 1) + 1
            continue
        if HEADING.match(line):
            flush()
            after_heading = True
        elif is_blank(line):
            flush()
            after_heading = False
        elif not after_heading:
            block.append(line)
        index += 1
    flush()
    return paragraphs


def parse_snippets(metadata: Metadata, body: str) -> List[str]:
    """
    Contents of every fenced code block. An unterminated fence yields nothing.
    """
    lines = split_lines(body)
    snippets: List[str] = []
    index = 0
    while index < len(lines):
        if is_fence(lines[index]):
            end = end_of_code_block(lines, index + 1)
            if end == len(lines):
                break
            snippet = strip_tags("\n".join(lines[index + 1 : end])).strip()
            if snippet:
                snippets.append(snippet)
            index = end + 1
            continue
        index += 1
    return snippets


DEFAULT_MARKDOWN_FIELDS = TextFieldSet(
    title=parse_title,
    date=parse_date_field,
    tags=parse_tags,
    sections=parse_sections,
    summary=parse_summary,
    paragraphs=parse_paragraphs,
    snippets=parse_snippets,
)
