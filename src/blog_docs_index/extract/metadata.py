from __future__ import annotations

import re
from typing import List, Tuple

from .types import Metadata

NEW_LINE = re.compile(r"\r\n|\r|\n")
EMPTY_LINE = re.compile(r"^\s*$")
METADATA_KEY = re.compile(r"[a-zA-Z0-9]")

FRONT_MATTER_DELIMITER = "---"
MULTIMARKDOWN_MARKERS = ("---", "...")


def split_lines(text: str) -> List[str]:
    return NEW_LINE.split(text)


def is_blank(line: str) -> bool:
    return EMPTY_LINE.match(line) is not None


def _front_matter_bounds(lines: List[str]) -> Tuple[int, int] | None:
    if not lines or lines[0] != FRONT_MATTER_DELIMITER:
        return None
    for index in range(1, len(lines)):
        if lines[index] == FRONT_MATTER_DELIMITER:
            return 0, index
    return None


def _parse_front_matter_lines(lines: List[str]) -> Metadata:
    metadata: Metadata = {}
    for line in lines:
        if ":" not in line:
            continue
        key, *parts = [part.strip() for part in line.split(":")]
        if not key:
            continue
        metadata[key] = ":".join(parts)
    return metadata


def split_front_matter(document: str) -> Tuple[Metadata, str]:
    """
    Split a Markdown post into its YAML-style front matter and the body.

        ---
        title: Sample title
        date: 2025-01-01
        ---

        Body starts at the first blank line after the block.

    A document without a closed ``---`` block has no metadata and its body is the
    whole document.
    """
    lines = split_lines(document)
    bounds = _front_matter_bounds(lines)
    if bounds is None:
        return {}, document

    start, end = bounds
    metadata = _parse_front_matter_lines(lines[start + 1 : end])
    rest = lines[end + 1 :]
    for offset, line in enumerate(rest):
        if is_blank(line):
            rest = rest[offset:]
            break
    return metadata, "\n".join(rest)


def extract_front_matter_metadata(document: str) -> Metadata:
    metadata, _ = split_front_matter(document)
    return metadata


def _first_blank_line(lines: List[str]) -> int | None:
    for index, line in enumerate(lines):
        if is_blank(line):
            return index
    return None


def _parse_multimarkdown_lines(lines: List[str]) -> Metadata:
    metadata: Metadata = {}
    key = ""
    for line in lines:
        if not line or line.startswith(MULTIMARKDOWN_MARKERS):
            continue
        if ":" in line and METADATA_KEY.match(line):
            name, _, value = line.partition(":")
            key = name.strip()
            value = value.strip()
            if key in metadata:
                metadata[key] += value
            else:
                metadata[key] = value
        elif key:
            # wrapped value, joined without a separator
            metadata[key] += line[line.find(":") + 1 :].strip()
    return metadata


def split_multimarkdown(document: str) -> Tuple[Metadata, str]:
    """
    Split a MultiMarkdown post into its header metadata and the body.

    The header has no closing delimiter, it ends at the first blank line. When no
    metadata is found the body is the whole document.
    """
    lines = split_lines(document)
    blank = _first_blank_line(lines)
    if blank is None:
        return {}, document
    metadata = _parse_multimarkdown_lines(lines[:blank])
    if not metadata:
        return {}, document
    return metadata, "\n".join(lines[blank + 1 :])


def extract_multimarkdown_metadata(document: str) -> Metadata:
    metadata, _ = split_multimarkdown(document)
    return metadata
