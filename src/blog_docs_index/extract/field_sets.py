from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Callable, List, Mapping, Optional, TypeVar

from bs4 import BeautifulSoup

from .types import Metadata

FIELD_NAMES = ("title", "date", "tags", "sections", "summary", "paragraphs", "snippets")

FieldOverrides = Mapping[str, Callable]


@dataclass(frozen=True)
class TextFieldSet:
    """Field functions for the string based formats, called as ``fn(metadata, body)``."""

    title: Callable[[Metadata, str], str]
    date: Callable[[Metadata, str], Optional[datetime]]
    tags: Callable[[Metadata, str], List[str]]
    sections: Callable[[Metadata, str], List[str]]
    summary: Callable[[Metadata, str], str]
    paragraphs: Callable[[Metadata, str], List[str]]
    snippets: Callable[[Metadata, str], List[str]]


@dataclass(frozen=True)
class HtmlFieldSet:
    """Field functions for HTML posts, called as ``fn(soup)``."""

    title: Callable[[BeautifulSoup], str]
    date: Callable[[BeautifulSoup], Optional[datetime]]
    tags: Callable[[BeautifulSoup], List[str]]
    sections: Callable[[BeautifulSoup], List[str]]
    summary: Callable[[BeautifulSoup], str]
    paragraphs: Callable[[BeautifulSoup], List[str]]
    snippets: Callable[[BeautifulSoup], List[str]]


FieldSetT = TypeVar("FieldSetT", TextFieldSet, HtmlFieldSet)


def merge_field_set(defaults: FieldSetT, overrides: Optional[FieldOverrides] = None) -> FieldSetT:
    """
    Return ``defaults`` with the functions named in ``overrides`` swapped in.
    """
    if not overrides:
        return defaults
    known = {f.name for f in fields(defaults)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(
            f"Unknown field override(s): {', '.join(unknown)}. "
            f"Expected any of: {', '.join(FIELD_NAMES)}."
        )
    not_callable = sorted(name for name, fn in overrides.items() if not callable(fn))
    if not_callable:
        raise ValueError(f"Field override(s) must be callable: {', '.join(not_callable)}")
    return replace(defaults, **dict(overrides))
