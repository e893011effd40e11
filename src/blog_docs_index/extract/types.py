from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

Metadata = Dict[str, str]


@dataclass(frozen=True)
class CanonicalDocument:
    url: str
    title: str = ""
    published_date: Optional[datetime] = None
    tags: Tuple[str, ...] = ()
    sections: Tuple[str, ...] = ()
    summary: str = ""
    paragraphs: Tuple[str, ...] = ()
    snippets: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("CanonicalDocument.url must be a non-empty string")
        for name in ("tags", "sections", "paragraphs", "snippets"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @classmethod
    def empty(cls, url: str) -> "CanonicalDocument":
        return cls(url=url)

    def to_dict(self) -> Dict[str, Any]:
        """
        Payload handed to the indexing client.
        """
        return {
            "url": self.url,
            "title": self.title,
            "date": self.published_date.isoformat() if self.published_date else None,
            "tags": list(self.tags),
            "sections": list(self.sections),
            "summary": self.summary,
            "paragraphs": list(self.paragraphs),
            "snippets": list(self.snippets),
        }
