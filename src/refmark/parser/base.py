"""Sections and references read back from Markdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SectionType(Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET = "bullet"
    QUOTE = "quote"
    LINE = "line"


class ReferenceType(Enum):
    IMAGE = "image"
    LINK = "link"
    YOU_TUBE = "youtube"
    VIMEO = "vimeo"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class Section:
    """One block of a Markdown document.

    ``raw`` is the Markdown as written (and as rewritten by reference edits);
    ``clean`` is the human-readable text with citation syntax resolved.
    """

    type: SectionType
    raw: str
    clean: str = ""


@dataclass(slots=True)
class Reference:
    id: int
    url: str
    type: ReferenceType = ReferenceType.LINK
    titles: list[str] = field(default_factory=list)

    def footer_line(self) -> str:
        return f"  [{self.id}]: {self.url}"
