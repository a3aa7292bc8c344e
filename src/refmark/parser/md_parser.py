"""Read reference-style Markdown into sections and a reference table, and write it back."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from refmark.exceptions import DuplicateReferenceError, UnknownReferenceError

from .base import Reference, ReferenceType, Section, SectionType

logger = logging.getLogger(__name__)

CitationKind = Literal["image", "link"]

# Footer lines look like "  [12]: http://example.com".
_FOOTER_RE = re.compile(r"^\s+?\[(?P<id>\d{1,2})\]:\s+?(?P<url>.*?)$", re.MULTILINE)

# Citation text: plain characters or escaped brackets, plus one nested
# bracket pair so that linked images ``[![alt][2]][1]`` resolve. A backslash
# before a bracket is always an escape; the alternatives must not overlap or
# failed searches backtrack exponentially.
_TEXT = r"(?:\\[\[\]]|\\(?![\[\]])|[^\[\]\\])"
_TITLE = rf"(?:{_TEXT}|\[{_TEXT}*\])*"

_CITATION_MARKER_RE = re.compile(r"(?<!\\)\]\[(?P<id>\d{1,2})\]")


class MarkdownDocument:
    """Markdown split into typed sections plus the footer reference table.

    The document is mutated in place by :meth:`set_url`, :meth:`remove` and
    :meth:`remove_dead_references`; :attr:`markdown` regenerates the text.

    Every citation must name a footer reference. A citation of an unknown id
    is logged as a warning; pass ``strict=True`` to enforce the rule and get
    :class:`UnknownReferenceError` instead.
    """

    def __init__(self, markdown: str, *, strict: bool = False) -> None:
        self.sections: list[Section] = []
        self.references: dict[int, Reference] = {}

        text = markdown.replace("\r", "")

        self._read_footer(text)
        body = _FOOTER_RE.sub("", text).strip()
        self.sections = _read_sections(body)

        for section in self.sections:
            for reference in self.references.values():
                section.clean, titles = resolve_citations(section.clean, reference.id)
                reference.titles.extend(titles)

        self._check_orphans(strict)

    @classmethod
    def from_path(cls, path: Path, *, strict: bool = False) -> MarkdownDocument:
        return cls(Path(path).read_text(encoding="utf-8"), strict=strict)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def markdown(self) -> str:
        """Regenerate the Markdown, including any changes to references."""
        parts: list[str] = []
        for section in self.sections:
            raw = section.raw.strip()
            if not raw:
                continue
            parts.append(raw)
            parts.append("\n\n")

        for ref_id in sorted(self.references):
            parts.append(self.references[ref_id].footer_line())
            parts.append("\n")

        text = "".join(parts).strip()
        return f"{text}\n" if text else ""

    @property
    def clean(self) -> str:
        """The readable text of every section, separated by blank lines."""
        return "".join(f"{section.clean}\n\n" for section in self.sections)

    # ------------------------------------------------------------------
    # Reference access
    # ------------------------------------------------------------------

    def get_reference(self, ref_id: int) -> Reference:
        try:
            return self.references[ref_id]
        except KeyError:
            raise UnknownReferenceError(ref_id) from None

    def get_references(self, ref_type: ReferenceType) -> list[Reference]:
        return [r for r in self.references.values() if r.type is ref_type]

    def set_url(self, ref_id: int, url: str) -> None:
        """Point a reference at a new URL. Citations in the body are left alone."""
        reference = self.references.get(ref_id)
        if reference is None:
            return
        reference.url = url.strip()

    def remove(self, ref_id: int) -> None:
        """Remove a reference, replacing its link citations by their titles."""
        if ref_id not in self.references:
            return
        for section in self.sections:
            section.raw, _ = resolve_citations(section.raw, ref_id)
        del self.references[ref_id]
        logger.debug("Removed reference [%d]", ref_id)

    # ------------------------------------------------------------------
    # Dead reference pruning
    # ------------------------------------------------------------------

    def strip_empty_links(self) -> None:
        """Delete link citations with an empty title, ``[][n]``."""
        for reference in self.get_references(ReferenceType.LINK):
            self._strip_empty_links(reference)

    def is_live(self, reference: Reference) -> bool:
        """True if any section still cites *reference*.

        Links only count when the citation has a non-blank title. Kinds other
        than links and images are always considered live.
        """
        if reference.type is ReferenceType.LINK:
            pattern = citation_pattern(reference.id, "link")
            return any(
                match.group("title").strip()
                for section in self.sections
                for match in pattern.finditer(section.raw)
            )
        if reference.type is ReferenceType.IMAGE:
            pattern = citation_pattern(reference.id, "image")
            return any(pattern.search(section.raw) for section in self.sections)
        return True

    def remove_dead_references(self) -> int:
        """Remove unused references until none are left; return how many went.

        Removing one reference rewrites citation text, which can expose an
        empty citation of another (``[[][2]][1]``), so passes repeat until one
        removes nothing. Every pass but the last removes at least one
        reference, which bounds the number of passes.
        """
        removed = 0
        for pass_no in range(len(self.references) + 1):
            changed = 0
            for reference in list(self.references.values()):
                if reference.id not in self.references:
                    continue
                if reference.type is ReferenceType.LINK:
                    self._strip_empty_links(reference)
                if self.is_live(reference):
                    continue
                self.remove(reference.id)
                changed += 1
            logger.debug("Prune pass %d removed %d references", pass_no + 1, changed)
            removed += changed
            if not changed:
                break
        return removed

    def _strip_empty_links(self, reference: Reference) -> None:
        empty = f"[][{reference.id}]"
        for section in self.sections:
            section.raw = section.raw.replace(empty, "")

    def _read_footer(self, text: str) -> None:
        for match in _FOOTER_RE.finditer(text):
            ref_id = int(match.group("id"))
            url = match.group("url").strip()
            if ref_id in self.references:
                raise DuplicateReferenceError(ref_id, url)

            # References are links unless something shows them as an image.
            reference = Reference(id=ref_id, url=url, type=ReferenceType.LINK)
            if citation_pattern(ref_id, "image").search(text):
                reference.type = ReferenceType.IMAGE
            self.references[ref_id] = reference

    def _check_orphans(self, strict: bool) -> None:
        for section in self.sections:
            for match in _CITATION_MARKER_RE.finditer(section.raw):
                ref_id = int(match.group("id"))
                if ref_id in self.references:
                    continue
                if strict:
                    raise UnknownReferenceError(ref_id)
                logger.warning("Citation of unknown reference [%d] in %r", ref_id, section.raw)


# ---------------------------------------------------------------------------
# Citations
# ---------------------------------------------------------------------------

@lru_cache(maxsize=256)
def citation_pattern(ref_id: int, kind: CitationKind) -> re.Pattern[str]:
    """Regex for ``![alt][id]`` (image) or ``[title][id]`` (link) citations."""
    prefix = r"!" if kind == "image" else ""
    return re.compile(rf"{prefix}\[(?P<title>{_TITLE})\]\[{ref_id}\]")


def rewrite_citations(text: str, ref_id: int, kind: CitationKind) -> tuple[str, list[str]]:
    """Replace citations of *ref_id*: images vanish, links become their title.

    Returns the new text and the titles (or alt texts) that were found.
    """
    titles: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        title = match.group("title")
        titles.append(title)
        return title if kind == "link" else ""

    return citation_pattern(ref_id, kind).sub(_replace, text), titles


def resolve_citations(text: str, ref_id: int) -> tuple[str, list[str]]:
    """Rewrite image citations, then link citations, of *ref_id*."""
    text, image_titles = rewrite_citations(text, ref_id, "image")
    text, link_titles = rewrite_citations(text, ref_id, "link")
    return text, image_titles + link_titles


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _read_sections(body: str) -> list[Section]:
    sections: list[Section] = []
    for line in re.split(r"[\n\r]", body):
        line = line.strip()
        if not line:
            continue

        if line == "---":
            section_type = SectionType.LINE
        elif line[0] == "#":
            section_type = SectionType.HEADING
        elif line[0] == "-":
            # Consecutive bullet lines form one section.
            if sections and sections[-1].type is SectionType.BULLET:
                sections[-1] = _make_section(SectionType.BULLET, f"{sections[-1].raw}\n{line}")
                continue
            section_type = SectionType.BULLET
        elif line[0] == ">":
            section_type = SectionType.QUOTE
        else:
            section_type = SectionType.PARAGRAPH

        sections.append(_make_section(section_type, line))
    return sections


def _make_section(section_type: SectionType, raw: str) -> Section:
    return Section(type=section_type, raw=raw, clean=_clean_text(section_type, raw))


def _clean_text(section_type: SectionType, raw: str) -> str:
    if section_type is SectionType.BULLET:
        return "\n".join(line[1:].strip() for line in raw.split("\n")).strip()
    if section_type is SectionType.HEADING:
        return raw.strip("#").strip()
    if section_type is SectionType.QUOTE:
        return raw[1:].strip()
    if section_type is SectionType.LINE:
        return ""
    return raw
