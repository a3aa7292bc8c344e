"""Parser package."""

from .base import Reference, ReferenceType, Section, SectionType
from .md_parser import MarkdownDocument, citation_pattern, resolve_citations, rewrite_citations

__all__ = [
    "MarkdownDocument",
    "Reference",
    "ReferenceType",
    "Section",
    "SectionType",
    "citation_pattern",
    "resolve_citations",
    "rewrite_citations",
]
