"""Converter package."""

from .base import TAG_BLACKLIST, DocumentWriter, EventKind, Node, NodeEvent
from .html_converter import clean_html, convert, convert_html, html_to_events, is_html

__all__ = [
    "TAG_BLACKLIST",
    "DocumentWriter",
    "EventKind",
    "Node",
    "NodeEvent",
    "clean_html",
    "convert",
    "convert_html",
    "html_to_events",
    "is_html",
]
