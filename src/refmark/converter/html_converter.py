"""Drive node events from an HTML document into one or more writers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .base import DocumentWriter, EventKind, Node, NodeEvent, normalize_tag

logger = logging.getLogger(__name__)


def convert(writers: Sequence[DocumentWriter], events: Iterable[NodeEvent]) -> None:
    """Dispatch every event to every writer that does not exclude its tag.

    Writers are opened and closed in list order, and all writers see an event
    before any of them sees the next one. The stream is not validated.
    """
    for writer in writers:
        writer.open()

    exclude = [
        {normalize_tag(tag) for tag in writer.exclude_tags()}
        for writer in writers
    ]

    count = 0
    for event in events:
        count += 1
        name = normalize_tag(event.node.tag)
        for writer, excluded in zip(writers, exclude):
            if name in excluded:
                continue
            _write_node(writer, event)

    for writer in writers:
        writer.close()

    logger.debug("Dispatched %d events to %d writers", count, len(writers))


def convert_html(writers: Sequence[DocumentWriter], html: str) -> None:
    """Clean *html*, parse it and convert it into every writer."""
    convert(writers, html_to_events(clean_html(html)))


def _write_node(writer: DocumentWriter, event: NodeEvent) -> None:
    if event.kind is EventKind.TEXT:
        writer.on_text(event.node)
    elif event.kind is EventKind.OPEN:
        writer.on_open(event.node)
    elif event.kind is EventKind.CLOSE:
        writer.on_close(event.node)


# ---------------------------------------------------------------------------
# Input cleanup
# ---------------------------------------------------------------------------

def is_html(text: str) -> bool:
    """Cheap check: HTML is anything longer than one character starting with ``<``."""
    return len(text) > 1 and text[0] == "<"


def clean_html(text: str) -> str:
    """Wrap HTML in a single root, or turn plain-text lines into paragraphs."""
    text = text.strip()
    if is_html(text):
        return f"<div>{text}</div>"

    paragraphs = []
    for line in text.split("\n"):
        cleaned = _collapse_whitespace(line.strip())
        if cleaned:
            paragraphs.append(f"<p>{cleaned}</p>")
    return "".join(paragraphs)


def _collapse_whitespace(text: str) -> str:
    text = text.replace("\n", " ").replace("\r", " ").replace("\t", " ")
    return re.sub(r"\s{2,}", " ", text).strip()


# ---------------------------------------------------------------------------
# HTML to node events
# ---------------------------------------------------------------------------

def html_to_events(html: str) -> Iterator[NodeEvent]:
    """Parse *html* and walk it depth-first as OPEN/TEXT/CLOSE events.

    Void elements (``br``, ``img``, ``hr``…) still produce a CLOSE event.
    Comments, doctypes and processing instructions are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    yield from _walk(soup, "")


def _walk(parent: Tag, parent_name: str) -> Iterator[NodeEvent]:
    for child in parent.children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            yield NodeEvent(EventKind.TEXT, Node(parent_name, str(child)))
        elif isinstance(child, Tag):
            node = Node(child.name, attributes=_attributes(child))
            yield NodeEvent(EventKind.OPEN, node)
            yield from _walk(child, node.tag)
            yield NodeEvent(EventKind.CLOSE, Node(node.tag))


def _attributes(tag: Tag) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        # Multi-valued attributes such as ``class`` come back as lists.
        if isinstance(value, list):
            value = " ".join(value)
        attrs[name] = value
    return attrs
