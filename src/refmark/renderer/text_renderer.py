"""Render node events into plain text."""

from __future__ import annotations

from collections.abc import Iterable

from refmark.converter.base import TAG_BLACKLIST, Node

_BREAK_TAGS = frozenset({"p", "br", "h1", "h2", "h3", "h4", "li"})


class TextRenderer:
    """Writer that keeps only the text, breaking lines after block elements."""

    def __init__(self, line_feeds: bool = True) -> None:
        self.line_feeds = line_feeds
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def exclude_tags(self) -> Iterable[str]:
        return TAG_BLACKLIST

    def open(self) -> None:
        self._parts = []

    def on_open(self, node: Node) -> None:
        pass

    def on_text(self, node: Node) -> None:
        self._parts.append(node.text)

    def on_close(self, node: Node) -> None:
        if node.tag in _BREAK_TAGS:
            self._parts.append("\n" if self.line_feeds else " ")
        elif node.tag == "hr":
            self._parts.append("\n\n" if self.line_feeds else " ")

    def close(self) -> None:
        pass
