"""Split a document into title, body, paragraph and sentence fragments."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from refmark.converter.base import TAG_BLACKLIST, Node

_PARAGRAPH_TAGS = frozenset({"p", "br", "h1", "h2", "h3", "h4", "li", "hr"})
_SENTENCE_RE = re.compile(r"[^.?!:;]*[.?!:;]?")


class FragmentType(Enum):
    TITLE = "title"
    BODY = "body"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"


@dataclass(slots=True)
class Fragment:
    type: FragmentType
    text: str


def split_sentences(text: str, min_length: int = 3) -> list[str]:
    """Split on terminal punctuation, keeping pieces longer than *min_length*."""
    return [s for s in _SENTENCE_RE.findall(text) if len(s) > min_length]


class FragmentRenderer:
    """Writer that collects the fragments of a document."""

    def __init__(self, default_title: str, min_sentence_length: int = 3) -> None:
        self.default_title = default_title
        self.min_sentence_length = min_sentence_length
        self.fragments: list[Fragment] = []
        self._body: list[str] = []
        self._paragraph: list[str] = []
        self._head_depth = 0

    def exclude_tags(self) -> Iterable[str]:
        # head, meta and title are needed to find the document title.
        return [tag for tag in TAG_BLACKLIST if tag not in ("head", "meta", "title")]

    def open(self) -> None:
        self.fragments = []
        self._body = []
        self._paragraph = []
        self._head_depth = 0

    def on_open(self, node: Node) -> None:
        if node.tag == "head":
            self._head_depth += 1
        elif node.tag == "meta" and node["name"].lower() == "title" and node["content"].strip():
            self._add(FragmentType.TITLE, node["content"].strip())

    def on_text(self, node: Node) -> None:
        if node.tag == "title":
            if node.text.strip():
                self._add(FragmentType.TITLE, node.text.strip())
            return
        if self._head_depth or node.tag in ("head", "meta"):
            return
        self._body.append(node.text)
        self._paragraph.append(node.text)

    def on_close(self, node: Node) -> None:
        if node.tag == "head":
            self._head_depth = max(0, self._head_depth - 1)
        elif node.tag in _PARAGRAPH_TAGS:
            self._close_paragraph()

    def close(self) -> None:
        self._close_paragraph()
        self._add(FragmentType.BODY, "".join(self._body))
        self._body = []
        if not self.get_fragments(FragmentType.TITLE):
            self._add(FragmentType.TITLE, self.default_title)

    def get_fragments(self, fragment_type: FragmentType) -> list[Fragment]:
        return [f for f in self.fragments if f.type is fragment_type]

    def _close_paragraph(self) -> None:
        text = "".join(self._paragraph).strip()
        if text:
            self._add(FragmentType.PARAGRAPH, text)
            for sentence in split_sentences(text, self.min_sentence_length):
                self._add(FragmentType.SENTENCE, sentence)
        self._paragraph = []

    def _add(self, fragment_type: FragmentType, text: str) -> None:
        self.fragments.append(Fragment(fragment_type, text))
