"""Render node events into reference-style Markdown."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from refmark.converter.base import TAG_BLACKLIST, Node

_DEEP_HEADINGS = ("h3", "h4", "h5", "h6", "h7", "h8", "h9")

OPEN_MAP: Mapping[str, str] = MappingProxyType(
    {
        "p": "",
        "italic": "*",
        "em": "*",
        "i": "*",
        "strong": "**",
        "b": "**",
        "h1": "\n\n#",
        "h2": "\n\n##",
        **{tag: "\n\n###" for tag in _DEEP_HEADINGS},
        "blockquote": ">",
        "li": "\n- ",
        "a": "[",
        "img": "![",
    }
)

CLOSE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "p": "\n\n",
        "br": "\n\n",
        "italic": "*",
        "em": "*",
        "i": "*",
        "strong": "**",
        "b": "**",
        "h1": "#\n\n",
        "h2": "##\n\n",
        **{tag: "###\n\n" for tag in _DEEP_HEADINGS},
        "hr": "\n---\n\n",
        "li": "\n",
        "a": "]",
    }
)

# Applied in order; the backslash itself is never escaped.
ESCAPE_MAP: tuple[tuple[str, str], ...] = (
    ("*", r"\*"),
    ("[", r"\["),
    ("]", r"\]"),
    ("&#8216;", "'"),
    ("&#8217;", "'"),
    ("&#8212;", "--"),
    ("&#8220;", '"'),
    ("&#8221;", '"'),
    ("\u2018", "'"),
    ("\u2019", "'"),
    ("\u2014", "--"),
    ("\u201c", '"'),
    ("\u201d", '"'),
    ("#", r"\#"),
)

_LEADING_IMAGE_RE = re.compile(r"^(?P<image>!\[.*?\]\[\d\d?\])\s*(?P<paragraph>.+)$")
_FOOTER_LINE_RE = re.compile(r"^\[\d\d?\]:")


def escape_text(text: str) -> str:
    """Escape characters that carry meaning in Markdown."""
    for find, replace in ESCAPE_MAP:
        text = text.replace(find, replace)
    return text


class MarkdownRenderer:
    """Writer that converts a document to Markdown with numbered references.

    Links and images become ``[title][n]`` and ``![alt][n]``; the URLs are
    listed once each, in first-seen order, in a footer of ``[n]: url`` lines.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._stack: list[str | None] = []
        self.references: list[str] = []
        self.markdown = ""

    def exclude_tags(self) -> Iterable[str]:
        return TAG_BLACKLIST

    def open(self) -> None:
        self._parts = []
        self._stack = []
        self.references = []
        self.markdown = ""

    def on_open(self, node: Node) -> None:
        if node.tag == "a":
            if not node.has("href"):
                self._stack.append(None)
                return
            self._parts.append(OPEN_MAP["a"])
            self._push_reference(node["href"])
        elif node.tag == "img":
            if not node.has("src"):
                return
            num = self._push_reference(node["src"])
            self._parts.append(OPEN_MAP["img"])
            self._parts.append(escape_text(node["alt"]))
            self._parts.append(f"][{num}]")
            self._pop_reference()
        else:
            self._parts.append(OPEN_MAP.get(node.tag, ""))

    def on_text(self, node: Node) -> None:
        self._parts.append(escape_text(node.text))

    def on_close(self, node: Node) -> None:
        if node.tag == "a":
            num = self._pop_reference()
            if num:
                self._parts.append(f"{CLOSE_MAP['a']}[{num}]")
            return
        self._parts.append(CLOSE_MAP.get(node.tag, ""))

    def close(self) -> None:
        self._parts.append("\n")
        if self.references:
            self._parts.append("\n")
            for idx, url in enumerate(self.references, start=1):
                self._parts.append(f"[{idx}]: {url}\n")

        self.markdown = _normalize_lines("".join(self._parts))
        self._parts = []

    def _push_reference(self, url: str) -> int:
        if url not in self.references:
            self.references.append(url)
        self._stack.append(url)
        return self.references.index(url) + 1

    def _pop_reference(self) -> int:
        """Pop the current reference and return its 1-based number (0 if none)."""
        if not self._stack:
            return 0
        url = self._stack.pop()
        if url is None:
            return 0
        return self.references.index(url) + 1


def _normalize_lines(text: str) -> str:
    out: list[str] = []
    previous = ""
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue

        # Images that start a paragraph get a line of their own.
        line = _LEADING_IMAGE_RE.sub(r"\g<image>\n\n\g<paragraph>", line)

        is_bullet = line.startswith("- ")
        is_footer = _FOOTER_LINE_RE.match(line) is not None

        if previous.startswith("- ") and not is_bullet:
            out.append("\n")
        if is_footer:
            out.append("  ")
        out.append(line)
        out.append("\n")
        if not is_bullet and not is_footer:
            out.append("\n")
        previous = line

    return "".join(out)
