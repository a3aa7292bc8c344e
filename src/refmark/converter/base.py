"""Node events and the writer protocol shared by the converter and renderers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Protocol, runtime_checkable

# Non-content tags ignored by the Markdown and text renderers.
TAG_BLACKLIST: tuple[str, ...] = (
    "applet",
    "head",
    "base",
    "basefont",
    "button",
    "canvas",
    "command",
    "datalist",
    "embed",
    "iframe",
    "input",
    "select",
    "form",
    "label",
    "map",
    "link",
    "menu",
    "meta",
    "noscript",
    "object",
    "script",
    "style",
    "textarea",
    "title",
    "video",
)


class EventKind(Enum):
    OPEN = "open"
    TEXT = "text"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class Node:
    """One markup event: a tag name, its text and its attributes.

    Attribute lookups never fail; a missing attribute reads as ``""``.
    Text nodes carry the name of the element that directly contains them.
    """

    tag: str
    text: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", normalize_tag(self.tag))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def __getitem__(self, name: str) -> str:
        return self.attributes.get(name, "")

    def get(self, name: str) -> str:
        return self.attributes.get(name, "")

    def has(self, name: str) -> bool:
        return name in self.attributes


@dataclass(frozen=True, slots=True)
class NodeEvent:
    kind: EventKind
    node: Node


@runtime_checkable
class DocumentWriter(Protocol):
    """Receives the node events of one document as it is converted."""

    def open(self) -> None:
        """Prepare to start a new document."""

    def close(self) -> None:
        """Finish the current document."""

    def exclude_tags(self) -> Iterable[str]:
        """Tags this writer never wants to see."""

    def on_open(self, node: Node) -> None: ...
    def on_text(self, node: Node) -> None: ...
    def on_close(self, node: Node) -> None: ...


def normalize_tag(tag: str | None) -> str:
    return (tag or "").strip().lower()
