"""Renderer package."""

from .fragment_renderer import Fragment, FragmentRenderer, FragmentType, split_sentences
from .markdown_renderer import MarkdownRenderer, escape_text
from .text_renderer import TextRenderer

__all__ = [
    "Fragment",
    "FragmentRenderer",
    "FragmentType",
    "MarkdownRenderer",
    "TextRenderer",
    "escape_text",
    "split_sentences",
]
