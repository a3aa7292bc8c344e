"""Errors raised while reading or editing Markdown documents."""

from __future__ import annotations


class MarkdownError(ValueError):
    """Base class for Markdown processing errors."""


class DuplicateReferenceError(MarkdownError):
    """The reference footer declares the same id more than once."""

    def __init__(self, ref_id: int, url: str) -> None:
        super().__init__(f"Reference already exists [{ref_id}]: {url}")
        self.ref_id = ref_id
        self.url = url


class UnknownReferenceError(MarkdownError, KeyError):
    """No reference with the requested id exists in the document."""

    def __init__(self, ref_id: int) -> None:
        super().__init__(f"Unknown reference [{ref_id}]")
        self.ref_id = ref_id

    def __str__(self) -> str:
        return self.args[0]
