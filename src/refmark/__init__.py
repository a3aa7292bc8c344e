"""refmark: HTML to reference-style Markdown, and back."""

__version__ = "0.1.0"
