"""Post-processing applied to Markdown before it is written to disk."""

from .lint import MarkdownLinter
from .toc import TableOfContentsBuilder

__all__ = ["MarkdownLinter", "TableOfContentsBuilder"]
