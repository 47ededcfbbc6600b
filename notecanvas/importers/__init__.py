"""Importers that turn external documents into content units."""

from .markdown import (
    MarkdownImporter,
    ImportedSource,
    ParsedMarkdown,
    parse_markdown,
    detect_category,
    calculate_complexity,
)

__all__ = [
    "MarkdownImporter",
    "ImportedSource",
    "ParsedMarkdown",
    "parse_markdown",
    "detect_category",
    "calculate_complexity",
]
