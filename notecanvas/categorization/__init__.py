"""Categorization module for NoteCanvas."""

from .base import CategorizationPort, CompletionEngine
from .chatgpt_engine import ChatGPTEngine
from .categorizer import CategorizationClient, fallback_result
from .segmenter import TranscriptSegmenter
from .key_terms import extract_key_terms

__all__ = [
    "CategorizationPort",
    "CompletionEngine",
    "ChatGPTEngine",
    "CategorizationClient",
    "fallback_result",
    "TranscriptSegmenter",
    "extract_key_terms",
]
