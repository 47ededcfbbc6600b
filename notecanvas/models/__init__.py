"""Data models for the NoteCanvas application."""

from .notes import (
    AVAILABLE_COLORS,
    DEFAULT_CATEGORY_COLORS,
    NoteType,
    Priority,
    Position,
    Task,
    AISuggestions,
    Note,
)
from .content import TaskItem, ContentUnit, NoteGroup, CategorizationResult, PlacedUnit
from .layout import LayoutStrategy, LayoutSettings, SourceMetadata
from .session import DictationSession
from .batch import BatchState, PendingBatch

__all__ = [
    "AVAILABLE_COLORS",
    "DEFAULT_CATEGORY_COLORS",
    "NoteType",
    "Priority",
    "Position",
    "Task",
    "AISuggestions",
    "Note",
    # Pipeline models
    "TaskItem",
    "ContentUnit",
    "NoteGroup",
    "CategorizationResult",
    "PlacedUnit",
    "LayoutStrategy",
    "LayoutSettings",
    "SourceMetadata",
    "DictationSession",
    "BatchState",
    "PendingBatch",
]
