"""Intermediate records produced while turning text into notes."""

from dataclasses import dataclass, field
from typing import List, Optional

from .notes import Position


@dataclass
class TaskItem:
    """A task extracted from text, not yet a full Task entity."""
    text: str
    done: bool = False
    category: Optional[str] = None


@dataclass
class ContentUnit:
    """One note-to-be, with optional sub-items (section notes)."""
    title: str
    category: Optional[str] = None
    body_text: str = ""
    task_items: List[TaskItem] = field(default_factory=list)
    source_confidence: Optional[str] = None  # Categorization reasoning, if any
    children: List["ContentUnit"] = field(default_factory=list)


@dataclass
class NoteGroup:
    """A titled group of task indices returned by categorization."""
    title: str
    category: str
    task_indices: List[int] = field(default_factory=list)
    body_text: str = ""  # Only set by the fallback group


@dataclass
class CategorizationResult:
    """Self-contained result of one categorization call.

    ``task_indices`` in every group index into ``task_items`` of the same
    result and are guaranteed to be in range.
    """
    task_items: List[TaskItem]
    note_groups: List[NoteGroup]
    reasoning: str
    is_fallback: bool = False


@dataclass
class PlacedUnit:
    """A ContentUnit with its assigned canvas position."""
    unit: ContentUnit
    position: Position
    child_positions: List[Position] = field(default_factory=list)
