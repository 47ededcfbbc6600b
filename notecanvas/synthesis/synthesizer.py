"""Turns placed content units into canonical note records."""

import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models.content import ContentUnit, PlacedUnit
from ..models.notes import (
    AVAILABLE_COLORS,
    DEFAULT_CATEGORY_COLORS,
    AISuggestions,
    Note,
    NoteType,
    Position,
    Task,
)
from .random_source import RandomSource, SeededRandom

logger = logging.getLogger(__name__)

# Substring rules, checked in order
CATEGORY_KEYWORD_COLORS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("work",), "blue"),
    (("personal",), "green"),
    (("health", "fitness"), "pink"),
    (("shop",), "yellow"),
)


def new_id() -> str:
    return str(uuid.uuid4())


class NoteSynthesizer:
    """Builds Note records from PlacedUnits. Pure apart from ids, clock and colour randomness."""

    def __init__(
        self,
        category_colors: Optional[Dict[str, str]] = None,
        random_source: Optional[RandomSource] = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_id,
        palette: Sequence[str] = AVAILABLE_COLORS,
    ):
        """Initialize synthesizer.

        Args:
            category_colors: User colour overrides keyed by lower-case category
            random_source: Source for palette fallback picks
            clock: Timestamp provider
            id_factory: Unique id generator for notes and tasks
            palette: Colours used when no category rule matches
        """
        self.category_colors = {k.lower(): v for k, v in (category_colors or {}).items()}
        self.random_source = random_source or SeededRandom()
        self.clock = clock
        self.id_factory = id_factory
        self.palette = list(palette)

    def synthesize(self, placed: Sequence[PlacedUnit], voice_source: bool = True) -> List[Note]:
        """Create one note per unit and one per child, in placement order.

        Args:
            placed: Output of LayoutEngine.layout
            voice_source: Mark notes as dictated (``is_voice_note``)
        """
        now = self.clock()
        notes: List[Note] = []
        for item in placed:
            notes.append(self._build_note(item.unit, item.position, now, voice_source))
            for child, position in zip(item.unit.children, item.child_positions):
                notes.append(self._build_note(child, position, now, voice_source))

        logger.debug(f"Synthesized {len(notes)} notes from {len(placed)} placed units")
        return notes

    def pick_color(self, category: Optional[str]) -> str:
        """Colour from user overrides, keyword rules, default map, then the palette."""
        name = (category or "").strip().lower()
        if name:
            if name in self.category_colors:
                return self.category_colors[name]
            for keywords, color in CATEGORY_KEYWORD_COLORS:
                if any(keyword in name for keyword in keywords):
                    return color
            if name in DEFAULT_CATEGORY_COLORS:
                return DEFAULT_CATEGORY_COLORS[name]
        index = int(self.random_source.next() * len(self.palette)) % len(self.palette)
        return self.palette[index]

    def _build_note(self, unit: ContentUnit, position: Position, now: datetime, voice_source: bool) -> Note:
        content = unit.title
        if unit.body_text:
            content = f"{unit.title}\n\n{unit.body_text}"

        tasks = [
            Task(
                id=self.id_factory(),
                text=item.text,
                done=item.done,
                category=item.category or unit.category,
            )
            for item in unit.task_items
        ]

        suggestions = None
        if unit.source_confidence:
            suggestions = AISuggestions(
                reasoning=unit.source_confidence,
                category=unit.category,
                task_count=len(tasks),
            )

        return Note(
            id=self.id_factory(),
            type=NoteType.TASK if tasks else NoteType.STICKY,
            content=content,
            position=position,
            color=self.pick_color(unit.category),
            created_at=now,
            updated_at=now,
            tasks=tasks,
            category=unit.category,
            is_voice_note=voice_source,
            ai_suggestions=suggestions,
        )
