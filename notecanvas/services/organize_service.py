"""Re-arranging notes already on the canvas."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..categorization.base import CategorizationPort
from ..layout.engine import LayoutEngine
from ..models.content import ContentUnit
from ..models.layout import LayoutStrategy
from ..models.notes import Note, Position

logger = logging.getLogger(__name__)

ORGANIZE_STYLES = ("by-grid", "by-category", "by-ai")


def note_category(note: Note) -> Optional[str]:
    """The note's own category, else its first categorized task's."""
    if note.category:
        return note.category
    for task in note.tasks:
        if task.category:
            return task.category
    return None


class OrganizeService:
    """Computes new positions for existing notes. Input notes are never mutated."""

    def __init__(
        self,
        layout_engine: LayoutEngine,
        anchor: Position,
        categorizer: Optional[CategorizationPort] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize organize service.

        Args:
            layout_engine: Engine used for the new arrangement
            anchor: Canvas point the arrangement is centred on
            categorizer: Needed only for ``organize_by_ai``
            clock: Timestamp provider for ``updated_at``
        """
        self.layout_engine = layout_engine
        self.anchor = anchor
        self.categorizer = categorizer
        self.clock = clock

    def organize(self, notes: Sequence[Note], style: str) -> List[Note]:
        """Synchronous styles by name; ``by-ai`` must go through ``organize_by_ai``."""
        if style == "by-grid":
            return self.organize_by_grid(notes)
        if style == "by-category":
            return self.organize_by_category(notes)
        raise ValueError(f"Unknown or asynchronous organize style: {style}")

    def organize_by_grid(self, notes: Sequence[Note]) -> List[Note]:
        return self._arrange(notes, [note_category(note) for note in notes], LayoutStrategy.GRID)

    def organize_by_category(self, notes: Sequence[Note]) -> List[Note]:
        return self._arrange(notes, [note_category(note) for note in notes], LayoutStrategy.CLUSTER)

    async def organize_by_ai(self, notes: Sequence[Note]) -> List[Note]:
        """Ask the categorizer for each note's category, then cluster by it.

        Notes for which categorization falls back keep their current category.
        """
        if self.categorizer is None:
            raise ValueError("organize_by_ai requires a categorizer")

        categories = []
        for note in notes:
            category = note_category(note)
            result = await self.categorizer.categorize(note.content, [])
            if not result.is_fallback and result.note_groups:
                category = result.note_groups[0].category
            categories.append(category)

        organized = self._arrange(notes, categories, LayoutStrategy.CLUSTER)
        return [
            replace(note, category=category) if category else note
            for note, category in zip(organized, categories)
        ]

    def _arrange(
        self,
        notes: Sequence[Note],
        categories: Sequence[Optional[str]],
        strategy: LayoutStrategy,
    ) -> List[Note]:
        units = [ContentUnit(title=note.title, category=category) for note, category in zip(notes, categories)]
        placed = self.layout_engine.layout(units, strategy, self.anchor)
        now = self.clock()

        logger.info(f"Organized {len(notes)} notes with {strategy.value} layout")
        return [
            replace(note, position=item.position, updated_at=now)
            for note, item in zip(notes, placed)
        ]
