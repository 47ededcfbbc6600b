"""Unit tests for OrganizeService."""

import asyncio
import pytest
from unittest.mock import AsyncMock

from notecanvas.categorization.categorizer import fallback_result
from notecanvas.layout.engine import LayoutEngine, find_overlaps
from notecanvas.models import (
    CategorizationResult,
    ContentUnit,
    Note,
    NoteGroup,
    NoteType,
    PlacedUnit,
    Position,
    Task,
)
from notecanvas.services.organize_service import OrganizeService, note_category


def make_notes(fixed_clock, count=4):
    notes = []
    for i in range(count):
        notes.append(Note(
            id=f"n{i}",
            type=NoteType.STICKY,
            content=f"Note {i}",
            position=Position(0, 0),
            color="blue",
            created_at=fixed_clock.return_value,
            updated_at=fixed_clock.return_value,
            category="work" if i % 2 else None,
        ))
    return notes


@pytest.fixture
def service(fixed_clock):
    return OrganizeService(LayoutEngine(), Position(800, 450), clock=fixed_clock)


@pytest.mark.unit
class TestOrganizeService:
    """Test cases for canvas re-arrangement."""

    def test_by_grid_spreads_stacked_notes(self, service, fixed_clock):
        notes = make_notes(fixed_clock)

        organized = service.organize(notes, "by-grid")

        assert [n.id for n in organized] == [n.id for n in notes]
        assert len({n.position for n in organized}) == len(notes)
        assert all(n.position == Position(0, 0) for n in notes)

    def test_by_category_uses_cluster_layout(self, service, fixed_clock):
        notes = make_notes(fixed_clock, 6)

        organized = service.organize_by_category(notes)

        boxes = [PlacedUnit(unit=ContentUnit(title=n.title), position=n.position) for n in organized]
        assert find_overlaps(boxes, 280, 220) == []
        assert organized[1].category == "work"

    def test_unknown_style_raises(self, service, fixed_clock):
        with pytest.raises(ValueError):
            service.organize(make_notes(fixed_clock), "by-mood")

    def test_note_category_falls_back_to_tasks(self, fixed_clock):
        note = make_notes(fixed_clock, 1)[0]
        note.tasks = [Task(id="t", text="x"), Task(id="u", text="y", category="home")]

        assert note_category(note) == "home"

    def test_by_ai_applies_first_group_category(self, fixed_clock):
        categorizer = AsyncMock()
        categorizer.categorize.side_effect = [
            CategorizationResult(task_items=[], note_groups=[NoteGroup("Gym", "fitness")], reasoning="r"),
            fallback_result("Note 1"),
        ]
        service = OrganizeService(LayoutEngine(), Position(0, 0), categorizer=categorizer, clock=fixed_clock)
        notes = make_notes(fixed_clock, 2)

        organized = asyncio.run(service.organize_by_ai(notes))

        assert organized[0].category == "fitness"
        assert organized[1].category == "work"
        assert categorizer.categorize.await_count == 2
        assert notes[0].category is None

    def test_by_ai_requires_categorizer(self, service, fixed_clock):
        with pytest.raises(ValueError):
            asyncio.run(service.organize_by_ai(make_notes(fixed_clock)))
