"""Integration tests for the dictation pipeline from transcript to note store."""

import asyncio
import json
import os
import pytest
from unittest.mock import AsyncMock, Mock, patch

from notecanvas.categorization.categorizer import FALLBACK_TITLE, CategorizationClient
from notecanvas.errors import CategorizationError
from notecanvas.layout.engine import find_overlaps
from notecanvas.models import BatchState, CategorizationResult, PlacedUnit, ContentUnit
from notecanvas.services.dictation_service import DictationService
from notecanvas.services.note_publisher import NotePublisher
from notecanvas.services.preview_service import PreviewApprovalController
from notecanvas.storage.note_store import NoteStore

TRANSCRIPT = "Email the quarterly report, buy milk, and book a team offsite."


class GatedEngine:
    """Completion engine that blocks until released, to model a slow network call."""

    def __init__(self, response):
        self.response = response
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def send_prompt(self, prompt, **kwargs):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.response


@pytest.fixture
def store(config):
    store = NoteStore(config.get_notes_file())
    store.subscribe()
    yield store
    store.unsubscribe()


@pytest.fixture
def controller(store):
    return PreviewApprovalController(NotePublisher().get_callback())


def make_service(config, controller, engine, synthesizer):
    return DictationService(config, controller, categorizer=CategorizationClient(engine), synthesizer=synthesizer)


@pytest.mark.integration
class TestDictationPipeline:
    """End-to-end behaviour of DictationService with a fake completion engine."""

    def test_categorized_transcript_reaches_store_after_approval(
        self, config, controller, store, synthesizer, fake_engine_factory, categorization_payload
    ):
        service = make_service(config, controller, fake_engine_factory([categorization_payload]), synthesizer)

        batch = asyncio.run(service.process_transcript(TRANSCRIPT))

        assert [note.title for note in batch.items] == ["Work", "Groceries"]
        assert [t.text for t in batch.items[1].tasks] == ["Milk"]
        assert all(note.is_voice_note for note in batch.items)
        assert batch.reasoning == "Work items and shopping items are separate contexts."
        assert store.load() == []
        staged = list(batch.items)

        controller.approve_all()

        assert store.load() == staged
        assert batch.state is BatchState.COMMITTED

    def test_failed_categorization_gives_single_note(self, config, controller, synthesizer, fake_engine_factory):
        engine = fake_engine_factory(error=CategorizationError("ChatGPT API error: 500 - boom", status=500))
        service = make_service(config, controller, engine, synthesizer)

        batch = asyncio.run(service.process_transcript(TRANSCRIPT))

        assert len(batch.items) == 1
        note = batch.items[0]
        assert note.title == FALLBACK_TITLE
        assert note.content == f"{FALLBACK_TITLE}\n\n{TRANSCRIPT}"
        assert note.tasks == []

    def test_missing_api_key_gives_single_note(self, config, controller, synthesizer):
        with patch.dict(os.environ, {}, clear=True):
            service = DictationService(config, controller, synthesizer=synthesizer)
            batch = asyncio.run(service.process_transcript(TRANSCRIPT))

        assert len(batch.items) == 1
        assert batch.items[0].title == FALLBACK_TITLE
        assert batch.items[0].content == f"{FALLBACK_TITLE}\n\n{TRANSCRIPT}"

    def test_empty_categorization_falls_back_to_segments(self, config, controller, synthesizer):
        categorizer = Mock()
        categorizer.categorize = AsyncMock(
            return_value=CategorizationResult(task_items=[], note_groups=[], reasoning="")
        )
        service = DictationService(config, controller, categorizer=categorizer, synthesizer=synthesizer)

        batch = asyncio.run(service.process_transcript("Buy milk. Next topic: call dentist tomorrow."))

        assert [note.content for note in batch.items] == [
            "Buy milk\n\nBuy milk.",
            "call dentist tomorrow\n\ncall dentist tomorrow.",
        ]
        boxes = [PlacedUnit(unit=ContentUnit(title=n.title), position=n.position) for n in batch.items]
        assert find_overlaps(boxes, 280, 220) == []

    def test_blank_transcript_is_a_no_op(self, config, controller, synthesizer, fake_engine_factory):
        engine = fake_engine_factory(["{}"])
        service = make_service(config, controller, engine, synthesizer)

        assert asyncio.run(service.process_transcript("  \n ")) is None
        assert engine.calls == []
        assert not controller.has_pending

    def test_existing_notes_feed_key_terms(
        self, config, controller, synthesizer, fake_engine_factory, categorization_payload
    ):
        engine = fake_engine_factory([categorization_payload, "{}"])
        service = make_service(config, controller, engine, synthesizer)
        first = asyncio.run(service.process_transcript(TRANSCRIPT))

        asyncio.run(service.process_transcript("Another thought entirely.", existing_notes=first.items))

        assert "Key terms used in my existing notes: " in engine.calls[1]["prompt"]
        assert "Groceries" in engine.calls[1]["prompt"]

    def test_configured_strategy_overrides_selection(
        self, config, controller, synthesizer, fake_engine_factory, categorization_payload
    ):
        config.set('layout.default_strategy', "workflow")
        service = make_service(config, controller, fake_engine_factory([categorization_payload]), synthesizer)

        batch = asyncio.run(service.process_transcript(TRANSCRIPT))

        assert batch.items[0].position.y == batch.items[1].position.y
        assert batch.items[0].position.x < batch.items[1].position.x


@pytest.mark.integration
class TestCancellation:
    """A result arriving after the session ended must be ignored."""

    def test_discard_while_categorizing_drops_result(self, config, controller, store, synthesizer, categorization_payload):
        async def scenario():
            engine = GatedEngine(categorization_payload)
            service = make_service(config, controller, engine, synthesizer)
            task = asyncio.ensure_future(service.process_transcript(TRANSCRIPT))
            await engine.started.wait()
            controller.discard()
            engine.release.set()
            return await task

        assert asyncio.run(scenario()) is None
        assert not controller.has_pending
        assert store.load() == []

    def test_newer_session_wins(self, config, controller, synthesizer, categorization_payload):
        async def scenario():
            slow = GatedEngine(categorization_payload)
            fast = GatedEngine(json.dumps({"tasks": [{"text": "water plants"}]}))
            fast.release.set()
            slow_service = make_service(config, controller, slow, synthesizer)
            fast_service = make_service(config, controller, fast, synthesizer)

            slow_task = asyncio.ensure_future(slow_service.process_transcript(TRANSCRIPT))
            await slow.started.wait()
            fast_batch = await fast_service.process_transcript("Water the plants.")
            slow.release.set()
            return await slow_task, fast_batch

        slow_batch, fast_batch = asyncio.run(scenario())

        assert slow_batch is None
        assert controller.batch is fast_batch
        assert [t.text for t in fast_batch.items[0].tasks] == ["water plants"]
