"""Dictation pipeline: transcript in, pending preview batch out."""

import logging
from typing import Iterable, List, Optional

from ..categorization.base import CategorizationPort
from ..categorization.categorizer import CategorizationClient
from ..categorization.chatgpt_engine import OPENAI_CHAT_URL, ChatGPTEngine
from ..categorization.key_terms import extract_key_terms
from ..categorization.segmenter import TranscriptSegmenter
from ..categorization.text_cleaning import derive_title
from ..config import NoteCanvasConfig
from ..layout.engine import LayoutEngine, coerce_strategy
from ..layout.selector import select_strategy_for_units
from ..models.batch import PendingBatch
from ..models.content import CategorizationResult, ContentUnit
from ..models.layout import LayoutSettings, LayoutStrategy
from ..models.notes import Note, Position
from ..synthesis.random_source import SeededRandom
from ..synthesis.synthesizer import NoteSynthesizer
from .preview_service import PreviewApprovalController

logger = logging.getLogger(__name__)

AUTO_STRATEGY = "auto"


def build_categorizer(config: NoteCanvasConfig) -> CategorizationClient:
    """CategorizationClient over the OpenAI chat-completions transport.

    Without an API key the client is still built; each call then fails
    inside the engine and categorization takes the single-note fallback.
    """
    try:
        api_key = config.get_openai_api_key()
    except ValueError as e:
        logger.warning(f"{e}; categorization will use the single-note fallback")
        api_key = None

    engine = ChatGPTEngine(
        api_key=api_key,
        model=config.get("openai.model", "gpt-4o"),
        base_url=config.get("openai.base_url") or OPENAI_CHAT_URL,
        timeout_seconds=float(config.get("categorization.timeout_seconds", 30)),
    )
    return CategorizationClient(
        engine,
        temperature=float(config.get("openai.temperature", 0.2)),
        max_tokens=int(config.get("openai.max_tokens", 2000)),
        include_key_terms=bool(config.get("categorization.include_key_terms", True)),
    )


def build_synthesizer(config: NoteCanvasConfig) -> NoteSynthesizer:
    return NoteSynthesizer(
        category_colors=config.get("synthesis.category_colors") or {},
        random_source=SeededRandom(config.get("layout.random_seed")),
    )


def layout_anchor(config: NoteCanvasConfig) -> Position:
    return Position(float(config.get("layout.anchor_x", 800)), float(config.get("layout.anchor_y", 450)))


def units_from_result(result: CategorizationResult) -> List[ContentUnit]:
    """One unit per note group, carrying the tasks its indices point at."""
    reasoning = None if result.is_fallback else (result.reasoning or None)
    return [
        ContentUnit(
            title=group.title,
            category=group.category,
            body_text=group.body_text,
            task_items=[result.task_items[i] for i in group.task_indices],
            source_confidence=reasoning,
        )
        for group in result.note_groups
    ]


class DictationService:
    """Runs a transcript through categorization, layout and synthesis into the preview.

    Only the categorization call suspends. A session started with
    ``controller.begin_session()`` guards it: if the user discards or starts
    another dictation meanwhile, the late result is dropped.
    """

    def __init__(
        self,
        config: NoteCanvasConfig,
        controller: PreviewApprovalController,
        categorizer: Optional[CategorizationPort] = None,
        segmenter: Optional[TranscriptSegmenter] = None,
        layout_engine: Optional[LayoutEngine] = None,
        synthesizer: Optional[NoteSynthesizer] = None,
    ):
        """Initialize dictation service.

        Args:
            config: Application configuration
            controller: Preview controller that receives the batch
            categorizer: Categorization port; built from config when omitted
            segmenter: Fallback segmenter
            layout_engine: Layout engine; settings come from config when omitted
            synthesizer: Note synthesizer; built from config when omitted
        """
        self.config = config
        self.controller = controller
        self.categorizer = categorizer or build_categorizer(config)
        self.segmenter = segmenter or TranscriptSegmenter(
            min_segment_length=int(config.get("segmentation.min_segment_length", 20))
        )
        self.layout_engine = layout_engine or LayoutEngine(LayoutSettings.from_config(config))
        self.synthesizer = synthesizer or build_synthesizer(config)
        self.max_key_terms = int(config.get("categorization.max_key_terms", 50))

        logger.info("DictationService initialized")

    async def process_transcript(self, text: str, existing_notes: Iterable[Note] = ()) -> Optional[PendingBatch]:
        """Turn a transcript into a pending batch.

        Args:
            text: Raw transcript
            existing_notes: Current note collection, read only for key terms

        Returns:
            The staged batch, or None for a blank transcript or a session
            that was cancelled while categorization was running
        """
        if not text or not text.strip():
            logger.info("Blank transcript; nothing to process")
            return None

        key_terms = extract_key_terms((note.content for note in existing_notes), limit=self.max_key_terms)
        session = self.controller.begin_session()
        logger.info(f"Processing transcript ({len(text)} chars) in session {session.session_id}")

        result = await self.categorizer.categorize(text, key_terms)

        if session.cancelled:
            logger.info(f"Session {session.session_id} was cancelled; dropping categorization result")
            return None

        units = units_from_result(result)
        if not units:
            logger.info("Categorization returned no groups; segmenting transcript")
            units = self.segment_units(text)

        strategy = self._strategy_for(units)
        placed = self.layout_engine.layout(units, strategy, layout_anchor(self.config))
        notes = self.synthesizer.synthesize(placed, voice_source=True)

        return self.controller.create_batch(notes, session=session, reasoning=result.reasoning)

    def segment_units(self, text: str) -> List[ContentUnit]:
        """One sticky unit per cue-split segment."""
        return [
            ContentUnit(title=derive_title(segment), body_text=segment)
            for segment in self.segmenter.segment(text)
        ]

    def _strategy_for(self, units: List[ContentUnit]) -> LayoutStrategy:
        configured = self.config.get("layout.default_strategy", AUTO_STRATEGY)
        if not configured or str(configured).lower() == AUTO_STRATEGY:
            return select_strategy_for_units(units)
        return coerce_strategy(configured)
