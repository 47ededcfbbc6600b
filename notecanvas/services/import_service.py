"""Markdown import pipeline into the preview."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import NoteCanvasConfig
from ..importers.markdown import ImportedSource, MarkdownImporter
from ..layout.engine import LayoutEngine
from ..layout.selector import select_strategy
from ..models.batch import PendingBatch
from ..models.layout import LayoutSettings
from ..synthesis.synthesizer import NoteSynthesizer
from .dictation_service import build_synthesizer, layout_anchor
from .preview_service import PreviewApprovalController

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


class ImportService:
    """Parses markdown files, lays them out together and stages one batch."""

    def __init__(
        self,
        config: NoteCanvasConfig,
        controller: PreviewApprovalController,
        importer: Optional[MarkdownImporter] = None,
        layout_engine: Optional[LayoutEngine] = None,
        synthesizer: Optional[NoteSynthesizer] = None,
    ):
        self.config = config
        self.controller = controller
        self.importer = importer or MarkdownImporter()
        self.layout_engine = layout_engine or LayoutEngine(LayoutSettings.from_config(config))
        self.synthesizer = synthesizer or build_synthesizer(config)

        logger.info("ImportService initialized")

    def load_sources(self, paths: Iterable[str]) -> List[ImportedSource]:
        """Parse every readable markdown file; other files are skipped with a warning."""
        sources = []
        for path in paths:
            if Path(path).suffix.lower() not in MARKDOWN_SUFFIXES:
                logger.warning(f"Skipping non-markdown file: {path}")
                continue
            try:
                sources.append(self.importer.load_file(path))
            except OSError as e:
                logger.error(f"Failed to read {path}: {e}")
        return sources

    def import_files(self, paths: Iterable[str]) -> Optional[PendingBatch]:
        """Import markdown files into a pending batch.

        Returns:
            The staged batch, or None when nothing could be imported
        """
        sources = self.load_sources(paths)
        if not sources:
            logger.warning("No markdown files to import")
            return None

        units = [source.unit for source in sources]
        total_units = sum(1 + len(unit.children) for unit in units)
        strategy = select_strategy([source.metadata for source in sources], total_units)

        placed = self.layout_engine.layout(units, strategy, layout_anchor(self.config))
        notes = self.synthesizer.synthesize(placed, voice_source=False)

        logger.info(f"Imported {len(sources)} files as {len(notes)} notes with {strategy.value} layout")
        return self.controller.create_batch(notes, reasoning=f"Imported {len(sources)} markdown files")
