"""JSON file note collection."""

import json
import logging
import os
from pathlib import Path
from typing import List, Sequence

from pubsub import pub

from ..models.notes import Note
from ..services.note_publisher import NOTES_COMMITTED_TOPIC

logger = logging.getLogger(__name__)


class NoteStore:
    """Keeps the note collection in a single JSON file.

    The file holds ``{"notes": [...]}`` with each note in its camelCase
    form. Writes go through a temporary file so a crash never leaves a
    half-written collection behind.
    """

    def __init__(self, notes_file: str):
        """Initialize note store.

        Args:
            notes_file: Path of the JSON collection file
        """
        self.notes_file = Path(notes_file)
        self.notes_file.parent.mkdir(parents=True, exist_ok=True)
        self.topic = None

        logger.info(f"NoteStore initialized with notes_file: {self.notes_file}")

    def load(self) -> List[Note]:
        """Load every stored note; an absent file is an empty collection.

        Raises:
            ValueError: If the file exists but is not a valid collection
        """
        if not self.notes_file.exists():
            return []

        try:
            with open(self.notes_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return [Note.from_dict(item) for item in data.get("notes", [])]
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error loading notes from {self.notes_file}: {e}")
            raise ValueError(f"Corrupt note collection {self.notes_file}: {e}")

    def list_notes(self) -> List[Note]:
        return self.load()

    def note_contents(self) -> List[str]:
        """Text of every stored note, used for key-term extraction."""
        return [note.content for note in self.load()]

    def add_note(self, note: Note) -> None:
        """Append one note. Also the listener for the committed-notes topic."""
        self.add_notes([note])

    def add_notes(self, notes: Sequence[Note]) -> None:
        stored = self.load()
        stored.extend(notes)
        self._save(stored)
        logger.info(f"Stored {len(notes)} notes ({len(stored)} total)")

    def replace_notes(self, notes: Sequence[Note]) -> None:
        """Overwrite the collection, e.g. after re-organizing the canvas."""
        self._save(list(notes))
        logger.info(f"Replaced note collection with {len(notes)} notes")

    def subscribe(self, topic: str = NOTES_COMMITTED_TOPIC) -> None:
        """Store every note published on ``topic``."""
        pub.subscribe(self.add_note, topic)
        self.topic = topic
        logger.info(f"NoteStore subscribed to {topic}")

    def unsubscribe(self) -> None:
        if self.topic is not None:
            pub.unsubscribe(self.add_note, self.topic)
            self.topic = None

    def _save(self, notes: List[Note]) -> None:
        tmp_file = self.notes_file.with_suffix(self.notes_file.suffix + ".tmp")
        try:
            with open(tmp_file, 'w', encoding='utf-8') as f:
                json.dump({"notes": [note.to_dict() for note in notes]}, f, indent=2)
            os.replace(tmp_file, self.notes_file)
        except Exception as e:
            logger.error(f"Error saving notes to {self.notes_file}: {e}")
            raise
