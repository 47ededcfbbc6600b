"""Publishes committed notes to the note collection over pubsub."""

import logging
from typing import Callable

from pubsub import pub

from ..models.notes import Note

logger = logging.getLogger(__name__)

NOTES_COMMITTED_TOPIC = "notes.committed"


class NotePublisher:
    """Hands approved notes to whatever listens on the committed-notes topic."""

    def __init__(self, topic: str = NOTES_COMMITTED_TOPIC):
        """Initialize note publisher.

        Args:
            topic: Pub/sub topic name for committed notes
        """
        self.topic = topic
        logger.info(f"NotePublisher initialized with topic: {topic}")

    def publish_note(self, note: Note) -> None:
        """Publish one committed note to the pub/sub topic.

        Args:
            note: Note approved in the preview
        """
        pub.sendMessage(self.topic, note=note)
        logger.debug(f"Published committed note: {note.id} ({note.title!r})")

    def get_callback(self) -> Callable[[Note], None]:
        """Get callback function for PreviewApprovalController to use.

        Returns:
            Callback function that publishes committed notes
        """
        return self.publish_note
