"""Preview and approval of synthesized notes before they reach the note collection."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from ..errors import PreviewError
from ..models.batch import BatchState, PendingBatch
from ..models.notes import Note
from ..models.session import DictationSession

logger = logging.getLogger(__name__)


def split_content(content: str) -> Tuple[str, str]:
    """Split note content into (title, body) on the first line break."""
    title, _, body = content.partition("\n")
    return title.strip(), body.strip("\n")


class PreviewApprovalController:
    """Owns the single pending batch and hands approved items to ``commit_callback``.

    Items leave the batch exactly once: either committed (passed to the
    callback) or dropped by delete/discard. Nothing that has left can come
    back. Only one session is active at a time; starting a new one cancels
    the previous token so a late categorization result is ignored.
    """

    def __init__(self, commit_callback: Callable[[Note], None], clock: Callable[[], datetime] = datetime.now):
        """Initialize controller.

        Args:
            commit_callback: Receives each approved note, one at a time
            clock: Timestamp provider for edits
        """
        self.commit_callback = commit_callback
        self.clock = clock
        self.batch: Optional[PendingBatch] = None
        self._active_session: Optional[DictationSession] = None

        logger.info("PreviewApprovalController initialized")

    @property
    def has_pending(self) -> bool:
        return self.batch is not None and self.batch.state is BatchState.PENDING

    @property
    def items(self) -> List[Note]:
        """Notes still awaiting a decision."""
        return list(self.batch.items) if self.has_pending else []

    def begin_session(self) -> DictationSession:
        """Start a session, cancelling any earlier session that has not produced a batch."""
        if self._active_session is not None and not self._active_session.cancelled:
            logger.info(f"Cancelling unresolved session {self._active_session.session_id}")
            self._active_session.cancel()
        self._active_session = DictationSession()
        logger.debug(f"Started session {self._active_session.session_id}")
        return self._active_session

    def create_batch(
        self,
        notes: Sequence[Note],
        session: Optional[DictationSession] = None,
        reasoning: Optional[str] = None,
    ) -> Optional[PendingBatch]:
        """Stage ``notes`` for review.

        Returns None, and stages nothing, when ``session`` was cancelled or
        there are no notes. A still-pending earlier batch is discarded.
        """
        if session is not None and session.cancelled:
            logger.info(f"Ignoring result for cancelled session {session.session_id}")
            return None
        if session is not None and session is self._active_session:
            self._active_session = None

        if not notes:
            logger.info("No notes to preview")
            return None

        if self.has_pending:
            logger.warning(f"Discarding pending batch {self.batch.id} in favour of a new one")
            self._drop_remaining()

        self.batch = PendingBatch(
            items=list(notes),
            session=session,
            reasoning=reasoning,
            selected_ids={note.id for note in notes},
        )
        logger.info(f"Created preview batch {self.batch.id} with {len(notes)} notes")
        return self.batch

    def edit_item(self, note_id: str, title: Optional[str] = None, body: Optional[str] = None) -> Note:
        """Replace the title and/or body of a pending item.

        Raises:
            PreviewError: If the batch is closed, the item is unknown, or the
                resulting note would have no text
        """
        batch = self._require_pending()
        note = self._require_item(batch, note_id)

        current_title, current_body = split_content(note.content)
        if title is not None:
            if not title.strip():
                raise PreviewError("Note title cannot be empty")
            current_title = title.strip()
        if body is not None:
            current_body = body.strip()

        content = f"{current_title}\n\n{current_body}" if current_body else current_title
        if not content.strip():
            raise PreviewError("Note text cannot be empty")

        edited = replace(note, content=content, updated_at=self.clock())
        batch.items[batch.items.index(note)] = edited
        logger.debug(f"Edited preview item {note_id}")
        return edited

    def delete_item(self, note_id: str) -> None:
        """Remove an item from the batch without committing it.

        Raises:
            PreviewError: If the batch is closed or the item is unknown
        """
        batch = self._require_pending()
        note = self._require_item(batch, note_id)
        batch.items.remove(note)
        batch.selected_ids.discard(note_id)
        logger.debug(f"Deleted preview item {note_id}")
        self._finish_if_exhausted()

    def approve_item(self, note_id: str) -> Note:
        """Commit one item and remove it from the batch."""
        batch = self._require_pending()
        note = self._require_item(batch, note_id)
        self._commit([note])
        return note

    def approve_all(self) -> List[Note]:
        """Commit every remaining item in batch order."""
        batch = self._require_pending()
        notes = list(batch.items)
        self._commit(notes)
        return notes

    def approve_selected(self) -> List[Note]:
        """Commit the selected items in batch order; unselected items stay pending."""
        batch = self._require_pending()
        notes = [note for note in batch.items if note.id in batch.selected_ids]
        self._commit(notes)
        return notes

    def discard(self) -> int:
        """Drop everything still pending and cancel the in-flight session.

        Safe to call at any time, including with no batch.

        Returns:
            Number of items dropped
        """
        if self._active_session is not None:
            self._active_session.cancel()
            self._active_session = None

        if not self.has_pending:
            return 0

        if self.batch.session is not None:
            self.batch.session.cancel()
        return self._drop_remaining()

    def select(self, note_id: str) -> None:
        batch = self._require_pending()
        self._require_item(batch, note_id)
        batch.selected_ids.add(note_id)

    def deselect(self, note_id: str) -> None:
        batch = self._require_pending()
        self._require_item(batch, note_id)
        batch.selected_ids.discard(note_id)

    def toggle_selection(self, note_id: str) -> bool:
        """Flip an item's selection. Returns True if it is now selected."""
        batch = self._require_pending()
        self._require_item(batch, note_id)
        if note_id in batch.selected_ids:
            batch.selected_ids.discard(note_id)
            return False
        batch.selected_ids.add(note_id)
        return True

    def select_all(self, selected: bool = True) -> None:
        batch = self._require_pending()
        batch.selected_ids = {note.id for note in batch.items} if selected else set()

    def selection_summary(self) -> Tuple[int, int]:
        """(selected, total) for the pending batch; (0, 0) when there is none."""
        if not self.has_pending:
            return 0, 0
        return len(self.batch.selected_ids), len(self.batch.items)

    def _commit(self, notes: Sequence[Note]) -> None:
        batch = self.batch
        batch.state = BatchState.COMMITTING
        try:
            for note in notes:
                # Leave the batch before the hand-off so a failing callback cannot commit twice
                batch.items.remove(note)
                batch.selected_ids.discard(note.id)
                batch.committed_count += 1
                self.commit_callback(note)
                logger.debug(f"Committed preview item {note.id}")
        finally:
            batch.state = BatchState.PENDING
            self._finish_if_exhausted()

        logger.info(f"Committed {len(notes)} notes from batch {batch.id}")

    def _drop_remaining(self) -> int:
        batch = self.batch
        dropped = len(batch.items)
        batch.items.clear()
        batch.selected_ids.clear()
        batch.state = BatchState.DISCARDED
        logger.info(f"Discarded batch {batch.id} ({dropped} items dropped, {batch.committed_count} committed)")
        return dropped

    def _finish_if_exhausted(self) -> None:
        batch = self.batch
        if batch.items:
            return
        batch.state = BatchState.COMMITTED if batch.committed_count else BatchState.DISCARDED
        logger.info(f"Batch {batch.id} finished as {batch.state.value}")

    def _require_pending(self) -> PendingBatch:
        if not self.has_pending:
            raise PreviewError("No pending batch")
        return self.batch

    def _require_item(self, batch: PendingBatch, note_id: str) -> Note:
        note = batch.find(note_id)
        if note is None:
            raise PreviewError(f"Note {note_id} is not in the pending batch")
        return note
