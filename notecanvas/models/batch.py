"""Pending preview batch models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set

from .notes import Note
from .session import DictationSession


class BatchState(Enum):
    """Lifecycle of a preview batch."""
    PENDING = "pending"
    COMMITTING = "committing"
    COMMITTED = "committed"
    DISCARDED = "discarded"


@dataclass
class PendingBatch:
    """Synthesized notes awaiting user approval."""
    items: List[Note]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)
    state: BatchState = BatchState.PENDING
    session: Optional[DictationSession] = None
    reasoning: Optional[str] = None
    selected_ids: Set[str] = field(default_factory=set)
    committed_count: int = 0

    @property
    def is_open(self) -> bool:
        return self.state in (BatchState.PENDING, BatchState.COMMITTING)

    def find(self, note_id: str) -> Optional[Note]:
        for note in self.items:
            if note.id == note_id:
                return note
        return None
