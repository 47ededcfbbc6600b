"""Dictation session models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DictationSession:
    """Cancellation token scoped to one dictation or import session.

    A categorization result that resolves after ``cancel()`` must be
    discarded instead of being staged.
    """
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=datetime.now)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True
