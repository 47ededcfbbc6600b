"""Exception types raised by NoteCanvas components."""


class NoteCanvasError(Exception):
    """Base class for all NoteCanvas errors."""


class CategorizationError(NoteCanvasError):
    """The categorization backend failed or returned an unusable payload."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class LayoutError(NoteCanvasError, ValueError):
    """Layout precondition violated (bad dimensions, NaN anchor, unknown strategy)."""


class PreviewError(NoteCanvasError):
    """Invalid operation on a pending preview batch."""
