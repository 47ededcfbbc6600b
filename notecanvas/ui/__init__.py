"""Terminal UI for NoteCanvas."""

from .preview_screen import PreviewScreen

__all__ = ["PreviewScreen"]
