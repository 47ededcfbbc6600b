"""Storage layer for NoteCanvas."""

from .note_store import NoteStore

__all__ = ["NoteStore"]
