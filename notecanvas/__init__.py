"""NoteCanvas - dictation and markdown to structured canvas notes."""

__version__ = "0.1.0"
