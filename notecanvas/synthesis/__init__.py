"""Note synthesis for NoteCanvas."""

from .random_source import RandomSource, SeededRandom
from .synthesizer import NoteSynthesizer, CATEGORY_KEYWORD_COLORS

__all__ = [
    "RandomSource",
    "SeededRandom",
    "NoteSynthesizer",
    "CATEGORY_KEYWORD_COLORS",
]
