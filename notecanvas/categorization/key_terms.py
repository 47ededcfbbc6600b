"""Key-term extraction from the existing note corpus."""

import re
from collections import Counter
from typing import Iterable, List

_WORD = re.compile(r"[A-Za-z][A-Za-z0-9\-]{3,}")

STOP_WORDS = frozenset({
    "about", "after", "again", "also", "because", "been", "before", "being",
    "could", "does", "done", "each", "from", "have", "here", "into", "just",
    "like", "make", "more", "need", "next", "note", "notes", "only", "other",
    "over", "should", "some", "such", "than", "that", "their", "them", "then",
    "there", "these", "they", "this", "those", "today", "tomorrow", "very",
    "want", "were", "what", "when", "where", "which", "while", "will", "with",
    "would", "your", "task", "tasks",
})


def extract_key_terms(contents: Iterable[str], limit: int = 50) -> List[str]:
    """Most frequent distinctive words across note contents.

    Terms are compared case-insensitively and reported in the casing of
    their first occurrence. Ties are broken alphabetically.
    """
    counts: Counter = Counter()
    first_seen = {}
    for content in contents:
        for word in _WORD.findall(content or ""):
            key = word.lower()
            if key in STOP_WORDS:
                continue
            counts[key] += 1
            first_seen.setdefault(key, word)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [first_seen[key] for key, _ in ranked[:limit]]
