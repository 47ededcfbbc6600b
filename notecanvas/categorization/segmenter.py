"""Cue-phrase transcript segmentation used when categorization yields nothing."""

import logging
import re
from typing import List, Pattern, Sequence

logger = logging.getLogger(__name__)


# Applied in order; each split runs over every segment produced so far.
TOPIC_CUE_PATTERNS: Sequence[str] = (
    r"\bnext topic\b[:,.\-]?\s*",
    r"\bmoving on\b[:,.\-]?\s*",
    r"\badditionally\b[:,]?\s*",
    r"\bfurthermore\b[:,]?\s*",
    r"\bin addition\b[:,]?\s*",
    r"\balso\b[:,]?\s*",
    r"\bnow let['’]s\b\s*",
    r"\bsection:\s*",
    r"\bpart:\s*",
    r"\bnew item:\s*",
    r"\bpoint number\b[:,.]?\s*",
)

SENTENCE_END = (".", "!", "?")


class TranscriptSegmenter:
    """Splits a transcript into candidate topic segments."""

    def __init__(self, min_segment_length: int = 20, patterns: Sequence[str] = TOPIC_CUE_PATTERNS):
        """Initialize segmenter.

        Args:
            min_segment_length: Segments shorter than this are dropped unless
                               they form a complete sentence on their own
            patterns: Ordered cue regular expressions (case-insensitive)
        """
        self.min_segment_length = min_segment_length
        self.patterns: List[Pattern[str]] = [re.compile(p, re.IGNORECASE) for p in patterns]

    def segment(self, text: str) -> List[str]:
        """Split ``text`` on topic cues.

        Never raises and never returns an empty list: when nothing survives
        filtering, the original text is returned as the only segment.
        """
        try:
            segments = [text]
            for pattern in self.patterns:
                next_segments: List[str] = []
                for segment in segments:
                    parts = [part.strip() for part in pattern.split(segment)]
                    next_segments.extend(part for part in parts if part)
                segments = next_segments

            segments = [s for s in segments if self._is_substantive(s)]
            if not segments:
                return [text]

            logger.debug(f"Segmented transcript into {len(segments)} segments")
            return segments
        except Exception as e:
            logger.error(f"Error segmenting transcript: {e}")
            return [text]

    def _is_substantive(self, segment: str) -> bool:
        if len(segment) >= self.min_segment_length:
            return True
        # Short but complete sentences ("Buy milk.") are kept; cue leftovers are not.
        return segment.endswith(SENTENCE_END) and any(ch.isalpha() for ch in segment)
