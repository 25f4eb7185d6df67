"""Text normalization and word-window splitting.

Every character offset produced here indexes into the *normalized* text:
trimmed, with each whitespace run collapsed to one space.
"""

import re
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class TextStats:
    """Word and character counts of a normalized text."""

    word_count: int
    char_count: int


@dataclass(frozen=True)
class TextSegment:
    """A word window with its offsets into the normalized text."""

    index: int
    text: str
    start: int
    end: int

    @property
    def word_count(self) -> int:
        return len(self.text.split(" "))


def normalize_text(text: str) -> str:
    """Trim and collapse whitespace."""
    return _WHITESPACE.sub(" ", text).strip()


def split_words(text: str) -> list[str]:
    """Split text into words on whitespace."""
    return normalize_text(text).split()


def text_stats(text: str) -> TextStats:
    """Count words and characters of the normalized text."""
    normalized = normalize_text(text)
    return TextStats(word_count=len(normalized.split()), char_count=len(normalized))


def split_into_chunks(text: str, chunk_size: int = 1000) -> list[str]:
    """Split text into consecutive chunks of ``chunk_size`` words.

    The last chunk may be shorter.
    """
    return [segment.text for segment in split_into_segments(text, chunk_size)]


def split_into_segments(text: str, segment_size: int) -> list[TextSegment]:
    """Split text into word windows with cumulative character offsets.

    Args:
        text: Input text (normalized internally)
        segment_size: Words per segment

    Returns:
        Segments in document order; empty list for empty text

    Raises:
        ValueError: If segment_size is less than 1
    """
    if segment_size < 1:
        raise ValueError(f"segment_size must be >= 1, got {segment_size}")

    words = split_words(text)
    segments: list[TextSegment] = []
    position = 0

    for index, i in enumerate(range(0, len(words), segment_size)):
        segment_text = " ".join(words[i : i + segment_size])
        end = position + len(segment_text)
        segments.append(TextSegment(index=index, text=segment_text, start=position, end=end))
        # Skip the single space separating this window from the next
        position = end + 1

    return segments
