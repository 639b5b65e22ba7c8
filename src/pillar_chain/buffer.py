"""Growable sentence text with explicit, non-raising growth results.

Sizes are counted in UTF-8 bytes and include one terminator slot, so a
rendered pillar ``" w "`` starts at ``len(w) + 3``. Growth is refused (and the
buffer left untouched) when the new size would exceed ``max_size``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum

from .errors import BufferAllocationError
from .knowledge import Word, WordCategory
from .logging import get_logger

LOGGER = get_logger(__name__)


class GrowthStatus(Enum):
    GROWN = "grown"
    OVERFLOW = "overflow"
    ALLOCATION_FAILED = "allocation_failed"


@dataclass(frozen=True)
class Growth:
    status: GrowthStatus
    size: int

    @property
    def ok(self) -> bool:
        return self.status is GrowthStatus.GROWN


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def addition_size(word: Word) -> int:
    """Upper bound on the bytes a word adds: its text plus one separator."""
    return _byte_length(word.text) + 1


def render_pillar(word: Word) -> str:
    category = word.category
    if category is WordCategory.PLAIN:
        return f" {word.text} "
    if category is WordCategory.SUPPRESS_LEFT_SPACE:
        return f"{word.text} "
    if category is WordCategory.SUPPRESS_RIGHT_SPACE:
        return f" {word.text}"
    LOGGER.warning("'%s' was unexpectedly selected as pillar.", word.text)
    return f" [{word.text}] "


def render_right(text: str, word: Word) -> str:
    category = word.category
    if category is WordCategory.SUPPRESS_LEFT_SPACE:
        trimmed = text[:-1] if text.endswith(" ") else text
        return f"{trimmed}{word.text} "
    if category is WordCategory.SUPPRESS_RIGHT_SPACE:
        return f"{text}{word.text}"
    return f"{text}{word.text} "


def render_left(text: str, word: Word) -> str:
    category = word.category
    if category is WordCategory.SUPPRESS_LEFT_SPACE:
        return f"{word.text}{text}"
    if category is WordCategory.SUPPRESS_RIGHT_SPACE:
        trimmed = text[1:] if text.startswith(" ") else text
        return f" {word.text}{trimmed}"
    return f" {word.text}{text}"


class SentenceBuffer:
    """The text of the sentence being built, owned by one request."""

    def __init__(self, text: str, size: int, max_size: int = sys.maxsize) -> None:
        self.text = text
        self.size = size
        self.max_size = max_size

    @classmethod
    def for_pillar(cls, word: Word, max_size: int = sys.maxsize) -> SentenceBuffer:
        """Render ``word`` as the first buffer; raise if it cannot be created."""
        try:
            text = render_pillar(word)
        except MemoryError as exc:
            LOGGER.error("Could not allocate memory to start sentence.")
            raise BufferAllocationError("Could not allocate the initial sentence buffer") from exc
        # Text plus terminator slot.
        size = _byte_length(text) + 1
        if size > max_size:
            LOGGER.error("Pillar %r does not fit in a %d byte sentence.", word.text, max_size)
            raise BufferAllocationError(f"Pillar {word.text!r} exceeds the maximum sentence size")
        return cls(text, size, max_size)

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def grow_right(self, word: Word) -> Growth:
        return self._grow(word, render_right)

    def grow_left(self, word: Word) -> Growth:
        return self._grow(word, render_left)

    def _grow(self, word: Word, render) -> Growth:
        addition = addition_size(word)
        if self.size > self.max_size - addition:
            LOGGER.warning("Sentence construction aborted to avoid size overflow.")
            return Growth(GrowthStatus.OVERFLOW, self.size)
        try:
            text = render(self.text, word)
        except MemoryError:
            LOGGER.error("Could not allocate memory to store new sentence.")
            return Growth(GrowthStatus.ALLOCATION_FAILED, self.size)
        self.text = text
        self.size = _byte_length(text) + 1
        return Growth(GrowthStatus.GROWN, self.size)
