"""Left and right growth of a sentence from its context window."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .buffer import SentenceBuffer
from .errors import MissingLinkError
from .knowledge import KnowledgeBase, WordCategory, find_link
from .logging import get_logger
from .selection import RandomSource, pick_index

LOGGER = get_logger(__name__)


class Stop(Enum):
    """Why a direction stopped growing."""

    TERMINATED = "terminated"
    OUT_OF_CREDITS = "out_of_credits"
    MISPLACED_MARKER = "misplaced_marker"
    DEGRADED = "degraded"


@dataclass
class Credits:
    """Word budget shared by both directions of one request."""

    remaining: int

    def spend(self) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


def extend_right(
    knowledge: KnowledgeBase,
    sequence: List[int],
    buffer: SentenceBuffer,
    credits: Credits,
    source: RandomSource,
) -> Stop:
    """Append words to ``buffer`` until the end marker or a stop condition.

    ``sequence`` holds the ``order`` words right of the text already rendered;
    its first slot is the next word to append.
    """
    while credits.spend():
        word_id = sequence[0]
        word = knowledge[word_id]
        if word.category is WordCategory.ENDS_SENTENCE:
            return Stop.TERMINATED
        if word.category is WordCategory.STARTS_SENTENCE:
            LOGGER.warning("START OF LINE should not be suffixable.")
            return Stop.MISPLACED_MARKER

        if not buffer.grow_right(word).ok:
            return Stop.DEGRADED

        del sequence[0]
        key = list(sequence)
        index = find_link(word.forward_links, key)
        if index is None:
            LOGGER.error("Unexpectedly, no forward link was found from %r.", word.text)
            raise MissingLinkError("forward", word.text, knowledge.describe(key))
        link = word.forward_links[index]
        sequence.append(link.targets[pick_index(link.occurrences, link.target_occurrences, source)])
    return Stop.OUT_OF_CREDITS


def extend_left(
    knowledge: KnowledgeBase,
    sequence: List[int],
    buffer: SentenceBuffer,
    credits: Credits,
    source: RandomSource,
) -> Stop:
    """Prepend words to ``buffer`` until the start marker or a stop condition.

    ``sequence`` holds the ``order`` words left of the text already rendered;
    its last slot is the next word to prepend.
    """
    while credits.spend():
        word_id = sequence[-1]
        word = knowledge[word_id]
        if word.category is WordCategory.STARTS_SENTENCE:
            return Stop.TERMINATED
        if word.category is WordCategory.ENDS_SENTENCE:
            LOGGER.warning("END OF LINE should not be prefixable.")
            return Stop.MISPLACED_MARKER

        if not buffer.grow_left(word).ok:
            return Stop.DEGRADED

        del sequence[-1]
        key = list(sequence)
        index = find_link(word.backward_links, key)
        if index is None:
            LOGGER.error("Unexpectedly, no backtracking link was found from %r.", word.text)
            raise MissingLinkError("backward", word.text, knowledge.describe(key))
        link = word.backward_links[index]
        sequence.insert(0, link.targets[pick_index(link.occurrences, link.target_occurrences, source)])
    return Stop.OUT_OF_CREDITS
