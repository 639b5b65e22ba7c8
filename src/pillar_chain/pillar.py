"""Choice of the word a reply is grown from."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from .knowledge import KnowledgeBase
from .logging import get_logger
from .selection import RandomSource

LOGGER = get_logger(__name__)


def is_excluded(token: str, exclusions: Sequence[str]) -> bool:
    """Return ``True`` when any exclusion is a (case-sensitive) prefix of ``token``."""
    return any(token.startswith(alias) for alias in exclusions)


def select_pillar(
    knowledge: KnowledgeBase,
    utterance: Optional[Sequence[str]],
    exclusions: Sequence[str],
    source: RandomSource,
) -> int:
    """Return the rarest known, non-excluded word of ``utterance``.

    Falls back to a uniformly random word when there is no utterance or none
    of its words can be used. Ties keep the earliest word. The random fallback
    may return the reserved start/end markers.
    """
    best_id: Optional[int] = None
    best_score = 0
    for token in utterance or ():
        if is_excluded(token, exclusions):
            continue
        word_id = knowledge.find(token)
        if word_id is None:
            continue
        score = knowledge[word_id].occurrences
        if best_id is None or score < best_score:
            best_id, best_score = word_id, score

    if best_id is None:
        best_id = source.draw(len(knowledge))
        LOGGER.debug("No usable seed word; picked %r at random", knowledge[best_id].text)
    else:
        LOGGER.debug("Selected pillar %r (%d occurrences)", knowledge[best_id].text, best_score)
    return best_id
